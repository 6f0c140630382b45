# order_intake/infrastructure/persistence/pg_repository.py
import logging
from typing import Optional

import psycopg2
from order_intake.domain.entities import Order, StoreSettings
from order_intake.domain.exceptions import PersistenceError
from order_intake.domain.interfaces import OrderRepository, StoreSettingsRepository
from .db_connector import get_connection, release_connection, rollback_connection

logger = logging.getLogger(__name__)


class PgOrderRepository(OrderRepository):
    """
    Implementación concreta que persiste Pedidos en PostgreSQL usando psycopg2.
    """

    def insert_order(self, order: Order) -> Order:
        """
        Inserta el pedido con estado 'pending' y retorna la entidad con el id
        y las fechas generadas por la base de datos.
        """
        conn = None
        broken = False
        try:
            conn = get_connection()
            cursor = conn.cursor()

            order_sql = """
                INSERT INTO orders (customer_name, phone, wilaya, commune, delivery_type,
                                    product_id, product_price, delivery_price, total_price, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id, created_at, updated_at;
            """

            cursor.execute(order_sql, (
                order.customer_name,
                order.phone,
                order.wilaya,
                order.commune,
                order.delivery_type,
                order.product_id,
                order.product_price,
                order.delivery_price,
                order.total_price,
                order.status,
            ))

            new_id, created_at, updated_at = cursor.fetchone()
            conn.commit()

            order.order_id = str(new_id)
            order.created_at = created_at
            order.updated_at = updated_at
            return order

        except (psycopg2.Error, ConnectionError) as e:
            logger.error(f"Database error al insertar pedido: {e}")
            if conn:
                broken = not rollback_connection(conn)
            raise PersistenceError("Database error during order insertion.") from e
        finally:
            if conn:
                release_connection(conn, close=broken)


class PgStoreSettingsRepository(StoreSettingsRepository):
    """Persistencia de la fila de configuración de la tienda."""

    COLUMNS = ("id",) + StoreSettings.EDITABLE_FIELDS + ("updated_at",)

    def _row_to_settings(self, row) -> StoreSettings:
        data = dict(zip(self.COLUMNS, row))
        settings_id = data.pop("id")
        return StoreSettings(settings_id=str(settings_id), **data)

    def get_settings(self) -> Optional[StoreSettings]:
        conn = None
        broken = False
        try:
            conn = get_connection()
            cursor = conn.cursor()
            cursor.execute(f"SELECT {', '.join(self.COLUMNS)} FROM store_settings ORDER BY created_at LIMIT 1;")
            row = cursor.fetchone()
            return self._row_to_settings(row) if row else None

        except (psycopg2.Error, ConnectionError) as e:
            logger.error(f"Database error al consultar la configuración de la tienda: {e}")
            if conn:
                broken = not rollback_connection(conn)
            raise PersistenceError("Database error during settings retrieval.") from e
        finally:
            if conn:
                release_connection(conn, close=broken)

    def save_settings(self, settings: StoreSettings) -> StoreSettings:
        conn = None
        broken = False
        fields = StoreSettings.EDITABLE_FIELDS
        values = [getattr(settings, name) for name in fields]
        try:
            conn = get_connection()
            cursor = conn.cursor()

            if settings.settings_id:
                assignments = ", ".join(f"{name} = %s" for name in fields)
                cursor.execute(
                    f"UPDATE store_settings SET {assignments}, updated_at = now() "
                    f"WHERE id = %s RETURNING {', '.join(self.COLUMNS)};",
                    values + [settings.settings_id],
                )
            else:
                placeholders = ", ".join(["%s"] * len(fields))
                cursor.execute(
                    f"INSERT INTO store_settings ({', '.join(fields)}) VALUES ({placeholders}) "
                    f"RETURNING {', '.join(self.COLUMNS)};",
                    values,
                )

            row = cursor.fetchone()
            conn.commit()
            if row is None:
                raise PersistenceError(f"Store settings {settings.settings_id} not found.")
            return self._row_to_settings(row)

        except (psycopg2.Error, ConnectionError) as e:
            logger.error(f"Database error al guardar la configuración de la tienda: {e}")
            if conn:
                broken = not rollback_connection(conn)
            raise PersistenceError("Database error during settings update.") from e
        finally:
            if conn:
                release_connection(conn, close=broken)
