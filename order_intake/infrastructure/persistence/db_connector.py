# order_intake/infrastructure/persistence/db_connector.py
import logging

import psycopg2
from psycopg2 import pool
from order_intake.config import Config

logger = logging.getLogger(__name__)

# Pool compartido por los hilos del servidor web
db_pool = None


def init_db_pool():
    """
    Inicializa el pool de conexiones de PostgreSQL.

    Cada conexión lleva `connect_timeout` y un `statement_timeout` de servidor,
    así una consulta colgada no bloquea la petición indefinidamente.
    """
    global db_pool
    if db_pool is None:
        try:
            db_pool = pool.ThreadedConnectionPool(
                minconn=Config.DB_POOL_MIN,
                maxconn=Config.DB_POOL_MAX,
                host=Config.DB_HOST,
                port=Config.DB_PORT,
                database=Config.DB_NAME,
                user=Config.DB_USER,
                password=Config.DB_PASSWORD,
                connect_timeout=Config.DB_CONNECT_TIMEOUT,
                options=f"-c statement_timeout={Config.DB_STATEMENT_TIMEOUT_MS}",
            )
            logger.info("Pool de conexiones a la base de datos inicializado.")
        except psycopg2.Error as e:
            logger.error(f"No se pudo conectar a la base de datos. {e}")
            raise ConnectionError("Fallo en la conexión inicial a la base de datos.")


def get_connection():
    """Obtiene una conexión del pool."""
    if db_pool is None:
        raise ConnectionError("El pool de la base de datos no está inicializado.")
    return db_pool.getconn()


def rollback_connection(conn) -> bool:
    """
    Revierte la transacción en curso. Devuelve False si la conexión ya está
    rota (p. ej. el servidor la cerró) y debe descartarse del pool.
    """
    try:
        conn.rollback()
        return True
    except psycopg2.Error as e:
        logger.warning(f"No se pudo revertir la transacción; se descarta la conexión. {e}")
        return False


def release_connection(conn, close=False):
    """Devuelve una conexión al pool. Con `close=True` el pool la cierra."""
    if db_pool:
        db_pool.putconn(conn, close=close)


def close_db_pool():
    """Cierra todas las conexiones del pool."""
    global db_pool
    if db_pool is not None:
        db_pool.closeall()
        db_pool = None
