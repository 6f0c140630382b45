# order_intake/domain/interfaces.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from .entities import Order, StoreSettings


class OrderRepository(ABC):
    """
    Contrato (Interfaz) para la capa de acceso a datos de Pedidos.
    La capa de Aplicación solo conoce esta Interfaz, no la implementación.
    """
    @abstractmethod
    def insert_order(self, order: Order) -> Order:
        """Inserta un pedido nuevo y retorna la entidad con su id generado."""
        pass


class StoreSettingsRepository(ABC):
    """Contrato para la fila única de configuración de la tienda."""

    @abstractmethod
    def get_settings(self) -> Optional[StoreSettings]:
        pass

    @abstractmethod
    def save_settings(self, settings: StoreSettings) -> StoreSettings:
        """Actualiza la fila existente o inserta una nueva si no hay ninguna."""
        pass


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_in: float  # segundos hasta que se reinicia la ventana


class RateLimiter(ABC):
    """
    Contrato del limitador de peticiones por cliente.

    La implementación en memoria solo acota las peticiones dentro de un proceso.
    Con varias instancias, un límite exacto requiere un almacén compartido
    detrás de esta misma interfaz.
    """

    @abstractmethod
    def check_and_consume(self, key: str) -> RateLimitDecision:
        pass
