# order_intake/application/use_cases.py
import logging
from typing import Any, Dict, Optional

from order_intake.domain.entities import Order, StoreSettings
from order_intake.domain.exceptions import (
    MalformedRequestError,
    OrderValidationError,
    RateLimitExceededError,
)
from order_intake.domain.interfaces import OrderRepository, RateLimiter, StoreSettingsRepository
from order_intake.domain.validation import OrderValidator

logger = logging.getLogger(__name__)


def mask_ip(ip: str) -> str:
    """Recorta la IP para los logs."""
    return f"{ip[:8]}..."


class SubmitOrderUseCase:
    """
    Caso de uso: Recibir un pedido contra entrega desde la tienda.
    Depende de OrderRepository y RateLimiter (patrón de inyección de dependencias).

    El límite se consume antes de validar, así que una petición inválida
    también gasta cuota.
    """

    def __init__(self, order_repository: OrderRepository, rate_limiter: RateLimiter,
                 validator: Optional[OrderValidator] = None):
        self.repository = order_repository
        self.rate_limiter = rate_limiter
        self.validator = validator or OrderValidator()

    def execute(self, client_ip: str, payload: Any) -> Dict[str, Any]:
        """
        :param client_ip: identificador del cliente para el límite de peticiones.
        :param payload: cuerpo JSON ya decodificado (None si no se pudo decodificar).
        :return: diccionario con el id del pedido y la cuota restante.
        :raises RateLimitExceededError, MalformedRequestError,
                OrderValidationError, PersistenceError
        """
        # 1. Límite por IP
        decision = self.rate_limiter.check_and_consume(client_ip)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for IP: {mask_ip(client_ip)}")
            raise RateLimitExceededError(decision.reset_in)

        # 2. Validación
        if not isinstance(payload, dict):
            raise MalformedRequestError("Request body must be a JSON object")

        result = self.validator.validate(payload)
        if not result.is_valid:
            raise OrderValidationError(result.errors)

        # 3. Persistencia (PersistenceError se propaga a la capa web)
        created = self.repository.insert_order(Order.from_payload(payload))
        logger.info(f"Order created successfully: {created.order_id} from IP: {mask_ip(client_ip)}")

        return {
            "order_id": created.order_id,
            "remaining": decision.remaining,
            "reset_in": decision.reset_in,
        }


class UpdateStoreSettingsUseCase:
    """
    Caso de uso: Guardar la información de contacto de la tienda.
    Si ya existe una fila de configuración se actualiza; si no, se crea.
    """

    def __init__(self, settings_repository: StoreSettingsRepository):
        self.repository = settings_repository

    def execute(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise MalformedRequestError("Request body must be a JSON object")

        settings = StoreSettings.from_payload(payload)
        existing = self.repository.get_settings()
        if existing is not None:
            settings.settings_id = existing.settings_id

        saved = self.repository.save_settings(settings)
        logger.info(f"Store settings saved (id={saved.settings_id})")
        return saved.to_dict()
