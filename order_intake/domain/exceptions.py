# order_intake/domain/exceptions.py
from typing import List


class OrderIntakeError(Exception):
    """Error base del servicio de pedidos."""


class RateLimitExceededError(OrderIntakeError):
    """El cliente superó su cuota de pedidos. Puede reintentar tras `reset_in` segundos."""

    def __init__(self, reset_in: float):
        super().__init__(f"Rate limit exceeded, resets in {reset_in:.0f}s")
        self.reset_in = reset_in


class OrderValidationError(OrderIntakeError):
    """El payload no cumple las restricciones. Lleva todos los errores, no solo el primero."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class MalformedRequestError(OrderIntakeError):
    """El cuerpo de la petición no es un objeto JSON."""


class PersistenceError(OrderIntakeError):
    """Fallo del backend de persistencia. El detalle solo se registra en el log."""
