# order_intake/domain/validation.py
"""
Validación de pedidos.

Las reglas replican las restricciones CHECK de la tabla `orders`
(resources/schema.sql), de modo que un pedido válido aquí nunca es rechazado
por la base de datos. Cada campo se evalúa de forma independiente y se
devuelven todos los errores juntos.
"""
import math
import re
import uuid
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .entities import DELIVERY_TYPES

PHONE_PATTERN = re.compile(r"0[567][0-9]{8}")

# Columnas NUMERIC(12, 2): diez dígitos enteros y dos decimales
MAX_AMOUNT = 10 ** 10
AMOUNT_DECIMALS = 2

# Una regla recibe el valor del campo y devuelve un mensaje de error o None
Check = Callable[[Any], Optional[str]]


@dataclass(frozen=True)
class FieldRule:
    field: str
    check: Check


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _text(required_message: str, invalid_message: str, min_length: int = 1,
          max_length: Optional[int] = None, pattern: Optional["re.Pattern"] = None) -> Check:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not value:
            return required_message
        if len(value) < min_length:
            return invalid_message
        if max_length is not None and len(value) > max_length:
            return invalid_message
        if pattern is not None and not pattern.fullmatch(value):
            return invalid_message
        return None
    return check


def _choice(choices: Sequence[str], message: str) -> Check:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str) or value not in choices:
            return message
        return None
    return check


def _is_amount(value: Any) -> bool:
    # bool es subclase de int en Python, pero no es un importe
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # Se compara antes de convertir a float: un entero enorme desborda isfinite
    if not 0 <= value < MAX_AMOUNT:
        return False
    if isinstance(value, float):
        return math.isfinite(value) and Decimal(repr(value)).as_tuple().exponent >= -AMOUNT_DECIMALS
    return True


def _amount(message: str) -> Check:
    def check(value: Any) -> Optional[str]:
        return None if _is_amount(value) else message
    return check


def _optional_uuid(message: str) -> Check:
    def check(value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            return message
        try:
            uuid.UUID(value)
        except ValueError:
            return message
        return None
    return check


ORDER_RULES = (
    FieldRule("customer_name", _text(
        "Customer name is required",
        "Customer name must be between 3 and 100 characters",
        min_length=3, max_length=100)),
    FieldRule("phone", _text(
        "Phone number is required",
        "Invalid phone number format",
        pattern=PHONE_PATTERN)),
    FieldRule("wilaya", _text("Wilaya is required", "Wilaya name is too long", max_length=50)),
    FieldRule("commune", _text("Commune is required", "Commune name is too long", max_length=100)),
    FieldRule("delivery_type", _choice(DELIVERY_TYPES, 'Delivery type must be "office" or "home"')),
    FieldRule("product_id", _optional_uuid("Invalid product id")),
    FieldRule("product_price", _amount("Invalid product price")),
    FieldRule("delivery_price", _amount("Invalid delivery price")),
    FieldRule("total_price", _amount("Invalid total price")),
)

TOTAL_MISMATCH_MESSAGE = "Total price must equal product price plus delivery price"


class OrderValidator:
    """
    Valida un payload de pedido contra ORDER_RULES.

    Con `enforce_total_price=True` además exige total == producto + envío;
    por defecto se confía en el total calculado por el cliente.
    """

    def __init__(self, rules: Sequence[FieldRule] = ORDER_RULES, enforce_total_price: bool = False):
        self.rules = tuple(rules)
        self.enforce_total_price = enforce_total_price

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        if not isinstance(data, dict):
            data = {}

        errors = []
        for rule in self.rules:
            message = rule.check(data.get(rule.field))
            if message:
                errors.append(message)

        if self.enforce_total_price:
            prices = [data.get(name) for name in ("product_price", "delivery_price", "total_price")]
            # Solo se compara si los tres importes son válidos por separado
            if all(_is_amount(price) for price in prices):
                product_price, delivery_price, total_price = prices
                if not math.isclose(product_price + delivery_price, total_price, abs_tol=0.005):
                    errors.append(TOTAL_MISMATCH_MESSAGE)

        return ValidationResult(errors=errors)


def validate_order(data: Dict[str, Any]) -> ValidationResult:
    """Atajo con las reglas por defecto."""
    return OrderValidator().validate(data)
