# order_intake/domain/entities.py
from datetime import datetime
from dataclasses import dataclass
from typing import Optional, Dict, Any

# Estados posibles de un pedido. Este servicio solo crea pedidos 'pending';
# los cambios posteriores los hace el panel de administración.
ORDER_STATUS_PENDING = "pending"
ORDER_STATUSES = ("pending", "confirmed", "shipped", "delivered", "cancelled")

DELIVERY_TYPES = ("office", "home")


@dataclass
class Order:
    """Entidad central de Pedido (pago contra entrega)."""
    order_id: Optional[str]
    customer_name: str
    phone: str
    wilaya: str
    commune: str
    delivery_type: str
    product_price: float
    delivery_price: float
    total_price: float
    product_id: Optional[str] = None
    status: str = ORDER_STATUS_PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Order":
        """Construye un pedido nuevo a partir de un payload ya validado."""
        return cls(
            order_id=None,
            customer_name=data["customer_name"],
            phone=data["phone"],
            wilaya=data["wilaya"],
            commune=data["commune"],
            delivery_type=data["delivery_type"],
            product_id=data.get("product_id") or None,
            # Los importes se guardan tal como los envía el cliente
            product_price=data["product_price"],
            delivery_price=data["delivery_price"],
            total_price=data["total_price"],
            status=ORDER_STATUS_PENDING,
        )


@dataclass
class StoreSettings:
    """Datos de contacto e información general de la tienda."""
    about_us: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    working_hours_weekdays: Optional[str] = None
    working_hours_friday: Optional[str] = None
    settings_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    EDITABLE_FIELDS = (
        "about_us",
        "phone",
        "email",
        "address",
        "working_hours_weekdays",
        "working_hours_friday",
    )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "StoreSettings":
        return cls(**{field: data.get(field) for field in cls.EDITABLE_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.settings_id}
        for field in self.EDITABLE_FIELDS:
            result[field] = getattr(self, field)
        result["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return result
