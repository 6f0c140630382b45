from datetime import datetime

from order_intake.domain.entities import (
    DELIVERY_TYPES,
    ORDER_STATUSES,
    Order,
    StoreSettings,
)

PAYLOAD = {
    "customer_name": "Nadia Saidi",
    "phone": "0771234567",
    "wilaya": "Constantine",
    "commune": "El Khroub",
    "delivery_type": "office",
    "product_id": "",
    "product_price": 9200,
    "delivery_price": 500,
    "total_price": 9700,
}


class TestDomainEntities:
    """Pruebas unitarias de las entidades Order y StoreSettings."""

    def test_order_from_payload_is_pending_without_id(self):
        order = Order.from_payload(PAYLOAD)
        assert order.order_id is None
        assert order.status == "pending"
        assert order.customer_name == "Nadia Saidi"
        assert order.total_price == 9700

    def test_empty_product_id_becomes_none(self):
        assert Order.from_payload(PAYLOAD).product_id is None

    def test_product_id_is_kept_when_present(self):
        data = dict(PAYLOAD, product_id="3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b")
        assert Order.from_payload(data).product_id == "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"

    def test_status_and_delivery_constants(self):
        assert ORDER_STATUSES[0] == "pending"
        assert set(DELIVERY_TYPES) == {"office", "home"}

    def test_store_settings_from_payload_ignores_unknown_fields(self):
        settings = StoreSettings.from_payload({"email": "a@b.dz", "id": "hack", "phone": "0551234567"})
        assert settings.email == "a@b.dz"
        assert settings.phone == "0551234567"
        assert settings.settings_id is None
        assert settings.about_us is None

    def test_store_settings_to_dict(self):
        settings = StoreSettings(settings_id="s-1", about_us="Hello", updated_at=datetime(2025, 1, 15, 10, 30))
        data = settings.to_dict()
        assert data["id"] == "s-1"
        assert data["about_us"] == "Hello"
        assert data["updated_at"] == "2025-01-15T10:30:00"
        assert set(data) == {"id", "updated_at", *StoreSettings.EDITABLE_FIELDS}
