import unittest
from unittest.mock import Mock

from order_intake.application.use_cases import SubmitOrderUseCase, UpdateStoreSettingsUseCase, mask_ip
from order_intake.domain.entities import Order, StoreSettings
from order_intake.domain.exceptions import (
    MalformedRequestError,
    OrderValidationError,
    PersistenceError,
    RateLimitExceededError,
)
from order_intake.domain.interfaces import OrderRepository, RateLimitDecision, StoreSettingsRepository
from order_intake.infrastructure.rate_limiting.in_memory_rate_limiter import InMemoryRateLimiter

CLIENT_IP = "198.51.100.23"

VALID_PAYLOAD = {
    "customer_name": "Amine Benali",
    "phone": "0661234567",
    "wilaya": "Oran",
    "commune": "Bir El Djir",
    "delivery_type": "home",
    "product_price": 9200,
    "delivery_price": 700,
    "total_price": 9900,
}


def _created(order: Order) -> Order:
    order.order_id = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
    return order


class TestSubmitOrderUseCase(unittest.TestCase):
    """
    Pruebas del caso de uso SubmitOrderUseCase, aislando el repositorio con mocks
    y usando el limitador real en memoria.
    """

    def setUp(self):
        self.mock_repo = Mock(spec=OrderRepository)
        self.mock_repo.insert_order.side_effect = _created
        self.rate_limiter = InMemoryRateLimiter(max_per_window=5, window_seconds=600)
        self.use_case = SubmitOrderUseCase(order_repository=self.mock_repo, rate_limiter=self.rate_limiter)

    def test_execute_creates_pending_order(self):
        result = self.use_case.execute(CLIENT_IP, dict(VALID_PAYLOAD))

        self.assertEqual(result["order_id"], "7c9e6679-7425-40de-944b-e07fc1f90ae7")
        self.assertEqual(result["remaining"], 4)
        self.mock_repo.insert_order.assert_called_once()

        inserted = self.mock_repo.insert_order.call_args[0][0]
        self.assertIsInstance(inserted, Order)
        self.assertEqual(inserted.status, "pending")
        self.assertIsNone(inserted.product_id)
        # Los importes se pasan tal cual, sin recalcular
        self.assertEqual(inserted.product_price, 9200)
        self.assertEqual(inserted.delivery_price, 700)
        self.assertEqual(inserted.total_price, 9900)

    def test_validation_failure_does_not_insert_but_consumes_quota(self):
        invalid = dict(VALID_PAYLOAD, phone="0441234567", wilaya="")

        with self.assertRaises(OrderValidationError) as ctx:
            self.use_case.execute(CLIENT_IP, invalid)

        self.assertEqual(ctx.exception.errors, ["Invalid phone number format", "Wilaya is required"])
        self.mock_repo.insert_order.assert_not_called()

        # La petición inválida gastó una unidad de cuota
        result = self.use_case.execute(CLIENT_IP, dict(VALID_PAYLOAD))
        self.assertEqual(result["remaining"], 3)

    def test_malformed_payload_raises_and_consumes_quota(self):
        with self.assertRaises(MalformedRequestError):
            self.use_case.execute(CLIENT_IP, None)

        self.mock_repo.insert_order.assert_not_called()
        self.assertEqual(self.rate_limiter.check_and_consume(CLIENT_IP).remaining, 3)

    def test_rate_limited_request_is_rejected_before_validation(self):
        mock_limiter = Mock()
        mock_limiter.check_and_consume.return_value = RateLimitDecision(allowed=False, remaining=0, reset_in=42.5)
        use_case = SubmitOrderUseCase(order_repository=self.mock_repo, rate_limiter=mock_limiter)

        with self.assertRaises(RateLimitExceededError) as ctx:
            use_case.execute(CLIENT_IP, None)

        self.assertEqual(ctx.exception.reset_in, 42.5)
        mock_limiter.check_and_consume.assert_called_once_with(CLIENT_IP)
        self.mock_repo.insert_order.assert_not_called()

    def test_sixth_submission_is_rate_limited(self):
        for _ in range(5):
            self.use_case.execute(CLIENT_IP, dict(VALID_PAYLOAD))

        with self.assertRaises(RateLimitExceededError) as ctx:
            self.use_case.execute(CLIENT_IP, dict(VALID_PAYLOAD))

        self.assertGreater(ctx.exception.reset_in, 0)
        self.assertEqual(self.mock_repo.insert_order.call_count, 5)

    def test_persistence_error_propagates(self):
        self.mock_repo.insert_order.side_effect = PersistenceError("Database error during order insertion.")

        with self.assertRaises(PersistenceError):
            self.use_case.execute(CLIENT_IP, dict(VALID_PAYLOAD))

    def test_mask_ip_truncates(self):
        self.assertEqual(mask_ip("198.51.100.23"), "198.51.1...")


class TestUpdateStoreSettingsUseCase(unittest.TestCase):

    def setUp(self):
        self.mock_repo = Mock(spec=StoreSettingsRepository)
        self.mock_repo.save_settings.side_effect = lambda settings: settings
        self.use_case = UpdateStoreSettingsUseCase(settings_repository=self.mock_repo)
        self.payload = {
            "about_us": "Boutique en ligne",
            "phone": "0551234567",
            "email": "contact@example.com",
            "address": "Alger centre",
            "working_hours_weekdays": "09:00 - 18:00",
            "working_hours_friday": "Fermé",
        }

    def test_updates_existing_settings_row(self):
        self.mock_repo.get_settings.return_value = StoreSettings(settings_id="settings-1")

        result = self.use_case.execute(self.payload)

        saved = self.mock_repo.save_settings.call_args[0][0]
        self.assertEqual(saved.settings_id, "settings-1")
        self.assertEqual(result["id"], "settings-1")
        self.assertEqual(result["email"], "contact@example.com")

    def test_inserts_when_no_settings_exist(self):
        self.mock_repo.get_settings.return_value = None

        self.use_case.execute(self.payload)

        saved = self.mock_repo.save_settings.call_args[0][0]
        self.assertIsNone(saved.settings_id)
        self.assertEqual(saved.working_hours_friday, "Fermé")

    def test_malformed_payload_is_rejected(self):
        with self.assertRaises(MalformedRequestError):
            self.use_case.execute("not json")
        self.mock_repo.save_settings.assert_not_called()
