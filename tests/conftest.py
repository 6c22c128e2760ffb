import hashlib
import hmac

import pytest
from fastapi.testclient import TestClient

from invoicebolt.config import Settings
from invoicebolt.main import create_app
from invoicebolt.services.gateway import GatewayOrder
from invoicebolt.services.mailer import EmailTransport
from invoicebolt.store import MemoryRecordStore
from invoicebolt.utils import rate_limiter

KEY_ID = "rzp_test_1234567890"
KEY_SECRET = "test_secret_key"


def sign(order_id: str, payment_id: str, secret: str = KEY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def tamper(signature: str) -> str:
    """Flip the last character of a hex signature."""
    return signature[:-1] + ("0" if signature[-1] != "0" else "1")


class FakeGateway:
    """Records create_order calls and hands out sequential order ids."""

    def __init__(self):
        self.calls = []
        self.error = None

    def create_order(self, amount_minor, currency, receipt, notes=None):
        self.calls.append(
            {"amount_minor": amount_minor, "currency": currency, "receipt": receipt, "notes": notes}
        )
        if self.error is not None:
            raise self.error
        return GatewayOrder(id=f"order_{len(self.calls):04d}", amount=amount_minor, currency=currency)


class FakeTransport(EmailTransport):
    def __init__(self, is_configured: bool = True):
        self.is_configured = is_configured
        self.sent = []
        self.error = None

    def configured(self) -> bool:
        return self.is_configured

    def send(self, message) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)


def make_settings(**overrides) -> Settings:
    values = {
        "RAZORPAY_KEY_ID": KEY_ID,
        "RAZORPAY_KEY_SECRET": KEY_SECRET,
        "PRICE_INR": 999,
        "RATE_LIMIT_ENABLED": False,
        "LOG_TO_FILE": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def store():
    return MemoryRecordStore()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def app(settings, store, gateway, transport):
    return create_app(settings=settings, store=store, gateway=gateway, transport=transport)


@pytest.fixture()
def client(app):
    return TestClient(app)
