"""Settings defaults and derived values."""

import pydantic
import pytest

from invoicebolt.config import Settings


class TestSettings:
    def test_defaults_disable_payments_and_email(self):
        settings = Settings(_env_file=None, RAZORPAY_KEY_ID="", RAZORPAY_KEY_SECRET="", SMTP_HOST="")

        assert settings.payments_enabled is False
        assert settings.email_enabled is False
        assert settings.STORE_BACKEND == "memory"

    def test_price_is_converted_to_paise(self):
        settings = Settings(_env_file=None, PRICE_INR=999)

        assert settings.price_minor_units == 99900
        assert settings.price_label == "₹999"

    def test_checkout_url_defaults_from_origin(self):
        settings = Settings(_env_file=None, APP_ORIGIN="https://ib.example", CHECKOUT_URL="")
        assert settings.checkout_url == "https://ib.example/?startPayment=1#pricing"

    def test_explicit_checkout_url(self):
        settings = Settings(_env_file=None, CHECKOUT_URL="https://pay.example/x")
        assert settings.checkout_url == "https://pay.example/x"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PRICE_INR", "1499")
        monkeypatch.setenv("SMTP_PORT", "587")

        settings = Settings(_env_file=None)

        assert settings.price_minor_units == 149900
        assert settings.SMTP_PORT == 587

    @pytest.mark.parametrize("price", [0, -1])
    def test_non_positive_price_is_rejected(self, price):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, PRICE_INR=price)
