"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
Every value has a safe default: with no environment at all the API boots
with payments and email disabled.
"""
from pathlib import Path
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Core ---
    APP_NAME: str = "InvoiceBolt Launch API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # --- Record store ---
    STORE_BACKEND: str = "memory"  # memory | sql
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'invoicebolt.db'}"

    # --- Payments (Razorpay) ---
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    RAZORPAY_API_BASE: str = "https://api.razorpay.com/v1"
    GATEWAY_TIMEOUT_SECONDS: float = 15.0
    PRICE_INR: int = Field(999, gt=0)
    PRODUCT_DESCRIPTION: str = "InvoiceBolt Lifetime Access"
    CURRENCY: str = "INR"

    # --- Email (SMTP) ---
    SMTP_HOST: str = ""
    SMTP_PORT: int = 0
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_TIMEOUT_SECONDS: float = 10.0
    FROM_EMAIL: str = "InvoiceBolt <no-reply@invoicebolt.example>"
    REPLY_TO: str = "support@invoicebolt.example"
    UNSUBSCRIBE_EMAIL: str = "unsubscribe@invoicebolt.example"

    # --- Links ---
    APP_ORIGIN: str = "https://invoicebolt.example"
    CHECKOUT_URL: str = ""
    WHATSAPP_LINK: str = "https://wa.me/918830981744"
    WHATSAPP_DISPLAY: str = "+91 88309 81744"

    # --- Sample invoice ---
    SAMPLE_BUSINESS_NAME: str = "Your Studio"
    SAMPLE_BUSINESS_GSTIN: str = "27ABCDE1234F1Z5"

    # --- Rate limiting ---
    RATE_LIMIT_ENABLED: bool = True
    PAYMENT_RATE_LIMIT: int = 10
    LEAD_RATE_LIMIT: int = 20
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = str(BASE_DIR / "logs")
    LOG_TO_FILE: bool = False

    @property
    def payments_enabled(self) -> bool:
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)

    @property
    def email_enabled(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_PORT and self.SMTP_USER and self.SMTP_PASS)

    @property
    def price_minor_units(self) -> int:
        """Server-trusted price in paise."""
        return self.PRICE_INR * 100

    @property
    def price_label(self) -> str:
        return f"₹{self.PRICE_INR}"

    @property
    def checkout_url(self) -> str:
        return self.CHECKOUT_URL or f"{self.APP_ORIGIN}/?startPayment=1#pricing"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
