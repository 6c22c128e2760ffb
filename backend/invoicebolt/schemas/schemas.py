"""
Pydantic Schemas — Request & Response models for API validation.
Field names follow the JSON the landing page and Razorpay checkout send.
"""
import logging
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from invoicebolt.utils.validators import clean_optional, is_honeypot_triggered, normalize_email

logger = logging.getLogger("invoicebolt.schemas")

class _Request(BaseModel):
    # Unknown fields (including any client-side "amount") are dropped
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ──────────────── Payment ────────────────

class PaymentCreateRequest(_Request):
    user_id: Optional[str] = Field(None, alias="userId", max_length=64)
    cta_variant: Optional[str] = Field(None, alias="ctaVariant", max_length=64)


class PaymentCreateResponse(BaseModel):
    success: bool = True
    orderId: str
    amount: int
    currency: str
    merchantTransactionId: str
    key: str


class PaymentVerifyRequest(_Request):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    merchant_transaction_id: str = Field(..., alias="merchantTransactionId", min_length=1)
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, validation_alias=AliasChoices("first_name", "firstName"))

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        # Only feeds the confirmation email; a bad address never blocks settlement
        if not isinstance(v, str) or not v.strip():
            return None
        try:
            return normalize_email(v)
        except ValueError:
            logger.warning(f"Ignoring invalid payer email {v!r}")
            return None

    @field_validator("first_name")
    @classmethod
    def clean_first_name(cls, v):
        return clean_optional(v, max_length=64)


class PaymentVerifyResponse(BaseModel):
    success: bool = True
    verified: bool = True


class PaymentFailedRequest(_Request):
    merchant_transaction_id: str = Field(..., alias="merchantTransactionId", min_length=1)
    reason: Optional[str] = Field(None, validation_alias=AliasChoices("reason", "error"))

    @field_validator("reason", mode="before")
    @classmethod
    def stringify_reason(cls, v):
        # Checkout forwards Razorpay's error object as-is
        if v is None or isinstance(v, str):
            return clean_optional(v, max_length=512)
        return clean_optional(str(v), max_length=512)


class PaymentFailedResponse(BaseModel):
    success: bool = True
    status: Optional[str] = None


class PaymentDetail(BaseModel):
    id: str
    merchantTransactionId: str
    amount: int
    status: str
    paymentMethod: Optional[str] = None
    createdAt: datetime
    razorpayPaymentId: Optional[str] = None


class PaymentStatusResponse(BaseModel):
    success: bool = True
    payment: PaymentDetail


# ──────────────── Leads ────────────────

class LeadSubscribeRequest(_Request):
    email: str = ""
    utms: Optional[str] = None
    first_name: Optional[str] = Field(None, validation_alias=AliasChoices("first_name", "firstName"))
    website: Optional[str] = None  # honeypot
    wants_template: bool = Field(False, validation_alias=AliasChoices("wantsTemplate", "wants_template"))

    @property
    def is_bot(self) -> bool:
        return is_honeypot_triggered(self.website)

    @model_validator(mode="before")
    @classmethod
    def check_honeypot(cls, data):
        """Trap bots on the raw body, before any other field is parsed."""
        if not isinstance(data, dict):
            return data
        website = data.get("website")
        if website is not None and not isinstance(website, str):
            website = str(website)
        if is_honeypot_triggered(website):
            return {"website": website}
        return data

    @model_validator(mode="after")
    def validate_unless_trapped(self):
        # A trapped submission must get the normal success shape, so it
        # skips validation entirely
        if self.is_bot:
            return self
        self.email = normalize_email(self.email)
        self.first_name = clean_optional(self.first_name, max_length=64)
        if self.utms is not None:
            self.utms = self.utms[:2048] or None
        return self


class LeadSubscribeResponse(BaseModel):
    success: bool = True


# ──────────────── Generic ────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
    store: str
    payments: str
    email: str
    uptime_seconds: float


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    error_code: Optional[str] = None
