"""
Payment Service — order initiation, signature verification and status
transitions for launch pre-orders.

Ordering rules:
- The gateway order is created before anything is written locally, so a
  failed gateway call never leaves a pending record behind.
- Confirmation email is sent only by the call that performed the
  pending -> success transition, after the store has been updated.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from invoicebolt.config import Settings
from invoicebolt.errors import (
    ConfigurationError, OrderMismatchError, PaymentAlreadyFailedError, PaymentNotFoundError, ValidationError,
    SignatureMismatchError, StoreError,
)
from invoicebolt.services.gateway import GatewayOrder
from invoicebolt.services.notification_service import DispatchOutcome, NotificationService
from invoicebolt.store.base import RecordStore
from invoicebolt.store.records import PaymentRecord, PaymentStatus
from invoicebolt.utils.hashing import verify_signature
from invoicebolt.utils.identifiers import generate_merchant_transaction_id

logger = logging.getLogger("invoicebolt.payments")

PAYMENT_METHOD_LABEL = "UPI/Card/NetBanking"


@dataclass(frozen=True)
class OrderCreated:
    gateway_order_id: str
    amount: int
    currency: str
    merchant_transaction_id: str
    public_key: str


@dataclass(frozen=True)
class VerificationResult:
    record: PaymentRecord
    newly_verified: bool
    # None when this call did not trigger a confirmation email
    notification: Optional[DispatchOutcome] = None


class PaymentService:
    """Drives a PaymentRecord from pending to a terminal state."""

    def __init__(self, settings: Settings, store: RecordStore, gateway, notifications: NotificationService):
        self.settings = settings
        self.store = store
        self.gateway = gateway
        self.notifications = notifications

    def create_order(self, user_id: Optional[str] = None, cta_variant: Optional[str] = None) -> OrderCreated:
        """Create a gateway order for the configured price and record it as pending.

        Amount and description always come from settings, never from the caller.
        """
        if not self.settings.payments_enabled:
            raise ConfigurationError("Missing Razorpay keys")

        amount = self.settings.price_minor_units
        if amount <= 0:
            raise ValidationError("Amount must be a positive number of paise")
        merchant_transaction_id = generate_merchant_transaction_id()
        description = self.settings.PRODUCT_DESCRIPTION

        order: GatewayOrder = self.gateway.create_order(
            amount_minor=amount,
            currency=self.settings.CURRENCY,
            receipt=merchant_transaction_id,
            notes={
                "description": description,
                "userId": user_id or "anonymous",
                "ctaVariant": cta_variant or "na",
            },
        )

        try:
            self.store.create_payment(
                merchant_transaction_id=merchant_transaction_id,
                amount=amount,
                description=description,
                gateway_order_id=order.id,
                user_id=user_id,
            )
        except Exception as e:
            logger.error(
                f"Gateway order {order.id} created but {merchant_transaction_id} was not stored: {e}",
                exc_info=True,
            )
            if isinstance(e, StoreError):
                raise
            raise StoreError("Could not record payment") from e

        logger.info(f"Payment {merchant_transaction_id} pending on order {order.id} ({amount} paise)")
        return OrderCreated(
            gateway_order_id=order.id,
            amount=order.amount,
            currency=order.currency,
            merchant_transaction_id=merchant_transaction_id,
            public_key=self.settings.RAZORPAY_KEY_ID,
        )

    def verify(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
        merchant_transaction_id: str,
        payer_email: Optional[str] = None,
        first_name: Optional[str] = None,
    ) -> VerificationResult:
        """Check a checkout callback signature and settle the payment.

        Raises:
            ConfigurationError: gateway secret not configured.
            SignatureMismatchError: signature invalid; the record is marked failed.
            PaymentNotFoundError: signature valid but no local record exists.
            OrderMismatchError: signature valid for a different gateway order.
            PaymentAlreadyFailedError: the record had already settled as failed.
        """
        secret = self.settings.RAZORPAY_KEY_SECRET
        if not secret:
            raise ConfigurationError("Missing Razorpay secret")

        if not verify_signature(gateway_order_id, gateway_payment_id, signature, secret):
            result = self.store.transition_payment(
                merchant_transaction_id, PaymentStatus.FAILED, failure_reason="Invalid signature",
            )
            logger.warning(
                f"Invalid signature for {merchant_transaction_id} "
                f"(record {'found' if result.found else 'missing'}, changed={result.changed})"
            )
            raise SignatureMismatchError()

        current = self.store.get_payment_by_merchant_transaction_id(merchant_transaction_id)
        if current is None:
            logger.warning(f"Valid signature for unknown transaction {merchant_transaction_id}")
            raise PaymentNotFoundError()
        if current.gateway_order_id != gateway_order_id:
            logger.warning(
                f"Order {gateway_order_id} does not belong to {merchant_transaction_id} "
                f"(expected {current.gateway_order_id})"
            )
            raise OrderMismatchError()

        result = self.store.transition_payment(
            merchant_transaction_id,
            PaymentStatus.SUCCESS,
            gateway_payment_id=gateway_payment_id,
            payment_method=PAYMENT_METHOD_LABEL,
        )
        record = result.record

        if record.status is not PaymentStatus.SUCCESS:
            # Already settled as failed; a late valid signature does not flip it
            logger.warning(f"{merchant_transaction_id} already {record.status.value}, keeping it")
            raise PaymentAlreadyFailedError()

        if not result.changed:
            logger.info(f"{merchant_transaction_id} already verified")
            return VerificationResult(record=record, newly_verified=False)

        logger.info(f"Payment {merchant_transaction_id} verified ({gateway_payment_id})")
        notification = None
        if payer_email:
            notification = self.notifications.send_payment_confirmed(
                to=payer_email,
                first_name=first_name,
                order_id=merchant_transaction_id,
                amount=self.settings.price_label,
                payment_method=record.payment_method or PAYMENT_METHOD_LABEL,
                paid_at=record.updated_at.strftime("%d %b %Y, %I:%M %p UTC"),
            )
        return VerificationResult(record=record, newly_verified=True, notification=notification)

    def mark_failed(self, merchant_transaction_id: str, reason: Optional[str] = None) -> Optional[PaymentRecord]:
        """Record a checkout failure reported by the client. Terminal states are kept."""
        result = self.store.transition_payment(
            merchant_transaction_id, PaymentStatus.FAILED, failure_reason=reason or "Checkout failed",
        )
        if not result.found:
            logger.warning(f"Failure reported for unknown transaction {merchant_transaction_id}")
        elif result.changed:
            logger.info(f"Payment {merchant_transaction_id} failed: {reason or 'no reason given'}")
        return result.record

    def get_status(self, merchant_transaction_id: str) -> PaymentRecord:
        record = self.store.get_payment_by_merchant_transaction_id(merchant_transaction_id)
        if record is None:
            raise PaymentNotFoundError()
        return record
