"""
Payment Routes — Razorpay checkout for the lifetime-access pre-order.
Handles: order creation, checkout callback verification, client-reported
failures and status lookup.
"""
from fastapi import APIRouter, Depends

from invoicebolt.dependencies import get_payment_service
from invoicebolt.schemas.schemas import (
    PaymentCreateRequest, PaymentCreateResponse,
    PaymentVerifyRequest, PaymentVerifyResponse,
    PaymentFailedRequest, PaymentFailedResponse,
    PaymentDetail, PaymentStatusResponse, ErrorResponse,
)
from invoicebolt.services.payment_service import PaymentService
from invoicebolt.utils.rate_limiter import rate_limit

router = APIRouter(prefix="/api/payment", tags=["Payment"])

ERRORS = {code: {"model": ErrorResponse} for code in (400, 404, 409, 429, 500, 502)}


@router.post("/create", response_model=PaymentCreateResponse, responses=ERRORS)
def create_payment(
    payload: PaymentCreateRequest,
    service: PaymentService = Depends(get_payment_service),
    _throttle: bool = Depends(rate_limit("payment", "PAYMENT_RATE_LIMIT")),
):
    """Create a Razorpay order for the configured price."""
    order = service.create_order(user_id=payload.user_id, cta_variant=payload.cta_variant)
    return PaymentCreateResponse(
        orderId=order.gateway_order_id,
        amount=order.amount,
        currency=order.currency,
        merchantTransactionId=order.merchant_transaction_id,
        key=order.public_key,
    )


@router.post("/verify", response_model=PaymentVerifyResponse, responses=ERRORS)
def verify_payment(
    payload: PaymentVerifyRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """Verify the checkout handler's signature and settle the payment."""
    service.verify(
        gateway_order_id=payload.razorpay_order_id,
        gateway_payment_id=payload.razorpay_payment_id,
        signature=payload.razorpay_signature,
        merchant_transaction_id=payload.merchant_transaction_id,
        payer_email=payload.email,
        first_name=payload.first_name,
    )
    return PaymentVerifyResponse()


@router.post("/failed", response_model=PaymentFailedResponse, responses=ERRORS)
def payment_failed(
    payload: PaymentFailedRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """Record a failure reported by the checkout widget (no signature involved)."""
    record = service.mark_failed(payload.merchant_transaction_id, payload.reason)
    return PaymentFailedResponse(status=record.status.value if record else None)


@router.get("/status/{merchant_transaction_id}", response_model=PaymentStatusResponse, responses=ERRORS)
def payment_status(
    merchant_transaction_id: str,
    service: PaymentService = Depends(get_payment_service),
):
    """Get the current status of a payment."""
    record = service.get_status(merchant_transaction_id)
    return PaymentStatusResponse(
        payment=PaymentDetail(
            id=record.id,
            merchantTransactionId=record.merchant_transaction_id,
            amount=record.amount,
            status=record.status.value,
            paymentMethod=record.payment_method,
            createdAt=record.created_at,
            razorpayPaymentId=record.gateway_payment_id,
        )
    )
