"""
Error Taxonomy — every failure a handler can report to a caller.
Each error carries a stable machine-readable code and the HTTP status it
maps to. Best-effort side-effect failures are not represented here: they
are logged and never reach a caller.
"""


class InvoiceBoltError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message, "error_code": self.error_code}


class ConfigurationError(InvoiceBoltError):
    """Gateway or transport credentials required by the operation are missing."""

    status_code = 500
    error_code = "CONFIG_ERROR"


class ValidationError(InvoiceBoltError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class GatewayError(InvoiceBoltError):
    """The payment gateway rejected the call or could not be reached."""

    status_code = 502
    error_code = "GATEWAY_ERROR"


class SignatureMismatchError(InvoiceBoltError):
    status_code = 400
    error_code = "INVALID_SIGNATURE"

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class OrderMismatchError(InvoiceBoltError):
    """A valid signature was presented for a different gateway order."""

    status_code = 400
    error_code = "ORDER_MISMATCH"

    def __init__(self, message: str = "Order does not match transaction"):
        super().__init__(message)


class PaymentNotFoundError(InvoiceBoltError):
    status_code = 404
    error_code = "PAYMENT_NOT_FOUND"

    def __init__(self, message: str = "Payment not found"):
        super().__init__(message)


class StoreError(InvoiceBoltError):
    """The record store could not complete a write."""

    status_code = 500
    error_code = "STORE_ERROR"


class PaymentAlreadyFailedError(InvoiceBoltError):
    """A terminal failed payment is never flipped to success."""

    status_code = 409
    error_code = "PAYMENT_ALREADY_FAILED"

    def __init__(self, message: str = "Payment already marked as failed"):
        super().__init__(message)
