"""
Cryptographic Hashing Utilities — HMAC-SHA256 signatures for gateway callbacks.
"""
import hashlib
import hmac


def generate_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id`` keyed with the gateway secret.

    This is the value Razorpay's checkout returns as ``razorpay_signature``.
    """
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """Constant-time comparison of a callback signature against the expected one."""
    if not signature:
        return False
    expected = generate_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
