from invoicebolt.utils.hashing import generate_signature, verify_signature
from invoicebolt.utils.identifiers import generate_merchant_transaction_id, generate_record_id
from invoicebolt.utils.validators import normalize_email, is_honeypot_triggered, clean_optional

__all__ = [
    "generate_signature", "verify_signature",
    "generate_merchant_transaction_id", "generate_record_id",
    "normalize_email", "is_honeypot_triggered", "clean_optional",
]
