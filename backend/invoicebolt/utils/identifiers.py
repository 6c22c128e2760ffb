"""
Identifier generation for locally created records.
"""
import time
import uuid


def generate_merchant_transaction_id() -> str:
    """Caller-visible correlation key: ``TXN_<epoch-ms>_<8 hex chars>``."""
    return f"TXN_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def generate_record_id() -> str:
    return str(uuid.uuid4())
