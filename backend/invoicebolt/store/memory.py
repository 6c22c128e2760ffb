"""
In-memory record store.
Default backend for the landing page deployment and the store used in tests.
"""
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from invoicebolt.errors import StoreError
from invoicebolt.store.base import RecordStore
from invoicebolt.store.records import LeadRecord, PaymentRecord, PaymentStatus, TransitionResult
from invoicebolt.utils.identifiers import generate_record_id

logger = logging.getLogger("invoicebolt.store")


class MemoryRecordStore(RecordStore):
    """Dict-backed store with one lock per merchant transaction id."""

    backend = "memory"

    def __init__(self):
        self._payments: Dict[str, PaymentRecord] = {}       # merchant_transaction_id -> record
        self._payment_ids: Dict[str, str] = {}              # id -> merchant_transaction_id
        self._leads: Dict[str, LeadRecord] = {}             # email -> record
        self._lock = threading.Lock()
        self._key_locks: Dict[str, threading.Lock] = {}

    def _key_lock(self, merchant_transaction_id: str) -> Optional[threading.Lock]:
        """Lock of an existing payment; created with the record, never for unknown ids."""
        with self._lock:
            return self._key_locks.get(merchant_transaction_id)

    # ─── Payments ────────────────────────────────────────────────────

    def create_payment(self, merchant_transaction_id, amount, description, gateway_order_id, user_id=None):
        record = PaymentRecord(
            id=generate_record_id(),
            merchant_transaction_id=merchant_transaction_id,
            amount=amount,
            description=description,
            status=PaymentStatus.PENDING,
            gateway_order_id=gateway_order_id,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            if merchant_transaction_id in self._payments:
                raise StoreError(f"Duplicate transaction id {merchant_transaction_id}")
            self._payments[merchant_transaction_id] = record
            self._payment_ids[record.id] = merchant_transaction_id
            self._key_locks[merchant_transaction_id] = threading.Lock()
        return record

    def get_payment(self, payment_id: str) -> Optional[PaymentRecord]:
        with self._lock:
            key = self._payment_ids.get(payment_id)
            return self._payments.get(key) if key else None

    def get_payment_by_merchant_transaction_id(self, merchant_transaction_id: str) -> Optional[PaymentRecord]:
        with self._lock:
            return self._payments.get(merchant_transaction_id)

    def transition_payment(
        self,
        merchant_transaction_id,
        status,
        gateway_payment_id=None,
        payment_method=None,
        failure_reason=None,
    ) -> TransitionResult:
        status = self._check_terminal(status)

        lock = self._key_lock(merchant_transaction_id)
        if lock is None:
            return TransitionResult(record=None, changed=False)

        with lock:
            current = self.get_payment_by_merchant_transaction_id(merchant_transaction_id)
            if current.status.is_terminal:
                if current.status is not status:
                    logger.warning(
                        f"Ignoring {status.value} for {merchant_transaction_id}: already {current.status.value}"
                    )
                return TransitionResult(record=current, changed=False)

            updated = replace(
                current,
                status=status,
                gateway_payment_id=gateway_payment_id or current.gateway_payment_id,
                payment_method=payment_method if status is PaymentStatus.SUCCESS else None,
                failure_reason=failure_reason if status is PaymentStatus.FAILED else None,
                updated_at=datetime.now(timezone.utc),
            )
            with self._lock:
                self._payments[merchant_transaction_id] = updated
            return TransitionResult(record=updated, changed=True)

    def count_payments(self) -> int:
        with self._lock:
            return len(self._payments)

    # ─── Leads ───────────────────────────────────────────────────────

    def create_lead(self, email: str, utms: Optional[str] = None) -> Tuple[LeadRecord, bool]:
        with self._lock:
            existing = self._leads.get(email)
            if existing is not None:
                return existing, False
            lead = LeadRecord(
                id=generate_record_id(),
                email=email,
                utms=utms,
                created_at=datetime.now(timezone.utc),
            )
            self._leads[email] = lead
            return lead, True

    def get_lead_by_email(self, email: str) -> Optional[LeadRecord]:
        with self._lock:
            return self._leads.get(email)

    def count_leads(self) -> int:
        with self._lock:
            return len(self._leads)
