"""
Record Store interface — the single owner of payment and lead records.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from invoicebolt.store.records import LeadRecord, PaymentRecord, PaymentStatus, TransitionResult


class RecordStore(ABC):
    """Create/read/transition operations keyed by merchant transaction id or email.

    Implementations must make ``transition_payment`` atomic per transaction
    id: only a ``pending`` record may change, so the first terminal state
    written wins and later calls observe it unchanged.
    """

    backend: str = "abstract"

    @abstractmethod
    def create_payment(
        self,
        merchant_transaction_id: str,
        amount: int,
        description: str,
        gateway_order_id: str,
        user_id: Optional[str] = None,
    ) -> PaymentRecord:
        """Persist a new pending payment. Raises StoreError on failure."""

    @abstractmethod
    def get_payment(self, payment_id: str) -> Optional[PaymentRecord]:
        ...

    @abstractmethod
    def get_payment_by_merchant_transaction_id(self, merchant_transaction_id: str) -> Optional[PaymentRecord]:
        ...

    @abstractmethod
    def transition_payment(
        self,
        merchant_transaction_id: str,
        status: PaymentStatus,
        gateway_payment_id: Optional[str] = None,
        payment_method: Optional[str] = None,
        failure_reason: Optional[str] = None,
    ) -> TransitionResult:
        ...

    @abstractmethod
    def create_lead(self, email: str, utms: Optional[str] = None) -> Tuple[LeadRecord, bool]:
        """Insert a lead unless the email exists. Returns (lead, created)."""

    @abstractmethod
    def get_lead_by_email(self, email: str) -> Optional[LeadRecord]:
        ...

    @abstractmethod
    def count_leads(self) -> int:
        ...

    @abstractmethod
    def count_payments(self) -> int:
        ...

    @staticmethod
    def _check_terminal(status: PaymentStatus) -> PaymentStatus:
        status = PaymentStatus(status)
        if not status.is_terminal:
            raise ValueError("Payments can only transition to a terminal status")
        return status
