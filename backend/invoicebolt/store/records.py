"""
Record types owned by the record store.
Records are frozen snapshots: the store hands out copies, and the only way
to change a payment is RecordStore.transition_payment().
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


@dataclass(frozen=True)
class PaymentRecord:
    id: str
    merchant_transaction_id: str
    amount: int                      # paise
    description: str
    status: PaymentStatus
    gateway_order_id: str
    created_at: datetime
    user_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    payment_method: Optional[str] = None
    failure_reason: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeadRecord:
    id: str
    email: str
    created_at: datetime
    utms: Optional[str] = None


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a status transition request.

    ``changed`` is True only for the call that moved a pending record into a
    terminal state; side effects hang off that flag.
    """

    record: Optional[PaymentRecord]
    changed: bool

    @property
    def found(self) -> bool:
        return self.record is not None
