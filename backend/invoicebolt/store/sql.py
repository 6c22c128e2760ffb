"""
SQLAlchemy record store.
Status transitions are a single conditional UPDATE guarded on
``status = 'pending'``, so duplicate gateway callbacks serialize in the
database instead of in process memory.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from invoicebolt.errors import StoreError
from invoicebolt.models.lead import Lead
from invoicebolt.models.payment import Payment
from invoicebolt.store.base import RecordStore
from invoicebolt.store.records import LeadRecord, PaymentRecord, PaymentStatus, TransitionResult
from invoicebolt.utils.identifiers import generate_record_id

logger = logging.getLogger("invoicebolt.store")


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_payment_record(row: Payment) -> PaymentRecord:
    return PaymentRecord(
        id=row.id,
        merchant_transaction_id=row.merchant_transaction_id,
        amount=row.amount,
        description=row.description,
        status=PaymentStatus(row.status),
        gateway_order_id=row.gateway_order_id,
        user_id=row.user_id,
        gateway_payment_id=row.gateway_payment_id,
        payment_method=row.payment_method,
        failure_reason=row.failure_reason,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_lead_record(row: Lead) -> LeadRecord:
    return LeadRecord(id=row.id, email=row.email, utms=row.utms, created_at=_aware(row.created_at))


class SqlRecordStore(RecordStore):
    """Record store backed by any SQLAlchemy-supported database."""

    backend = "sql"

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # ─── Payments ────────────────────────────────────────────────────

    def create_payment(self, merchant_transaction_id, amount, description, gateway_order_id, user_id=None):
        row = Payment(
            id=generate_record_id(),
            merchant_transaction_id=merchant_transaction_id,
            amount=amount,
            description=description,
            user_id=user_id,
            status=PaymentStatus.PENDING.value,
            gateway_order_id=gateway_order_id,
            created_at=datetime.now(timezone.utc),
        )
        with self._session_factory() as db:
            try:
                db.add(row)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StoreError(f"Could not persist payment {merchant_transaction_id}") from exc
            return _to_payment_record(row)

    def get_payment(self, payment_id: str) -> Optional[PaymentRecord]:
        with self._session_factory() as db:
            row = db.get(Payment, payment_id)
            return _to_payment_record(row) if row else None

    def get_payment_by_merchant_transaction_id(self, merchant_transaction_id: str) -> Optional[PaymentRecord]:
        with self._session_factory() as db:
            row = db.execute(
                select(Payment).where(Payment.merchant_transaction_id == merchant_transaction_id)
            ).scalar_one_or_none()
            return _to_payment_record(row) if row else None

    def transition_payment(
        self,
        merchant_transaction_id,
        status,
        gateway_payment_id=None,
        payment_method=None,
        failure_reason=None,
    ) -> TransitionResult:
        status = self._check_terminal(status)
        values = {"status": status.value, "updated_at": datetime.now(timezone.utc)}
        if gateway_payment_id:
            values["gateway_payment_id"] = gateway_payment_id
        if status is PaymentStatus.SUCCESS:
            values["payment_method"] = payment_method
        else:
            values["failure_reason"] = failure_reason

        with self._session_factory() as db:
            result = db.execute(
                update(Payment)
                .where(
                    Payment.merchant_transaction_id == merchant_transaction_id,
                    Payment.status == PaymentStatus.PENDING.value,
                )
                .values(**values)
            )
            db.commit()
            changed = result.rowcount == 1

        record = self.get_payment_by_merchant_transaction_id(merchant_transaction_id)
        if record is not None and not changed and record.status is not status:
            logger.warning(
                f"Ignoring {status.value} for {merchant_transaction_id}: already {record.status.value}"
            )
        return TransitionResult(record=record, changed=changed)

    def count_payments(self) -> int:
        with self._session_factory() as db:
            return db.execute(select(func.count(Payment.id))).scalar_one()

    # ─── Leads ───────────────────────────────────────────────────────

    def create_lead(self, email: str, utms: Optional[str] = None) -> Tuple[LeadRecord, bool]:
        existing = self.get_lead_by_email(email)
        if existing is not None:
            return existing, False

        row = Lead(id=generate_record_id(), email=email, utms=utms, created_at=datetime.now(timezone.utc))
        with self._session_factory() as db:
            try:
                db.add(row)
                db.commit()
                return _to_lead_record(row), True
            except IntegrityError:
                # Lost the race against a concurrent insert of the same email
                db.rollback()

        existing = self.get_lead_by_email(email)
        if existing is None:
            raise StoreError("Could not persist lead")
        return existing, False

    def get_lead_by_email(self, email: str) -> Optional[LeadRecord]:
        with self._session_factory() as db:
            row = db.execute(select(Lead).where(Lead.email == email)).scalar_one_or_none()
            return _to_lead_record(row) if row else None

    def count_leads(self) -> int:
        with self._session_factory() as db:
            return db.execute(select(func.count(Lead.id))).scalar_one()
