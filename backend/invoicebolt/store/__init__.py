from invoicebolt.config import Settings
from invoicebolt.store.base import RecordStore
from invoicebolt.store.memory import MemoryRecordStore
from invoicebolt.store.records import LeadRecord, PaymentRecord, PaymentStatus, TransitionResult
from invoicebolt.store.sql import SqlRecordStore


def build_store(settings: Settings) -> RecordStore:
    """Instantiate the record store selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "memory":
        return MemoryRecordStore()
    if settings.STORE_BACKEND == "sql":
        from invoicebolt.database import init_db, make_engine, make_session_factory

        engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        init_db(engine)
        return SqlRecordStore(make_session_factory(engine))
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")


__all__ = [
    "RecordStore", "MemoryRecordStore", "SqlRecordStore", "build_store",
    "PaymentRecord", "LeadRecord", "PaymentStatus", "TransitionResult",
]
