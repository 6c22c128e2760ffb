"""
Database Engine & Session Management
SQLAlchemy setup used by the SQL record store.
"""
import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite files get their directory created first."""
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}  # Required for SQLite
        path = database_url.replace("sqlite:///", "", 1)
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each session sees an empty database
            kwargs["poolclass"] = StaticPool
        elif os.path.dirname(path):
            os.makedirs(os.path.dirname(path), exist_ok=True)
    return create_engine(database_url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables. Called once when the SQL store is built."""
    from invoicebolt.models import payment as _payment_model   # noqa: F401
    from invoicebolt.models import lead as _lead_model         # noqa: F401

    Base.metadata.create_all(bind=engine)
