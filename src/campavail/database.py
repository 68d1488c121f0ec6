"""SQLAlchemy engine and session setup.

Nothing here is created at import time: callers build an engine, hand a
session factory to the record store, and dispose of the engine themselves.
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def create_engine_from_url(url: str, *, echo: bool = False) -> Engine:
    """Create an engine, sharing one connection for in-memory SQLite."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}  # SQLite needs this for multi-thread
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables. Import models first so they register with Base."""
    import campavail.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_db(engine: Engine) -> None:
    import campavail.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
