"""SQLAlchemy engine and session construction.

Nothing here is created at import time. Whoever builds the engine owns it and
is responsible for disposing of it.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# ``Base`` is the parent class for every SQLAlchemy model defined in models/.
Base = declarative_base()


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url`` with SQLite-friendly defaults."""

    if url.startswith("sqlite"):
        # Connections get shared across FastAPI worker threads.
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if url in ("sqlite://", "sqlite:///:memory:"):
            # An in-memory database lives only as long as its connection.
            kwargs.setdefault("poolclass", StaticPool)
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Records are handed back to callers after the session closes, so keep
    # their loaded state instead of expiring it on commit.
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    from ..models import asset as _asset  # noqa: F401

    Base.metadata.create_all(bind=engine)
