"""
Engines and sessions for the SQL storage medium, one engine per database URL.

The schema is a single key-value table, so it is created on demand by
``create_schema`` instead of through migrations.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()

_engines: dict[str, Engine] = {}
_sessionmakers: dict[str, sessionmaker] = {}


def engine_for(url: str | None) -> Engine:
    value = (url or "").strip()
    if not value:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL storage backend.")
    if value not in _engines:
        # pooled SQLite connections are shared between the threads of one process
        options = {"connect_args": {"check_same_thread": False}} if value.startswith("sqlite") else {}
        _engines[value] = create_engine(value, future=True, pool_pre_ping=True, **options)
        _sessionmakers[value] = sessionmaker(bind=_engines[value], autoflush=False, autocommit=False, future=True)
    return _engines[value]


@contextmanager
def open_session(url: str) -> Iterator[Session]:
    engine_for(url)
    session: Session = _sessionmakers[url.strip()]()
    try:
        yield session
    finally:
        session.close()


def create_schema(url: str) -> None:
    """Create the storage table on ``url`` if it does not exist yet."""
    from . import models  # noqa: F401  # registers StorageItem on Base.metadata

    Base.metadata.create_all(bind=engine_for(url))


def dispose_engines() -> None:
    """Close every pooled connection and forget the cached engines."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _sessionmakers.clear()
