"""Database session management."""

from collections.abc import Generator

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from backend.app.config import get_settings
from backend.app.db import base

# Create engine - singleton pattern
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Get SQLAlchemy engine singleton."""
    global _engine
    if _engine is None:
        _engine = base.get_engine(get_settings())
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Get session factory singleton."""
    global _session_factory
    if _session_factory is None:
        _session_factory = base.get_session_factory(get_engine())
    return _session_factory


def get_db_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a database session.

    The session is closed when the request finishes; routes commit explicitly.
    """
    factory = get_session_factory()
    session = factory()
    try:
        yield session
    finally:
        session.close()
