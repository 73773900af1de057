"""Database package for ORM models, sessions and trip queries."""

from .base import Base
from .session import get_db_session, get_engine, get_session_factory

__all__ = [
    "Base",
    "get_db_session",
    "get_engine",
    "get_session_factory",
]
