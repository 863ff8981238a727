"""Database package for ORM and session management."""

from .base import Base, session_scope
from .session import get_engine, get_session, get_session_factory

__all__ = [
    "Base",
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
]
