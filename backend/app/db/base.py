"""Database base configuration and utilities."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

# JSON everywhere, JSONB on PostgreSQL
JSONList = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Context manager for a unit of work outside a request.

    Commits on success, rolls back on any exception.

    Example:
        >>> from backend.app.db.session import get_session_factory
        >>> with session_scope(get_session_factory()) as session:
        ...     session.query(User).count()
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
