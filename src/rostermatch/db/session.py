"""
Database session management for rostermatch.

Provides the SQLAlchemy engine and session factory. Uses the settings
from config.py.

Usage:
    from rostermatch.db import get_session

    with get_session() as session:
        store = DBSnapshotStore(session)
        store.save(records)
        # Commits automatically on exit, rolls back on exception
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from rostermatch.config import settings


def get_engine(url: str | None = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    Pre-ping is enabled so stale connections are replaced transparently.
    SQL echo follows settings.db_echo.
    """
    return create_engine(
        url or settings.database_url,
        pool_pre_ping=True,  # Verify connection is alive before using
        echo=settings.db_echo,
    )


# Created lazily so importing the package never touches the database
_engine = None
_session_factory = None


def _get_session_factory() -> sessionmaker:
    """Get or create the singleton session factory."""
    global _engine, _session_factory
    if _session_factory is None:
        _engine = get_engine()
        _session_factory = sessionmaker(
            autocommit=False,  # We'll handle commits explicitly
            autoflush=False,  # Don't auto-flush before queries (more control)
            bind=_engine,
        )
    return _session_factory


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.
    This is the recommended way to use sessions in scripts.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
