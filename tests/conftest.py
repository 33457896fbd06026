"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rostermatch.db.models import Base
from rostermatch.roster.records import EntityRecord


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory; the snapshot table needs nothing
    PostgreSQL-specific.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def live_roster():
    """Live roster with an exact match, a misspelling and an empty row."""
    return [
        EntityRecord(display_name="John Smith", source_id="101", index=0),
        EntityRecord(display_name="Jon Smyth", source_id="102", index=1),
        EntityRecord(display_name="", source_id="0", index=2),
    ]


@pytest.fixture
def stored_roster():
    """Target roster snapshot matching live_roster's first entity."""
    return [
        EntityRecord(display_name="John Smith", reference="/john-smith/profil/spieler/1", index=0),
        EntityRecord(display_name="Carlos Ruiz", reference="/carlos-ruiz/profil/spieler/2", index=1),
    ]
