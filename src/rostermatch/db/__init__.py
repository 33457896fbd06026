"""
Database module for rostermatch.

Provides the snapshot table model and session management.

Usage:
    from rostermatch.db import get_session, RosterSnapshotRow

    with get_session() as session:
        rows = session.query(RosterSnapshotRow).all()
"""

from rostermatch.db.models import Base, RosterSnapshotRow
from rostermatch.db.session import get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "RosterSnapshotRow",
    # Session
    "get_session",
    "get_engine",
]
