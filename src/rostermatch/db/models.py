"""
SQLAlchemy ORM models for rostermatch.

Only the target roster snapshot is persisted. It is stored as an opaque
blob per key; the encoding lives in roster/snapshot.py so the database
never needs to know what a roster entry looks like.

Tables:
- roster_snapshots: One saved target roster per key
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class RosterSnapshotRow(Base):
    """A saved target roster, overwritten wholesale on every save."""

    __tablename__ = "roster_snapshots"

    key: Mapped[str] = mapped_column(String(120), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    saved_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RosterSnapshotRow(key='{self.key}', saved_at={self.saved_at})>"
