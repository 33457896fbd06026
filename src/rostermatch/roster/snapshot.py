"""
Stored target roster snapshots.

A snapshot is the target roster as it looked when someone last captured
it. Stores keep it as an opaque text blob under a key, together with the
time it was saved. The blob is a JSON list of entries:

    [{"display_name": "John Smith", "reference": "/profil/1", "source_id": ""}]

Older captures used {"fullName": ..., "profileUrl": ...}; those keys are
still accepted when reading.

load() returns None when nothing was ever saved, and an empty list when
an empty roster was saved. The reconciliation service relies on that
difference.
"""

import logging
from datetime import datetime
from typing import Optional, Protocol, Sequence

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError, field_validator
from sqlalchemy.orm import Session

from rostermatch.config import settings
from rostermatch.db.models import RosterSnapshotRow
from rostermatch.roster.errors import CorruptBaselineData
from rostermatch.roster.records import EntityRecord

logger = logging.getLogger(__name__)


class SnapshotEntry(BaseModel):
    """One entry of the stored blob."""

    display_name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("display_name", "fullName"),
    )
    reference: str = Field(
        default="",
        validation_alias=AliasChoices("reference", "profileUrl"),
    )
    source_id: str = Field(
        default="",
        validation_alias=AliasChoices("source_id", "id"),
    )

    @field_validator("display_name")
    @classmethod
    def require_visible_name(cls, v: str) -> str:
        # A blank name would reconcile as a nameless missing entity
        if not v.strip():
            raise ValueError("display_name must not be blank")
        return v

    @field_validator("reference", "source_id", mode="before")
    @classmethod
    def coerce_optional_text(cls, v):
        # Legacy captures may hold null links and numeric ids
        if v is None:
            return ""
        if isinstance(v, int):
            return str(v)
        return v


_entries_adapter = TypeAdapter(list[SnapshotEntry])


def encode_snapshot(records: Sequence[EntityRecord]) -> str:
    """
    Serialize records to the blob format.

    Raises:
        ValueError: If a record has an empty display name (pydantic's
            ValidationError is a ValueError)
    """
    entries = [
        SnapshotEntry(
            display_name=record.display_name,
            reference=record.reference,
            source_id=record.source_id,
        )
        for record in records
    ]
    return _entries_adapter.dump_json(entries).decode("utf-8")


def decode_snapshot(payload: str) -> list[EntityRecord]:
    """
    Parse a blob back into records, indexed by saved position.

    Raises:
        CorruptBaselineData: If the blob is not valid JSON, is not a list,
            or has an entry without a display name
    """
    try:
        entries = _entries_adapter.validate_json(payload)
    except ValidationError as exc:
        raise CorruptBaselineData(
            f"Stored target roster could not be decoded: {exc.error_count()} error(s)"
        ) from exc

    return [
        EntityRecord(
            display_name=entry.display_name,
            reference=entry.reference,
            source_id=entry.source_id,
            index=position,
        )
        for position, entry in enumerate(entries)
    ]


class SnapshotStore(Protocol):
    """What the reconciliation service needs from a snapshot backend."""

    key: str

    def load(self) -> Optional[list[EntityRecord]]:
        ...

    def load_with_timestamp(self) -> Optional[tuple[list[EntityRecord], datetime]]:
        ...

    def save(self, records: Sequence[EntityRecord], saved_at: Optional[datetime] = None) -> None:
        ...


class _BlobSnapshotStore:
    """Shared encode/decode logic; subclasses only move blobs around."""

    def __init__(self, key: Optional[str] = None):
        self.key = key or settings.snapshot_key

    def _read_blob(self) -> Optional[tuple[str, datetime]]:
        raise NotImplementedError

    def _write_blob(self, payload: str, saved_at: datetime) -> None:
        raise NotImplementedError

    def load(self) -> Optional[list[EntityRecord]]:
        loaded = self.load_with_timestamp()
        if loaded is None:
            return None
        return loaded[0]

    def load_with_timestamp(self) -> Optional[tuple[list[EntityRecord], datetime]]:
        blob = self._read_blob()
        if blob is None:
            return None
        payload, saved_at = blob
        return decode_snapshot(payload), saved_at

    def save(self, records: Sequence[EntityRecord], saved_at: Optional[datetime] = None) -> None:
        """Replace the snapshot under this store's key."""
        saved_at = saved_at or datetime.utcnow()
        self._write_blob(encode_snapshot(records), saved_at)
        logger.info("Saved %d target roster entities under '%s'", len(records), self.key)


class InMemorySnapshotStore(_BlobSnapshotStore):
    """
    Dict-backed store for tests and embedding callers.

    blobs maps key -> (payload, saved_at) and may be pre-seeded.
    """

    def __init__(
        self,
        key: Optional[str] = None,
        blobs: Optional[dict[str, tuple[str, datetime]]] = None,
    ):
        super().__init__(key)
        self.blobs = blobs if blobs is not None else {}

    def _read_blob(self) -> Optional[tuple[str, datetime]]:
        return self.blobs.get(self.key)

    def _write_blob(self, payload: str, saved_at: datetime) -> None:
        self.blobs[self.key] = (payload, saved_at)


class DBSnapshotStore(_BlobSnapshotStore):
    """Snapshot store backed by the roster_snapshots table."""

    def __init__(self, session: Session, key: Optional[str] = None):
        super().__init__(key)
        self.session = session

    def _read_blob(self) -> Optional[tuple[str, datetime]]:
        row = self.session.get(RosterSnapshotRow, self.key)
        if row is None:
            return None
        return row.payload, row.saved_at

    def _write_blob(self, payload: str, saved_at: datetime) -> None:
        row = self.session.get(RosterSnapshotRow, self.key)
        if row is None:
            row = RosterSnapshotRow(key=self.key, payload=payload, saved_at=saved_at)
            self.session.add(row)
        else:
            row.payload = payload
            row.saved_at = saved_at

        self.session.flush()
