"""
Live roster providers.

The reconciler does not care where the live roster comes from (a form,
an API, a file). Anything with a get_live_entities() method will do.
Two simple providers ship here: one wrapping an in-memory list, and one
reading a JSON export as used by the scripts.
"""

import json
from pathlib import Path
from typing import Iterable, Protocol, Union

from rostermatch.roster.records import EntityRecord, index_records


class RosterProvider(Protocol):
    """Source of the live roster."""

    def get_live_entities(self) -> list[EntityRecord]:
        ...


class StaticRosterProvider:
    """Provider over a fixed list of records."""

    def __init__(self, records: Iterable[EntityRecord]):
        self.records = index_records(records)

    def get_live_entities(self) -> list[EntityRecord]:
        return list(self.records)


def record_from_row(row: dict) -> EntityRecord:
    """
    Build a record from an exported row.

    Accepts the keys written by roster exports ("name"/"original",
    "link"/"reference", "id"/"source_id"). Missing values become empty
    strings so empty rows survive as slots.
    """
    def first(*keys: str) -> str:
        for key in keys:
            value = row.get(key)
            if value is not None:
                return str(value)
        return ""

    return EntityRecord(
        display_name=first("display_name", "original", "name", "fullName"),
        reference=first("reference", "link", "profileUrl"),
        source_id=first("source_id", "id"),
    )


def read_roster_file(path: Union[str, Path]) -> list[EntityRecord]:
    """
    Read a roster export (a JSON list of row objects) into indexed records.

    Works for either side: the live roster for a comparison, or the target
    roster when capturing a snapshot.

    Raises:
        ValueError: If the file is not a JSON list, or a row is not an object
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        rows = json.load(fh)
    if not isinstance(rows, list):
        raise ValueError(f"{path} must contain a JSON list of rows")
    for position, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(
                f"{path}: row {position} must be an object, got {type(row).__name__}"
            )
    return index_records(record_from_row(row) for row in rows)


class JSONFileRosterProvider:
    """
    Live roster provider over a JSON export on disk.

    Row order in the file is the row order of the roster, so empty rows
    must be kept in the export for slot allocation to work.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_live_entities(self) -> list[EntityRecord]:
        return read_roster_file(self.path)
