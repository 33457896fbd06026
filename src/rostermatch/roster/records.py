"""
Entity records shared by both rosters.

A record only carries data: the display name, an opaque reference
(usually a profile link), the source's own id, and the row position it
was read from. Anything that renders or edits the row looks it up by
that position; the core never holds on to widgets or page elements.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urljoin

from rostermatch.roster.names import normalize_name

logger = logging.getLogger(__name__)

# Source ids that mark a row as unoccupied
EMPTY_SOURCE_IDS = frozenset({"", "0"})


@dataclass(frozen=True)
class EntityRecord:
    """
    A single roster entry.

    Attributes:
        display_name: Name as shown by the source (unnormalized)
        reference: Opaque link or id for the entity, may be empty
        source_id: The source's own identifier, empty if unknown
        index: Row position in the roster it was read from
    """
    display_name: str
    reference: str = ""
    source_id: str = ""
    index: Optional[int] = None

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.display_name)

    @property
    def is_placeholder(self) -> bool:
        """True for rows with no name at all (skipped by the reconciler)."""
        return not self.normalized_name

    @property
    def is_empty_slot(self) -> bool:
        """True for rows with neither an identifying key nor a name."""
        return self.source_id.strip() in EMPTY_SOURCE_IDS and self.is_placeholder


def index_records(records: Iterable[EntityRecord]) -> list[EntityRecord]:
    """Return records with index set to their position in the sequence."""
    return [
        EntityRecord(
            display_name=record.display_name,
            reference=record.reference,
            source_id=record.source_id,
            index=position,
        )
        for position, record in enumerate(records)
    ]


def dedupe_records(records: Iterable[EntityRecord]) -> list[EntityRecord]:
    """
    Drop records whose display name was already seen.

    Comparison is on the trimmed display name, exactly as the source
    printed it; the first occurrence wins and order is preserved.
    Near-duplicates are left alone so the reconciler can still report
    them.
    """
    seen: set[str] = set()
    unique = []
    for record in records:
        key = record.display_name.strip()
        if key in seen:
            logger.warning("Skipping duplicate: %s", key)
            continue
        seen.add(key)
        unique.append(record)
    return unique


def resolve_reference(reference: str, base_url: str) -> str:
    """
    Make a relative reference absolute against base_url.

    Examples:
        >>> resolve_reference("/profil/spieler/1", "https://www.transfermarkt.us")
        'https://www.transfermarkt.us/profil/spieler/1'
        >>> resolve_reference("https://example.com/p/1", "https://www.transfermarkt.us")
        'https://example.com/p/1'
        >>> resolve_reference("", "https://www.transfermarkt.us")
        ''
    """
    if not reference or reference.startswith(("http://", "https://")):
        return reference
    return urljoin(base_url.rstrip("/") + "/", reference.lstrip("/"))
