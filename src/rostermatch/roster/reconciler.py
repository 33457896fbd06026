"""
Two-way reconciliation between a live roster and a stored snapshot.

Forward direction (live -> stored): every named live entity is
classified as
1. MATCHED - the normalized name appears verbatim in the snapshot
2. SIMILAR_UNMATCHED - no exact hit, but a snapshot name scores >= 0.75
3. UNMATCHED - nothing close enough

Reverse direction (stored -> live): every snapshot entity that has no
exact hit and no live name scoring >= 0.85 is reported as missing.

The two thresholds are deliberately different. Flagging a live entity
as "similar" only asks a human to look at it, so a loose threshold is
fine. Suppressing a missing entity because it looks like someone already
on the live roster silently drops it, so that threshold is stricter.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from rostermatch.roster.errors import RosterTooLarge
from rostermatch.roster.names import MatchResult, find_best_match
from rostermatch.roster.records import EntityRecord

logger = logging.getLogger(__name__)

SIMILAR_THRESHOLD = 0.75
DEDUPE_THRESHOLD = 0.85


class Classification(str, Enum):
    """Outcome for a single live entity."""

    MATCHED = "matched"
    SIMILAR_UNMATCHED = "similar_unmatched"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class EntityClassification:
    """
    Classification of one live entity against the stored snapshot.

    match is only set for SIMILAR_UNMATCHED; stored_record is the
    snapshot entry it resembles.
    """
    live_index: int
    record: EntityRecord
    classification: Classification
    match: Optional[MatchResult] = None
    stored_record: Optional[EntityRecord] = None

    @property
    def hint(self) -> str:
        """Short explanation suitable for a tooltip."""
        if self.classification is Classification.SIMILAR_UNMATCHED:
            return (
                f'Similar to "{self.stored_record.display_name}" '
                f"({self.match.percent}% match)"
            )
        if self.classification is Classification.UNMATCHED:
            return "Not found in target roster"
        return ""


@dataclass
class ReconciliationResult:
    """Classifications keyed by live index, plus the missing stored records."""
    classifications: dict[int, EntityClassification] = field(default_factory=dict)
    missing: list[EntityRecord] = field(default_factory=list)

    def count(self, classification: Classification) -> int:
        return sum(
            1 for item in self.classifications.values()
            if item.classification is classification
        )

    @property
    def matched_count(self) -> int:
        return self.count(Classification.MATCHED)

    @property
    def similar_count(self) -> int:
        return self.count(Classification.SIMILAR_UNMATCHED)

    @property
    def unmatched_count(self) -> int:
        return self.count(Classification.UNMATCHED)

    @property
    def missing_count(self) -> int:
        return len(self.missing)


def check_thresholds(similar_threshold: float, dedupe_threshold: float) -> None:
    """
    Validate a pair of thresholds.

    Raises:
        ValueError: If either is outside [0, 1] or dedupe < similar
    """
    for name, value in (("similar_threshold", similar_threshold),
                        ("dedupe_threshold", dedupe_threshold)):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
    if dedupe_threshold < similar_threshold:
        raise ValueError(
            f"dedupe_threshold ({dedupe_threshold}) must be >= "
            f"similar_threshold ({similar_threshold})"
        )


def reconcile(
    live: Sequence[EntityRecord],
    stored: Sequence[EntityRecord],
    similar_threshold: float = SIMILAR_THRESHOLD,
    dedupe_threshold: float = DEDUPE_THRESHOLD,
    max_size: Optional[int] = None,
) -> ReconciliationResult:
    """
    Compare a live roster against a stored snapshot.

    Live records are keyed by their position in `live`. Records whose
    name normalizes to empty are placeholders: they are neither
    classified nor used as candidates for the reverse lookup.

    Cost is O(len(live) * len(stored)) similarity computations in each
    direction, which is why max_size exists.

    Args:
        live: Entities currently on the live roster, in row order
        stored: Entities from the saved snapshot, in saved order
        similar_threshold: Minimum score to flag a live entity as similar
        dedupe_threshold: Minimum score to treat a stored entity as present
        max_size: Optional cap on either roster's length

    Returns:
        ReconciliationResult with classifications and the missing list

    Raises:
        ValueError: If the thresholds are out of range or out of order
        RosterTooLarge: If either roster is longer than max_size
    """
    check_thresholds(similar_threshold, dedupe_threshold)
    if max_size is not None:
        if len(live) > max_size:
            raise RosterTooLarge("live", len(live), max_size)
        if len(stored) > max_size:
            raise RosterTooLarge("stored", len(stored), max_size)

    result = ReconciliationResult()

    # Candidate pool for the forward direction, order preserved so match
    # indexes map straight back onto `stored`
    stored_names = [record.normalized_name for record in stored]
    stored_name_set = set(stored_names)

    for live_index, record in enumerate(live):
        live_name = record.normalized_name
        if not live_name:
            continue

        if live_name in stored_name_set:
            result.classifications[live_index] = EntityClassification(
                live_index=live_index,
                record=record,
                classification=Classification.MATCHED,
            )
            continue

        match = find_best_match(live_name, stored_names, similar_threshold)
        if match:
            result.classifications[live_index] = EntityClassification(
                live_index=live_index,
                record=record,
                classification=Classification.SIMILAR_UNMATCHED,
                match=match,
                stored_record=stored[match.candidate_index],
            )
            logger.debug(
                "'%s' is similar to '%s' (%d%%)",
                record.display_name,
                stored[match.candidate_index].display_name,
                match.percent,
            )
        else:
            result.classifications[live_index] = EntityClassification(
                live_index=live_index,
                record=record,
                classification=Classification.UNMATCHED,
            )

    # Candidate pool for the reverse direction
    live_names = [name for name in (r.normalized_name for r in live) if name]
    live_name_set = set(live_names)

    for record in stored:
        stored_name = record.normalized_name
        if stored_name in live_name_set:
            continue

        match = find_best_match(stored_name, live_names, dedupe_threshold)
        if match:
            logger.debug(
                "Skipping '%s' - similar to existing player (%d%%)",
                record.display_name,
                match.percent,
            )
            continue

        result.missing.append(record)

    return result
