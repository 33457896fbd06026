"""
Roster reconciliation service - ties providers, stores and the matcher together.

One run does the following:
1. Load the stored target roster snapshot (fail if none was ever saved)
2. Read the live roster from the provider
3. Classify every named live entity and find stored entities missing
   from the live roster
4. Place the missing entities into empty live rows, in order

Nothing is written back; the report tells the caller what to highlight
and what to fill in.

Usage:
    from rostermatch.services import RosterReconciliationService

    with get_session() as session:
        service = RosterReconciliationService(
            provider=JSONFileRosterProvider("live.json"),
            store=DBSnapshotStore(session),
        )
        report = service.run()
        print(report.summary())
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from rostermatch.config import settings
from rostermatch.roster.allocation import Slot, allocate, find_empty_slots
from rostermatch.roster.errors import NoBaselineData
from rostermatch.roster.providers import RosterProvider
from rostermatch.roster.reconciler import Classification, EntityClassification, reconcile
from rostermatch.roster.records import EntityRecord, dedupe_records, resolve_reference
from rostermatch.roster.snapshot import SnapshotStore

logger = logging.getLogger(__name__)

FILLED_HINT = "Added from target roster"


@dataclass
class ReconciliationReport:
    """Everything a caller needs to display or persist the outcome of a run."""
    matched_count: int = 0
    similar_count: int = 0
    unmatched_count: int = 0
    missing_count: int = 0
    assigned_count: int = 0
    baseline_size: int = 0
    baseline_saved_at: Optional[datetime] = None
    classifications: dict[int, EntityClassification] = field(default_factory=dict)
    missing: list[EntityRecord] = field(default_factory=list)
    # Slot -> missing record, reference already made absolute
    assignments: dict[Slot, EntityRecord] = field(default_factory=dict)
    unassigned: list[EntityRecord] = field(default_factory=list)

    @property
    def unassigned_count(self) -> int:
        return self.missing_count - self.assigned_count

    def summary(self) -> str:
        """Return a human-readable summary of the reconciliation."""
        lines = [
            "Roster comparison complete:",
            f"  Not found in target:      {self.unmatched_count}",
            f"  Similar to target entity: {self.similar_count}",
            f"  Matched exactly:          {self.matched_count}",
            f"  Missing from live roster: {self.missing_count}",
            f"  Added to empty rows:      {self.assigned_count}",
            f"  Total target entities:    {self.baseline_size}",
        ]
        if self.unassigned:
            lines.append(f"  No empty row left for: {len(self.unassigned)}")
            for record in self.unassigned[:5]:
                lines.append(f"    - {record.display_name}")
            if len(self.unassigned) > 5:
                lines.append(f"    ... and {len(self.unassigned) - 5} more")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched_count": self.matched_count,
            "similar_count": self.similar_count,
            "unmatched_count": self.unmatched_count,
            "missing_count": self.missing_count,
            "assigned_count": self.assigned_count,
            "baseline_size": self.baseline_size,
            "baseline_saved_at": (
                self.baseline_saved_at.isoformat() if self.baseline_saved_at else None
            ),
            "classifications": [
                {
                    "index": index,
                    "name": item.record.display_name,
                    "classification": item.classification.value,
                    "hint": item.hint,
                    "score": item.match.score if item.match else None,
                }
                for index, item in sorted(self.classifications.items())
            ],
            "missing": [record.display_name for record in self.missing],
            "assignments": [
                {
                    "slot": slot.index,
                    "name": record.display_name,
                    "reference": record.reference,
                    "hint": FILLED_HINT,
                }
                for slot, record in self.assignments.items()
            ],
            "unassigned": [record.display_name for record in self.unassigned],
        }


def save_baseline(
    store: SnapshotStore,
    records: Iterable[EntityRecord],
    saved_at: Optional[datetime] = None,
) -> int:
    """
    Capture the target roster, replacing any earlier snapshot.

    Rows without a name are dropped and repeated names keep only their
    first occurrence.

    Args:
        store: Snapshot store to write to
        records: Target roster entities, in page order
        saved_at: Capture time (defaults to now, UTC)

    Returns:
        Number of entities saved
    """
    named = [record for record in records if not record.is_placeholder]
    unique = dedupe_records(named)
    store.save(unique, saved_at)
    return len(unique)


class RosterReconciliationService:
    """
    Compare a live roster against the saved target roster.

    Thresholds, the size cap and the reference base URL default to the
    values in settings; pass them explicitly to override per instance.
    """

    def __init__(
        self,
        provider: RosterProvider,
        store: SnapshotStore,
        similar_threshold: Optional[float] = None,
        dedupe_threshold: Optional[float] = None,
        max_roster_size: Optional[int] = None,
        reference_base_url: Optional[str] = None,
    ):
        self.provider = provider
        self.store = store
        self.similar_threshold = (
            settings.similar_threshold if similar_threshold is None else similar_threshold
        )
        self.dedupe_threshold = (
            settings.dedupe_threshold if dedupe_threshold is None else dedupe_threshold
        )
        self.max_roster_size = (
            settings.max_roster_size if max_roster_size is None else max_roster_size
        )
        self.reference_base_url = (
            settings.reference_base_url if reference_base_url is None else reference_base_url
        )

    def save_baseline(
        self,
        records: Iterable[EntityRecord],
        saved_at: Optional[datetime] = None,
    ) -> int:
        """Capture the target roster into this service's store."""
        return save_baseline(self.store, records, saved_at)

    def run(self) -> ReconciliationReport:
        """
        Reconcile the provider's live roster against the stored snapshot.

        Raises:
            NoBaselineData: If the store has no snapshot
            CorruptBaselineData: If the snapshot cannot be decoded
            RosterTooLarge: If either roster exceeds max_roster_size
        """
        loaded = self.store.load_with_timestamp()
        if loaded is None:
            raise NoBaselineData(self.store.key)
        stored, saved_at = loaded

        live = self.provider.get_live_entities()
        logger.info("Live entities: %d, target entities: %d", len(live), len(stored))

        result = reconcile(
            live,
            stored,
            similar_threshold=self.similar_threshold,
            dedupe_threshold=self.dedupe_threshold,
            max_size=self.max_roster_size,
        )

        allocation = allocate(result.missing, find_empty_slots(live))
        assignments = {
            slot: EntityRecord(
                display_name=record.display_name,
                reference=resolve_reference(record.reference, self.reference_base_url),
                source_id=record.source_id,
                index=slot.index,
            )
            for slot, record in allocation.assignments.items()
        }

        report = ReconciliationReport(
            matched_count=result.count(Classification.MATCHED),
            similar_count=result.count(Classification.SIMILAR_UNMATCHED),
            unmatched_count=result.count(Classification.UNMATCHED),
            missing_count=result.missing_count,
            assigned_count=allocation.assigned_count,
            baseline_size=len(stored),
            baseline_saved_at=saved_at,
            classifications=result.classifications,
            missing=result.missing,
            assignments=assignments,
            unassigned=allocation.unassigned,
        )

        logger.info(report.summary())
        return report
