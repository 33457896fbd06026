"""
Roster reconciliation module.

This module compares two rosters of the same team that were captured
from different sites, where names are spelled, ordered and completed
differently.

Key components:
- normalize_name / similarity / find_best_match: Name comparison
- reconcile: Two-way comparison of a live roster and a stored snapshot
- allocate: Place missing entities into empty live roster rows
- Snapshot stores: Where the target roster snapshot is kept

The matching strategy (per live entity):
1. Exact normalized name match
2. Similar match (>= 0.75) - flagged for human review
3. Otherwise unmatched

And per stored entity:
1. Exact normalized name match - present
2. Similar match (>= 0.85) - present, spelled differently
3. Otherwise missing from the live roster
"""

from rostermatch.roster.allocation import AllocationResult, Slot, allocate, find_empty_slots
from rostermatch.roster.errors import (
    CorruptBaselineData,
    NoBaselineData,
    ReconciliationError,
    RosterTooLarge,
)
from rostermatch.roster.names import (
    MatchResult,
    edit_distance,
    find_best_match,
    normalize_name,
    similarity,
)
from rostermatch.roster.reconciler import (
    Classification,
    EntityClassification,
    ReconciliationResult,
    reconcile,
)
from rostermatch.roster.records import EntityRecord

__all__ = [
    "AllocationResult",
    "Classification",
    "CorruptBaselineData",
    "EntityClassification",
    "EntityRecord",
    "MatchResult",
    "NoBaselineData",
    "ReconciliationError",
    "ReconciliationResult",
    "RosterTooLarge",
    "Slot",
    "allocate",
    "edit_distance",
    "find_best_match",
    "find_empty_slots",
    "normalize_name",
    "reconcile",
    "similarity",
]
