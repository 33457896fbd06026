"""
Placement of missing entities into empty live roster rows.

Allocation is positional and greedy: the first empty slot gets the first
missing record, the second empty slot the second, and so on until one
side runs out. There is no best-fit logic.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from rostermatch.roster.records import EntityRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    """An empty row of the live roster, identified by its position."""
    index: int


@dataclass
class AllocationResult:
    """Slot assignments plus whatever did not fit."""
    assignments: dict[Slot, EntityRecord] = field(default_factory=dict)
    unassigned: list[EntityRecord] = field(default_factory=list)

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)

    @property
    def overflow(self) -> bool:
        """True when there were more missing records than empty slots."""
        return bool(self.unassigned)


def find_empty_slots(live: Iterable[EntityRecord]) -> list[Slot]:
    """
    Slots for every live row with no source id and no name, in row order.

    A source id of "0" counts as no id. Positions come from the
    record's own index when set, otherwise from its place in `live`.
    """
    slots = []
    for position, record in enumerate(live):
        if record.is_empty_slot:
            index = record.index if record.index is not None else position
            slots.append(Slot(index=index))
    return slots


def allocate(
    missing: Sequence[EntityRecord],
    slots: Sequence[Slot],
) -> AllocationResult:
    """
    Assign missing records to available slots in order.

    Args:
        missing: Records to place, in the order they should be placed
        slots: Empty slots, in the order they should be filled

    Returns:
        AllocationResult; compare assigned_count to len(missing) (or
        check overflow) to detect records that did not fit
    """
    result = AllocationResult()
    for slot, record in zip(slots, missing):
        result.assignments[slot] = record

    result.unassigned = list(missing[result.assigned_count:])
    if result.unassigned:
        logger.warning(
            "Only %d of %d missing entities fit into empty slots",
            result.assigned_count,
            len(missing),
        )
    return result
