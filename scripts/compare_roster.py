#!/usr/bin/env python3
"""
Compare a live roster against the saved target roster.

Prints which live entities were not found or only look similar, which
target entities are missing, and which empty rows they would fill.

Usage:
    python scripts/compare_roster.py exports/live_roster.json
    python scripts/compare_roster.py exports/live_roster.json --json > report.json

Exit codes:
    0 - comparison ran
    2 - no target roster saved yet
    3 - saved target roster is corrupt
    4 - a roster is larger than MAX_ROSTER_SIZE
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rostermatch.config import settings
from rostermatch.db.session import get_session
from rostermatch.roster.errors import CorruptBaselineData, NoBaselineData, RosterTooLarge
from rostermatch.roster.providers import JSONFileRosterProvider
from rostermatch.roster.reconciler import Classification
from rostermatch.roster.snapshot import DBSnapshotStore
from rostermatch.services import ReconciliationReport, RosterReconciliationService

logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format,
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def print_details(report: ReconciliationReport) -> None:
    for index, item in sorted(report.classifications.items()):
        if item.classification is Classification.MATCHED:
            continue
        print(f"[row {index}] {item.record.display_name}: {item.hint}")
    for slot, record in report.assignments.items():
        print(f"[row {slot.index}] {record.display_name}: Added from target roster")


def main() -> int:
    parser = argparse.ArgumentParser(description="Compare a live roster against the saved target roster")
    parser.add_argument("input", type=Path, help="JSON file with the live roster rows, empty rows included")
    parser.add_argument(
        "--key",
        default=settings.snapshot_key,
        help=f"Snapshot key (default: {settings.snapshot_key})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON instead of text",
    )
    args = parser.parse_args()

    with get_session() as session:
        service = RosterReconciliationService(
            provider=JSONFileRosterProvider(args.input),
            store=DBSnapshotStore(session, key=args.key),
        )
        try:
            report = service.run()
        except NoBaselineData as exc:
            logger.error("%s", exc)
            return 2
        except CorruptBaselineData as exc:
            logger.error("%s", exc)
            return 3
        except RosterTooLarge as exc:
            logger.error("%s", exc)
            return 4

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_details(report)
        print(report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
