#!/usr/bin/env python3
"""
Capture a target roster snapshot.

Reads the target roster from a JSON export (a list of row objects with
at least a name) and saves it to the snapshot store, replacing whatever
was saved under the same key before.

Run `alembic upgrade head` once first so the snapshot table exists.

Usage:
    python scripts/save_baseline.py exports/target_roster.json
    python scripts/save_baseline.py exports/target_roster.json --key club_42
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rostermatch.config import settings
from rostermatch.db.session import get_session
from rostermatch.roster.providers import read_roster_file
from rostermatch.roster.snapshot import DBSnapshotStore
from rostermatch.services import save_baseline

logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format,
    datefmt="%H:%M:%S",
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Save a target roster snapshot")
    parser.add_argument("input", type=Path, help="JSON file with the target roster rows")
    parser.add_argument(
        "--key",
        default=settings.snapshot_key,
        help=f"Snapshot key (default: {settings.snapshot_key})",
    )
    args = parser.parse_args()

    records = read_roster_file(args.input)

    with get_session() as session:
        store = DBSnapshotStore(session, key=args.key)
        saved = save_baseline(store, records)

    print(f"Successfully saved {saved} target roster entities under '{args.key}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
