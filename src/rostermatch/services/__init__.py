"""
rostermatch services - orchestration on top of the roster module.

Usage:
    from rostermatch.services import (
        RosterReconciliationService,
        ReconciliationReport,
    )
"""

from rostermatch.services.roster_reconciliation import (
    ReconciliationReport,
    RosterReconciliationService,
    save_baseline,
)

__all__ = [
    "ReconciliationReport",
    "RosterReconciliationService",
    "save_baseline",
]
