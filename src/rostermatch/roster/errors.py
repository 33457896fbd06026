"""Exceptions raised while reconciling rosters."""


class ReconciliationError(Exception):
    """Base class for failures that stop a reconciliation run."""
    pass


class NoBaselineData(ReconciliationError):
    """Raised when no target roster snapshot has been saved yet."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"No saved target roster found under '{key}'. "
            "Capture the target roster before comparing."
        )


class CorruptBaselineData(ReconciliationError):
    """Raised when a saved snapshot cannot be decoded into entity records."""
    pass


class RosterTooLarge(ReconciliationError):
    """Raised when a roster exceeds the configured size cap."""

    def __init__(self, side: str, size: int, limit: int):
        self.side = side
        self.size = size
        self.limit = limit
        super().__init__(
            f"{side} roster has {size} entities, more than the limit of {limit}"
        )
