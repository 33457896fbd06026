"""
rostermatch - player roster reconciliation

Compares a live team roster against a previously captured roster of the
same team from another site, flags entities that are missing or spelled
differently, and proposes where to add the ones that are absent.

Main components:
- roster: Name normalization, fuzzy matching, reconciliation, allocation
- services: The end-to-end reconciliation run and its report
- db: Snapshot storage tables and sessions
"""

__version__ = "1.0.0"
