"""Summary queries package."""

from ledger.queries.summary import (
    DEFAULT_RECENT_LIMIT,
    calculate_totals,
    get_recent_assignments,
    sort_entries,
)

__all__ = [
    "DEFAULT_RECENT_LIMIT",
    "calculate_totals",
    "get_recent_assignments",
    "sort_entries",
]
