"""
Ledger - Source Package

A small in-memory ledger: a registry of named entries and a log of
monetary assignments against them, with per-entry totals and a
recent-activity list.

DESIGN PRINCIPLES:
1. Collections in, new collections out - inputs are never mutated
2. Fail early, fail visibly, with a stable error code
3. No silent corrections
4. Time is injected, never assumed
5. Only the host layer logs
"""

from ledger.errors import ErrorCode, LedgerError, create_error, describe_error
from ledger.models import Assignment, Entry, TotalsRecord
from ledger.queries import calculate_totals, get_recent_assignments, sort_entries
from ledger.registry import ensure_unique_entry, record_assignment, resolve_entry
from ledger.validation import normalize_name, sanitize_name, validate_amount

__version__ = "1.0.0"

__all__ = [
    "Assignment",
    "Entry",
    "ErrorCode",
    "LedgerError",
    "TotalsRecord",
    "calculate_totals",
    "create_error",
    "describe_error",
    "ensure_unique_entry",
    "get_recent_assignments",
    "normalize_name",
    "record_assignment",
    "resolve_entry",
    "sanitize_name",
    "sort_entries",
    "validate_amount",
]
