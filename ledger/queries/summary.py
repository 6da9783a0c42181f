"""
Summaries over Ledger Collections

DESIGN DECISION: Summaries are DETERMINISTIC and pure.
They read the collections they are given and return new lists;
the caller's collections are never reordered in place.

Ordering rules:
- Recency: ``created_at`` descending. Python's sort is stable, so records
  with equal timestamps keep their original relative order.
- Names: locale-style ordering. Accents and case are ignored first, then
  unaccented sorts before accented and lowercase before uppercase, so
  "alice" < "Bob" < "carol" and "Éa" < "Eb".
"""

import math
import unicodedata
from collections.abc import Mapping
from typing import Any, Sequence

from ledger.errors import ErrorCode, create_error
from ledger.models import Assignment, Entry, TotalsRecord
from ledger.validation import (
    coerce_amount,
    ensure_collection,
    is_proper_sequence,
    normalize_name,
)

DEFAULT_RECENT_LIMIT = 5


def _recency_key(record: Entry | Assignment):
    return record.created_at


def _collation_key(name: str) -> tuple[str, str, str, str]:
    decomposed = unicodedata.normalize("NFKD", name).casefold()
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base, decomposed, name.swapcase(), name


def _totals_fields(record: Any) -> tuple[str, str, float]:
    """
    Read (name, key, amount) from an assignment or a stored mapping.

    Stored mappings are read leniently: a missing key is derived from the
    name, and a missing or non-numeric amount counts as 0.
    """
    if isinstance(record, Assignment):
        return record.name, record.normalized_name, record.amount
    if not isinstance(record, Mapping):
        raise create_error(ErrorCode.SUMMARY_INVALID_COLLECTION)

    name = record.get("name")
    key = record.get("normalizedName") or record.get("normalized_name")
    if not isinstance(key, str) or not key:
        key = normalize_name(name)
    display = name if isinstance(name, str) else key
    return display, key, coerce_amount(record.get("amount"))


def sort_entries(entries: Sequence[Entry]) -> list[Entry]:
    """Return the entries newest first, leaving the input untouched."""
    records = ensure_collection(entries, Entry, ErrorCode.ENTRY_INVALID_COLLECTION)
    return sorted(records, key=_recency_key, reverse=True)


def calculate_totals(assignments: Any) -> list[TotalsRecord]:
    """
    Sum assignment amounts per normalized name.

    The display name of each total comes from the first assignment seen
    for that key. Results are ordered by name.

    Raises:
        InvalidSummaryCollectionError: If assignments is not a proper sequence
    """
    if not is_proper_sequence(assignments):
        raise create_error(ErrorCode.SUMMARY_INVALID_COLLECTION)

    names: dict[str, str] = {}
    sums: dict[str, float] = {}
    for record in assignments:
        name, key, amount = _totals_fields(record)
        if key not in names:
            names[key] = name
            sums[key] = 0.0
        sums[key] += amount

    totals = [
        TotalsRecord(name=names[key], normalized_name=key, total=sums[key])
        for key in names
    ]
    return sorted(totals, key=lambda t: _collation_key(t.name))


def get_recent_assignments(assignments: Any, limit: Any = None) -> list[Assignment]:
    """
    Get the most recent assignments, newest first.

    ``limit`` falls back to DEFAULT_RECENT_LIMIT unless it is a positive
    number; fractional limits are floored.

    Raises:
        InvalidSummaryCollectionError: If assignments is not a proper sequence
    """
    records = ensure_collection(
        assignments, Assignment, ErrorCode.SUMMARY_INVALID_COLLECTION
    )

    if isinstance(limit, (int, float)) and not isinstance(limit, bool) and limit > 0:
        max_items = len(records) if math.isinf(limit) else math.floor(limit)
    else:
        max_items = DEFAULT_RECENT_LIMIT

    return sorted(records, key=_recency_key, reverse=True)[:max_items]
