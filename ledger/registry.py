"""
Entry Registry and Assignment Recording

The write side of the ledger. Both operations take the caller's current
collections and return NEW collections; the inputs are never mutated, so
a failed call leaves the caller's state exactly as it was.

CRITICAL: The core does not serialize concurrent callers. A host that
shares one ledger between threads must run read-then-write calls one at
a time (see LedgerSession).
"""

from typing import Any

from ledger.clock import Clock, resolve_timestamp, utc_now
from ledger.errors import ErrorCode, create_error
from ledger.models import Assignment, AssignmentRecorded, Entry, EntryCreated
from ledger.queries import sort_entries
from ledger.validation import (
    ensure_collection,
    normalize_name,
    sanitize_name,
    validate_amount,
)


def ensure_unique_entry(
    entries: Any,
    raw_name: Any,
    now: Any = None,
    clock: Clock = utc_now,
) -> EntryCreated:
    """
    Create an entry unless its normalized name is already taken.

    Args:
        entries: Current entries collection
        raw_name: Name as typed by the user
        now: Creation instant; the clock is used when this is not a datetime
        clock: Ambient time source

    Returns:
        EntryCreated with the new entry first, followed by the existing
        entries newest first

    Raises:
        InvalidEntriesCollectionError: If entries is not a proper sequence
        InvalidNameTypeError / EmptyNameError: If the name is unusable
        DuplicateEntryError: If an entry with the same key exists
    """
    existing = ensure_collection(entries, Entry, ErrorCode.ENTRY_INVALID_COLLECTION)
    created_at = resolve_timestamp(now, clock)
    name = sanitize_name(raw_name)
    normalized = normalize_name(name)

    if any(entry.normalized_name == normalized for entry in existing):
        raise create_error(ErrorCode.ENTRY_DUPLICATE)

    entry = Entry(name=name, normalized_name=normalized, created_at=created_at)
    return EntryCreated(entry=entry, entries=[entry, *sort_entries(existing)])


def resolve_entry(entries: Any, name: Any) -> Entry:
    """
    Find the entry a name refers to (first match in collection order).

    Raises:
        InvalidNameTypeError: If name is not a string
        UnknownEntryError: If no entry has that normalized name
    """
    normalized = normalize_name(name)
    for entry in ensure_collection(entries, Entry, ErrorCode.ASSIGN_INVALID_ENTRIES):
        if entry.normalized_name == normalized:
            return entry
    raise create_error(ErrorCode.ASSIGN_UNKNOWN_ENTRY)


def record_assignment(
    assignments: Any,
    entries: Any,
    name: Any,
    amount: Any,
    now: Any = None,
    clock: Clock = utc_now,
) -> AssignmentRecorded:
    """
    Record an amount against an existing entry.

    The record copies the entry's display name and key, so "bob" typed by
    the user is stored as "Bob" if that is how the entry was created.
    The new record is appended; the collection is not re-sorted.

    Raises:
        InvalidAssignmentsCollectionError: If assignments is not a proper sequence
        InvalidAssignmentEntriesError: If entries is not a proper sequence
        UnknownEntryError: If name matches no entry
        InvalidAmountError: If amount is not a finite number
    """
    existing = ensure_collection(
        assignments, Assignment, ErrorCode.ASSIGN_INVALID_COLLECTION
    )
    known_entries = ensure_collection(entries, Entry, ErrorCode.ASSIGN_INVALID_ENTRIES)
    created_at = resolve_timestamp(now, clock)

    entry = resolve_entry(known_entries, name)
    numeric_amount = validate_amount(amount)

    record = Assignment(
        name=entry.name,
        normalized_name=entry.normalized_name,
        amount=numeric_amount,
        created_at=created_at,
    )
    return AssignmentRecorded(record=record, assignments=[*existing, record])

