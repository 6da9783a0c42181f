"""
Ledger Session

This module ties the functional core to a host application. It defines
the flows a host runs against one ledger:
1. Add entry (name -> sanitize -> uniqueness check -> new entries)
2. Record assignment (name + amount -> resolve -> validate -> append)
3. Summaries (totals per entry, most recent assignments)
4. Import / export of the ledger in wire form

DESIGN DECISION: The session owns the "current state" and swaps in the
collections each core call returns. Calls are serialized with a lock
because uniqueness and entry resolution are check-then-act.
Every change and every rejection is audited.
"""

import threading
from collections.abc import Mapping
from typing import Any, Optional
from uuid import UUID

from ledger.audit import AuditLogger
from ledger.clock import Clock, utc_now
from ledger.config import AppSettings, get_settings
from ledger.errors import ErrorCode, LedgerError, create_error
from ledger.models import Assignment, Entry, TotalsRecord
from ledger.queries import calculate_totals, get_recent_assignments
from ledger.registry import ensure_unique_entry, record_assignment
from ledger.validation import ensure_collection, is_proper_sequence


class NameTooLongError(ValueError):
    """Name exceeds the host's configured maximum length."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Name is {length} characters long; the limit is {max_length}.")


class LedgerSession:
    """
    Holds one ledger's entries and assignments for a host.

    Usage:
        session = LedgerSession()
        session.add_entry("Alice")
        session.add_assignment("alice", "12.50")
        session.totals()
    """

    def __init__(
        self,
        entries: Any = (),
        assignments: Any = (),
        clock: Clock = utc_now,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._entries: tuple[Entry, ...] = tuple(
            ensure_collection(entries, Entry, ErrorCode.ENTRY_INVALID_COLLECTION)
        )
        self._assignments: tuple[Assignment, ...] = tuple(
            ensure_collection(assignments, Assignment, ErrorCode.ASSIGN_INVALID_COLLECTION)
        )
        self._clock = clock
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings().app
        self._lock = threading.RLock()

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def assignments(self) -> tuple[Assignment, ...]:
        return self._assignments

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    def _check_name_length(self, name: Any) -> None:
        if isinstance(name, str):
            length = len(name.strip())
            if length > self._settings.max_name_length:
                raise NameTooLongError(length, self._settings.max_name_length)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add_entry(
        self,
        name: Any,
        now: Any = None,
        correlation_id: Optional[UUID] = None,
    ) -> Entry:
        """
        Add a new entry.

        Raises:
            NameTooLongError: If the trimmed name is over the configured limit
            LedgerError: Whatever the core rejects (code is preserved)
        """
        self._check_name_length(name)

        with self._lock:
            try:
                result = ensure_unique_entry(
                    self._entries, name, now=now, clock=self._clock
                )
            except LedgerError as e:
                self._audit.log_entry_rejected(
                    raw_name=name,
                    error_code=e.code.value,
                    error_message=e.message,
                    correlation_id=correlation_id,
                )
                raise
            self._entries = tuple(result.entries)

        self._audit.log_entry_created(
            name=result.entry.name,
            normalized_name=result.entry.normalized_name,
            correlation_id=correlation_id,
        )
        return result.entry

    def add_assignment(
        self,
        name: Any,
        amount: Any,
        now: Any = None,
        correlation_id: Optional[UUID] = None,
    ) -> Assignment:
        """
        Record an amount against an existing entry.

        Raises:
            LedgerError: Whatever the core rejects (code is preserved)
        """
        with self._lock:
            try:
                result = record_assignment(
                    self._assignments,
                    self._entries,
                    name,
                    amount,
                    now=now,
                    clock=self._clock,
                )
            except LedgerError as e:
                self._audit.log_assignment_rejected(
                    raw_name=name,
                    error_code=e.code.value,
                    error_message=e.message,
                    correlation_id=correlation_id,
                )
                raise
            self._assignments = tuple(result.assignments)

        self._audit.log_assignment_recorded(
            name=result.record.name,
            normalized_name=result.record.normalized_name,
            amount=result.record.amount,
            correlation_id=correlation_id,
        )
        return result.record

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def totals(self, correlation_id: Optional[UUID] = None) -> list[TotalsRecord]:
        """Totals per entry, ordered by name."""
        assignments = self._assignments
        totals = calculate_totals(assignments)
        self._audit.log_totals_calculated(
            group_count=len(totals),
            assignment_count=len(assignments),
            correlation_id=correlation_id,
        )
        return totals

    def recent(
        self,
        limit: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[Assignment]:
        """Most recent assignments; ``limit`` defaults to the configured recent_limit."""
        if limit is None:
            limit = self._settings.recent_limit
        recent = get_recent_assignments(self._assignments, limit)
        self._audit.log_recent_listed(
            limit=limit,
            result_count=len(recent),
            correlation_id=correlation_id,
        )
        return recent

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def to_dict(self, correlation_id: Optional[UUID] = None) -> dict:
        """Export the ledger in wire form (camelCase keys, ISO timestamps)."""
        with self._lock:
            entries, assignments = self._entries, self._assignments
        self._audit.log_ledger_exported(
            entry_count=len(entries),
            assignment_count=len(assignments),
            correlation_id=correlation_id,
        )
        return {
            "entries": [entry.to_wire() for entry in entries],
            "assignments": [record.to_wire() for record in assignments],
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping,
        clock: Clock = utc_now,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
        correlation_id: Optional[UUID] = None,
    ) -> "LedgerSession":
        """
        Load a ledger previously exported with to_dict.

        Missing keys mean empty collections. The payload must satisfy the
        same invariants the core enforces: unique entry keys, and every
        assignment pointing at a known entry. A rejected payload is
        audited as a system_error event before the error propagates.

        Raises:
            InvalidEntriesCollectionError / InvalidAssignmentsCollectionError:
                If either value is not a list or holds a malformed record
            DuplicateEntryError: If two entries share a normalized name
            UnknownEntryError: If an assignment references no entry
        """
        audit_logger = audit_logger or AuditLogger()
        try:
            session = cls._load(data, clock, audit_logger, settings)
        except LedgerError as e:
            audit_logger.log_error(
                error_type=e.code.value,
                error_message=e.message,
                details={"stage": "load"},
                correlation_id=correlation_id,
            )
            raise

        session.audit_logger.log_ledger_loaded(
            entry_count=len(session.entries),
            assignment_count=len(session.assignments),
            correlation_id=correlation_id,
        )
        return session

    @classmethod
    def _load(
        cls,
        data: Mapping,
        clock: Clock,
        audit_logger: AuditLogger,
        settings: Optional[AppSettings],
    ) -> "LedgerSession":
        raw_entries = data.get("entries", [])
        raw_assignments = data.get("assignments", [])
        if not is_proper_sequence(raw_entries):
            raise create_error(ErrorCode.ENTRY_INVALID_COLLECTION)
        if not is_proper_sequence(raw_assignments):
            raise create_error(ErrorCode.ASSIGN_INVALID_COLLECTION)

        session = cls(
            entries=raw_entries,
            assignments=raw_assignments,
            clock=clock,
            audit_logger=audit_logger,
            settings=settings,
        )

        keys = [entry.normalized_name for entry in session.entries]
        if len(set(keys)) != len(keys):
            raise create_error(ErrorCode.ENTRY_DUPLICATE)
        known = set(keys)
        for record in session.assignments:
            if record.normalized_name not in known:
                raise create_error(
                    ErrorCode.ASSIGN_UNKNOWN_ENTRY,
                    f"Entry was not found: {record.name}",
                )
        return session
