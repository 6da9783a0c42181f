"""
Data Models Package

This package contains all Pydantic models used by the ledger.
Every record flowing through the system conforms to these schemas.
"""

from ledger.models.records import (
    Assignment,
    AssignmentRecorded,
    Entry,
    EntryCreated,
    LedgerRecord,
    TotalsRecord,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "Assignment",
    "AssignmentRecorded",
    "Entry",
    "EntryCreated",
    "LedgerRecord",
    "TotalsRecord",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
