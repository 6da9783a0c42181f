"""
Audit Models for the Ledger

Every change a host makes to its ledger is recorded as an audit event.
This provides:
1. Traceability of who was added and what was assigned
2. Debugging information when input is rejected
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledger.clock import format_timestamp, utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entries
    ENTRY_CREATED = "entry_created"
    ENTRY_REJECTED = "entry_rejected"

    # Assignments
    ASSIGNMENT_RECORDED = "assignment_recorded"
    ASSIGNMENT_REJECTED = "assignment_rejected"

    # Summaries
    TOTALS_CALCULATED = "totals_calculated"
    RECENT_LISTED = "recent_listed"

    # Import / export
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_EXPORTED = "ledger_exported"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which entry is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'assignment', 'summary')"
    )
    entity_key: Optional[str] = Field(
        default=None,
        description="Normalized name of the entry this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": format_timestamp(self.timestamp),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_key": self.entity_key,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_created("Alice", "alice", correlation_id)
        event = AuditEventBuilder.assignment_rejected("carol", code, message, correlation_id)
    """

    @staticmethod
    def entry_created(
        name: str,
        normalized_name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            entity_type="entry",
            entity_key=normalized_name,
            correlation_id=correlation_id,
            description=f"Entry created: {name}",
            details={"name": name},
        )

    @staticmethod
    def entry_rejected(
        raw_name: Any,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            correlation_id=correlation_id,
            description=f"Entry rejected: {error_code}",
            details={"raw_name": repr(raw_name)},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def assignment_recorded(
        name: str,
        normalized_name: str,
        amount: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSIGNMENT_RECORDED,
            entity_type="assignment",
            entity_key=normalized_name,
            correlation_id=correlation_id,
            description=f"Assignment recorded: {name} - {amount:,.2f}",
            details={"name": name, "amount": amount},
        )

    @staticmethod
    def assignment_rejected(
        raw_name: Any,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSIGNMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="assignment",
            correlation_id=correlation_id,
            description=f"Assignment rejected: {error_code}",
            details={"raw_name": repr(raw_name)},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def totals_calculated(
        group_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TOTALS_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="summary",
            correlation_id=correlation_id,
            description=f"Totals calculated for {group_count} entries",
            details={
                "group_count": group_count,
                "assignment_count": assignment_count,
            },
        )

    @staticmethod
    def recent_listed(
        limit: int,
        result_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECENT_LISTED,
            severity=AuditSeverity.DEBUG,
            entity_type="summary",
            correlation_id=correlation_id,
            description=f"Recent assignments listed: {result_count} of limit {limit}",
            details={"limit": limit, "result_count": result_count},
        )

    @staticmethod
    def ledger_loaded(
        entry_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger loaded: {entry_count} entries, {assignment_count} assignments",
            details={
                "entry_count": entry_count,
                "assignment_count": assignment_count,
            },
        )

    @staticmethod
    def ledger_exported(
        entry_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_EXPORTED,
            severity=AuditSeverity.DEBUG,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger exported: {entry_count} entries, {assignment_count} assignments",
            details={
                "entry_count": entry_count,
                "assignment_count": assignment_count,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
