"""
Audit Logger

DESIGN DECISION: Every change a host makes to its ledger is logged.
This provides:
1. Complete traceability
2. Debugging capability when input is rejected
3. A history the user can review

The functional core (registry, queries) never logs. Only the host layer
calls into this module.

The audit logger:
- Logs every event locally through structlog at the event's severity
- Keeps an append-only, in-memory trail of events
- Supports correlation IDs to trace related events
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from ledger.config import LoggingSettings, get_settings
from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog and the stdlib root level.

    Safe to call more than once; the latest settings win.
    """
    settings = settings or get_settings().logging
    logging.basicConfig(format="%(message)s", level=settings.level)
    logging.getLogger().setLevel(settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The in-memory audit trail (``events``)
    """

    def __init__(self, logger_name: str = "ledger.audit"):
        if not structlog.is_configured():
            configure_logging()
        self._logger = structlog.get_logger(logger_name)
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> tuple[AuditEvent, ...]:
        """All events logged so far, oldest first."""
        return tuple(self._events)

    def log(self, event: AuditEvent) -> AuditEvent:
        """Log an audit event and append it to the trail."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)
        return event

    def log_entry_created(
        self,
        name: str,
        normalized_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new entry."""
        self.log(AuditEventBuilder.entry_created(
            name=name,
            normalized_name=normalized_name,
            correlation_id=correlation_id,
        ))

    def log_entry_rejected(
        self,
        raw_name: Any,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an entry the core refused to create."""
        self.log(AuditEventBuilder.entry_rejected(
            raw_name=raw_name,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_assignment_recorded(
        self,
        name: str,
        normalized_name: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a recorded assignment."""
        self.log(AuditEventBuilder.assignment_recorded(
            name=name,
            normalized_name=normalized_name,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_assignment_rejected(
        self,
        raw_name: Any,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an assignment the core refused to record."""
        self.log(AuditEventBuilder.assignment_rejected(
            raw_name=raw_name,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_totals_calculated(
        self,
        group_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.totals_calculated(
            group_count=group_count,
            assignment_count=assignment_count,
            correlation_id=correlation_id,
        ))

    def log_recent_listed(
        self,
        limit: int,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.recent_listed(
            limit=limit,
            result_count=result_count,
            correlation_id=correlation_id,
        ))

    def log_ledger_loaded(
        self,
        entry_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            entry_count=entry_count,
            assignment_count=assignment_count,
            correlation_id=correlation_id,
        ))

    def log_ledger_exported(
        self,
        entry_count: int,
        assignment_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.ledger_exported(
            entry_count=entry_count,
            assignment_count=assignment_count,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action and pass it through
    every call that belongs to it.
    """
    return uuid4()
