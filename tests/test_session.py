"""Tests for the host-side ledger session, audit logger and settings."""

import pytest
import structlog
from datetime import datetime, timezone

from ledger.audit import AuditLogger, configure_logging, create_correlation_id
from ledger.config import AppSettings, LoggingSettings, get_settings, validate_all_settings
from ledger.errors import (
    DuplicateEntryError,
    ErrorCode,
    InvalidAmountError,
    InvalidAssignmentsCollectionError,
    InvalidEntriesCollectionError,
    UnknownEntryError,
)
from ledger.models import AuditEventType, AuditSeverity
from ledger.orchestrator import LedgerSession, NameTooLongError


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(recent_limit=2, max_name_length=10)


@pytest.fixture
def session(settings) -> LedgerSession:
    return LedgerSession(
        clock=lambda: utc(2024, 6, 1),
        audit_logger=AuditLogger(),
        settings=settings,
    )


class TestLedgerSession:
    """Tests for LedgerSession flows."""

    def test_add_entry_and_assignment(self, session):
        """Test the basic flow end to end."""
        entry = session.add_entry(" Alice ", now=utc(2024, 1, 1))
        record = session.add_assignment("ALICE", "12.5", now=utc(2024, 1, 2))

        assert entry.name == "Alice"
        assert record.name == "Alice"
        assert session.entries == (entry,)
        assert session.assignments == (record,)

    def test_entries_stay_newest_first(self, session):
        session.add_entry("Alice", now=utc(2024, 1, 1))
        session.add_entry("Bob", now=utc(2024, 1, 2))
        session.add_entry("Carol", now=utc(2023, 1, 1))
        assert [e.name for e in session.entries] == ["Carol", "Bob", "Alice"]

    def test_clock_is_used_without_now(self, session):
        entry = session.add_entry("Dana")
        assert entry.created_at == utc(2024, 6, 1)

    def test_duplicate_is_rejected_and_audited(self, session):
        correlation_id = create_correlation_id()
        session.add_entry("Alice")

        with pytest.raises(DuplicateEntryError):
            session.add_entry("alice ", correlation_id=correlation_id)

        assert len(session.entries) == 1
        rejected = session.audit_logger.events[-1]
        assert rejected.event_type == AuditEventType.ENTRY_REJECTED
        assert rejected.error_code == ErrorCode.ENTRY_DUPLICATE.value
        assert rejected.correlation_id == correlation_id

    def test_failed_assignment_keeps_state(self, session):
        session.add_entry("Alice")
        session.add_assignment("alice", 1)

        with pytest.raises(InvalidAmountError):
            session.add_assignment("alice", "ten")
        with pytest.raises(UnknownEntryError):
            session.add_assignment("carol", 10)

        assert len(session.assignments) == 1
        codes = [e.error_code for e in session.audit_logger.events if e.error_code]
        assert codes == ["ASSIGN_INVALID_NUMBER", "ASSIGN_UNKNOWN_ENTRY"]

    def test_name_length_limit(self, session):
        with pytest.raises(NameTooLongError) as exc_info:
            session.add_entry("  Bartholomew  ")
        assert exc_info.value.max_length == 10
        assert session.entries == ()

    def test_totals(self, session):
        session.add_entry("Bob")
        session.add_entry("alice")
        session.add_assignment("bob", 7)
        session.add_assignment("ALICE", 10)
        session.add_assignment("Alice", 5)

        totals = session.totals()
        assert [(t.name, t.total) for t in totals] == [("alice", 15.0), ("Bob", 7.0)]
        assert session.audit_logger.events[-1].event_type == AuditEventType.TOTALS_CALCULATED

    def test_recent_uses_configured_limit(self, session):
        session.add_entry("Alice")
        for day in (1, 3, 2):
            session.add_assignment("alice", day, now=utc(2024, 1, day))

        recent = session.recent()
        assert [r.amount for r in recent] == [3.0, 2.0]
        assert len(session.recent(limit=10)) == 3

    def test_events_are_logged_in_order(self, session):
        session.add_entry("Alice")
        session.add_assignment("alice", 1)
        types = [e.event_type for e in session.audit_logger.events]
        assert types == [AuditEventType.ENTRY_CREATED, AuditEventType.ASSIGNMENT_RECORDED]

    def test_rejects_invalid_initial_collections(self, settings):
        with pytest.raises(InvalidEntriesCollectionError):
            LedgerSession(entries=None, settings=settings)
        with pytest.raises(InvalidAssignmentsCollectionError):
            LedgerSession(assignments="x", settings=settings)


class TestImportExport:
    """Tests for to_dict / from_dict."""

    def test_round_trip_preserves_wire_form(self, session, settings):
        session.add_entry("Alice", now=utc(2024, 1, 1, 12))
        session.add_assignment("alice", "15.5", now=utc(2024, 2, 1))
        payload = session.to_dict()

        assert payload == {
            "entries": [
                {"name": "Alice", "normalizedName": "alice", "createdAt": "2024-01-01T12:00:00.000Z"},
            ],
            "assignments": [
                {
                    "name": "Alice",
                    "normalizedName": "alice",
                    "amount": 15.5,
                    "createdAt": "2024-02-01T00:00:00.000Z",
                },
            ],
        }

        loaded = LedgerSession.from_dict(payload, audit_logger=AuditLogger(), settings=settings)
        assert loaded.entries == session.entries
        assert loaded.assignments == session.assignments
        assert loaded.audit_logger.events[-1].event_type == AuditEventType.LEDGER_LOADED

    def test_missing_keys_mean_empty(self, settings):
        loaded = LedgerSession.from_dict({}, settings=settings)
        assert loaded.entries == ()
        assert loaded.assignments == ()

    def test_rejects_non_list_values(self, settings):
        with pytest.raises(InvalidEntriesCollectionError):
            LedgerSession.from_dict({"entries": {"a": 1}}, settings=settings)
        with pytest.raises(InvalidAssignmentsCollectionError):
            LedgerSession.from_dict({"assignments": None}, settings=settings)

    def test_rejects_duplicate_entries(self, settings):
        payload = {
            "entries": [
                {"name": "Alice", "normalizedName": "alice", "createdAt": "2024-01-01T00:00:00Z"},
                {"name": "ALICE", "normalizedName": "alice", "createdAt": "2024-01-02T00:00:00Z"},
            ],
        }
        with pytest.raises(DuplicateEntryError):
            LedgerSession.from_dict(payload, settings=settings)

    def test_rejects_orphan_assignments(self, settings):
        payload = {
            "entries": [],
            "assignments": [
                {"name": "Carol", "normalizedName": "carol", "amount": 1, "createdAt": "2024-01-01T00:00:00Z"},
            ],
        }
        with pytest.raises(UnknownEntryError) as exc_info:
            LedgerSession.from_dict(payload, settings=settings)
        assert "Carol" in str(exc_info.value)

    def test_rejects_malformed_entry_records(self, settings):
        payload = {"entries": [{"name": "Alice", "normalizedName": "alice"}]}
        with pytest.raises(InvalidEntriesCollectionError) as exc_info:
            LedgerSession.from_dict(payload, settings=settings)
        assert exc_info.value.code == ErrorCode.ENTRY_INVALID_COLLECTION

    def test_rejected_payload_is_audited_as_system_error(self, settings):
        audit = AuditLogger()
        correlation_id = create_correlation_id()
        with pytest.raises(DuplicateEntryError):
            LedgerSession.from_dict(
                {
                    "entries": [
                        {"name": "Alice", "normalizedName": "alice", "createdAt": "2024-01-01T00:00:00Z"},
                        {"name": "alice", "normalizedName": "alice", "createdAt": "2024-01-02T00:00:00Z"},
                    ],
                },
                audit_logger=audit,
                settings=settings,
                correlation_id=correlation_id,
            )

        event = audit.events[-1]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"stage": "load"}
        assert event.correlation_id == correlation_id
        assert all(e.event_type != AuditEventType.LEDGER_LOADED for e in audit.events)


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_through_structlog_at_event_severity(self):
        with structlog.testing.capture_logs() as captured:
            audit = AuditLogger()
            audit.log_entry_rejected("", "ENTRY_EMPTY", "Name cannot be empty.")
            audit.log_entry_created("Alice", "alice")

        assert [c["log_level"] for c in captured] == ["warning", "info"]
        assert captured[0]["event"] == "audit_event"
        assert captured[0]["error_code"] == "ENTRY_EMPTY"
        assert captured[1]["entity_key"] == "alice"

    def test_error_events(self):
        audit = AuditLogger()
        audit.log_error("RuntimeError", "boom", details={"step": "export"})
        event = audit.events[-1]
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"step": "export"}

    def test_events_view_is_read_only(self):
        audit = AuditLogger()
        audit.log_ledger_exported(0, 0)
        assert isinstance(audit.events, tuple)

    def test_configure_logging_console_renderer(self):
        configure_logging(LoggingSettings(level="debug", json_output=False))
        assert structlog.is_configured()
        configure_logging(LoggingSettings())


class TestSettings:
    """Tests for configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_RECENT_LIMIT", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.recent_limit == 5
        assert settings.max_name_length == 200
        assert set(AppSettings.model_fields) == {"recent_limit", "max_name_length"}

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_RECENT_LIMIT", "12")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "warning")
        assert AppSettings(_env_file=None).recent_limit == 12
        assert LoggingSettings(_env_file=None).level == "WARNING"

    def test_invalid_values_are_rejected(self):
        with pytest.raises(ValueError):
            AppSettings(recent_limit=0)
        with pytest.raises(ValueError):
            LoggingSettings(level="loud")

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.setenv("LEDGER_RECENT_LIMIT", "-1")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
        assert results["logging"] is True
        get_settings.cache_clear()
