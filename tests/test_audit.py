"""Tests for the audit logger and logging setup."""

import logging

import pytest

from ledger.audit import AuditLogger, configure_logging, create_correlation_id
from ledger.config import get_settings
from ledger.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from ledger.orchestrator import create_app_components
from ledger.services.storage import AuditStorageInterface, InMemoryAuditStorage


class FailingAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise RuntimeError("storage offline")


class TestAuditLogger:
    """AuditLogger persists when it can and never raises."""

    def test_local_only(self, run):
        """Test logging without storage reports success."""
        logger = AuditLogger()
        event = AuditEventBuilder.import_started("/tmp/a.csv", create_correlation_id())
        assert run(logger.log(event)) is True

    def test_persists_events(self, run):
        """Test events reach the configured storage."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        run(logger.log_import_started("/tmp/a.csv", correlation_id))
        run(logger.log_import_completed("/tmp/a.csv", 2, 0, ["Job"], correlation_id))

        events = run(storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.IMPORT_STARTED,
            AuditEventType.IMPORT_COMPLETED,
        ]

    def test_storage_failure_is_swallowed(self, run):
        """Test a failing audit store doesn't break the caller."""
        logger = AuditLogger(FailingAuditStorage())
        ok = run(logger.log(AuditEventBuilder.system_error("boom", "details")))
        assert ok is False

    def test_storage_interface(self):
        """Test the in-memory store implements the interface."""
        assert isinstance(InMemoryAuditStorage(), AuditStorageInterface)

    def test_log_error_persists_system_error(self, run):
        """Test log_error records an error-severity system_error event."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        run(logger.log_error("storage_error", "disk full", {"rows": 3}, correlation_id))

        [event] = run(storage.get_events_by_correlation_id(correlation_id))
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.details == {"rows": 3}

    def test_event_build_failure_is_swallowed(self, run):
        """Test an event that cannot be built is dropped without raising."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        run(logger.log_import_started("/tmp/a.csv", correlation_id="not-a-uuid"))

        assert run(storage.get_recent_events()) == []


class TestConfigureLogging:
    """configure_logging applies AppSettings to the ledger logger."""

    @pytest.fixture(autouse=True)
    def fresh_logging(self):
        ledger_logger = logging.getLogger("ledger")
        level, handlers = ledger_logger.level, list(ledger_logger.handlers)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()
        ledger_logger.setLevel(level)
        ledger_logger.handlers = handlers

    def test_uses_log_level(self, monkeypatch):
        """Test LOG_LEVEL sets the level of the ledger logger."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        configure_logging()
        assert logging.getLogger("ledger").level == logging.ERROR
        assert logging.getLogger("ledger.transactions.importer").getEffectiveLevel() == logging.ERROR

    def test_debug_mode_forces_debug(self, monkeypatch):
        """Test DEBUG_MODE overrides the configured level."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("DEBUG_MODE", "true")
        configure_logging()
        assert logging.getLogger("ledger").level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch):
        """Test an explicit level beats the settings."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        configure_logging("info")
        assert logging.getLogger("ledger").level == logging.INFO

    def test_single_handler(self):
        """Test repeated calls don't stack handlers."""
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("ledger").handlers) == 1

    def test_applied_by_factory(self, monkeypatch):
        """Test create_app_components configures logging."""
        monkeypatch.setenv("LOG_LEVEL", "CRITICAL")
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        create_app_components(backend="memory")
        assert logging.getLogger("ledger").level == logging.CRITICAL
