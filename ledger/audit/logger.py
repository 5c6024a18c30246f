"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every write
2. A record of partial writes that were not rolled back
3. Skipped-row diagnostics for imports, without changing their result

The audit logger:
- Is async so it can persist through the same storage abstraction
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from ledger.config import get_settings
from ledger.models.audit import AuditEvent, AuditEventBuilder
from ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Apply the configured log level to the "ledger" logger tree.

    structlog's filter_by_level defers to the stdlib level, so this is what
    decides which audit and service lines are emitted. debug_mode forces
    DEBUG. A stdout handler is attached once.

    Args:
        level: Explicit level name. Defaults to AppSettings.
    """
    app = get_settings().app
    level = (level or ("DEBUG" if app.debug_mode else app.log_level)).upper()

    root = logging.getLogger("ledger")
    root.setLevel(getattr(logging, level))

    # Avoid duplicate handlers
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.get_logger(__name__).debug(
        "logging_configured",
        level=level,
        environment=app.app_environment,
    )
    return root


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        severity = event.severity.value
        if severity in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def _emit(self, build: Callable[..., AuditEvent], **kwargs) -> bool:
        """
        Build an event and log it.

        Event construction gets the same treatment as the storage write: a
        failure is logged locally and never reaches the caller, whose data
        may already be committed.
        """
        try:
            event = build(**kwargs)
        except Exception as e:
            self._logger.error(
                "audit_event_build_failed",
                builder=getattr(build, "__name__", repr(build)),
                error=str(e),
            )
            return False
        return await self.log(event)

    async def log_transaction_created(
        self,
        transaction_id: UUID,
        title: str,
        transaction_type: str,
        value: float,
        category_title: str,
        correlation_id: UUID,
    ) -> None:
        await self._emit(
            AuditEventBuilder.transaction_created,
            transaction_id=transaction_id,
            title=title,
            transaction_type=transaction_type,
            value=value,
            category_title=category_title,
            correlation_id=correlation_id,
        )

    async def log_category_created(
        self,
        category_id: UUID,
        title: str,
        correlation_id: UUID,
    ) -> None:
        await self._emit(
            AuditEventBuilder.category_created,
            category_id=category_id,
            title=title,
            correlation_id=correlation_id,
        )

    async def log_validation_failed(
        self,
        reason: str,
        details: dict,
        correlation_id: UUID,
    ) -> None:
        """Log a rejected transaction request."""
        await self._emit(
            AuditEventBuilder.validation_failed,
            reason=reason,
            details=details,
            correlation_id=correlation_id,
        )

    async def log_import_started(
        self,
        file_path: str,
        correlation_id: UUID,
    ) -> None:
        await self._emit(
            AuditEventBuilder.import_started,
            file_path=file_path,
            correlation_id=correlation_id,
        )

    async def log_import_row_skipped(
        self,
        file_path: str,
        line_number: int,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        await self._emit(
            AuditEventBuilder.import_row_skipped,
            file_path=file_path,
            line_number=line_number,
            reason=reason,
            correlation_id=correlation_id,
        )

    async def log_import_completed(
        self,
        file_path: str,
        imported_count: int,
        skipped_count: int,
        new_categories: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log import completion (before source file cleanup)."""
        await self._emit(
            AuditEventBuilder.import_completed,
            file_path=file_path,
            imported_count=imported_count,
            skipped_count=skipped_count,
            new_categories=new_categories,
            correlation_id=correlation_id,
        )

    async def log_source_file_deleted(
        self,
        file_path: str,
        correlation_id: UUID,
    ) -> None:
        await self._emit(
            AuditEventBuilder.source_file_deleted,
            file_path=file_path,
            correlation_id=correlation_id,
        )

    async def log_source_file_cleanup_failed(
        self,
        file_path: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a cleanup failure after transactions were already committed."""
        await self._emit(
            AuditEventBuilder.source_file_cleanup_failed,
            file_path=file_path,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self._emit(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new service call (e.g., one import).
    Pass it through all subsequent operations.
    """
    return uuid4()
