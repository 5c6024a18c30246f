"""
Audit Models for Ledger

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every transaction and category write
2. Debugging information when an import goes wrong
3. A record of partial writes that were not rolled back

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from ledger.models.transaction import utc_now


DESCRIPTION_MAX_LENGTH = 500


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Single create
    TRANSACTION_CREATED = "transaction_created"
    CATEGORY_CREATED = "category_created"
    VALIDATION_FAILED = "validation_failed"

    # CSV import
    IMPORT_STARTED = "import_started"
    IMPORT_ROW_SKIPPED = "import_row_skipped"
    IMPORT_COMPLETED = "import_completed"
    SOURCE_FILE_DELETED = "source_file_deleted"
    SOURCE_FILE_CLEANUP_FAILED = "source_file_cleanup_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'category', 'import')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one import)"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    @field_validator('description', mode='before')
    @classmethod
    def truncate_description(cls, v):
        """Descriptions embed user text (titles, CSV cells); cut instead of failing."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[:DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_row(self) -> tuple:
        """
        Convert to a row suitable for table storage.

        Columns in order:
        (event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message)
        """
        return (
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
        )


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_created(transaction_id, ...)
        event = AuditEventBuilder.import_completed(file_path, ...)
    """

    @staticmethod
    def transaction_created(
        transaction_id: UUID,
        title: str,
        transaction_type: str,
        value: float,
        category_title: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction created: {title} ({transaction_type} {value})",
            details={
                "title": title,
                "type": transaction_type,
                "value": value,
                "category": category_title,
            },
        )

    @staticmethod
    def category_created(
        category_id: UUID,
        title: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category created: {title}",
            details={"title": title},
        )

    @staticmethod
    def validation_failed(
        reason: str,
        details: dict,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction rejected: {reason}",
            details=details,
        )

    @staticmethod
    def import_started(
        file_path: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import started: {file_path}",
            details={"file_path": file_path},
        )

    @staticmethod
    def import_row_skipped(
        file_path: str,
        line_number: int,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_ROW_SKIPPED,
            severity=AuditSeverity.DEBUG,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Row {line_number} skipped: {reason}",
            details={
                "file_path": file_path,
                "line_number": line_number,
                "reason": reason,
            },
        )

    @staticmethod
    def import_completed(
        file_path: str,
        imported_count: int,
        skipped_count: int,
        new_categories: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import completed: {imported_count} transactions, {skipped_count} rows skipped",
            details={
                "file_path": file_path,
                "imported_count": imported_count,
                "skipped_count": skipped_count,
                "new_categories": new_categories,
            },
        )

    @staticmethod
    def source_file_deleted(
        file_path: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_FILE_DELETED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Source file deleted: {file_path}",
            details={"file_path": file_path},
        )

    @staticmethod
    def source_file_cleanup_failed(
        file_path: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_FILE_CLEANUP_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Source file could not be deleted after import: {file_path}",
            error_message=error_message,
            details={"file_path": file_path},
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
