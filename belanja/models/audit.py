"""
Audit Models for Daftar Belanja

Every mutation of the shopping log, and every storage failure, produces
an audit event. This provides:
1. Traceability of saves and deletes
2. Debugging information when storage misbehaves
3. A record of silently recovered read failures

DESIGN DECISION: Audit events are emitted to the structured log only.
The persisted blob belongs to the record store and nothing else writes it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    RECORD_SAVED = "record_saved"
    RECORD_UPDATED = "record_updated"
    RECORDS_DELETED = "records_deleted"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"

    # Input
    VALIDATION_FAILED = "validation_failed"

    # Reads
    COLLECTION_LOADED = "collection_loaded"
    STORAGE_READ_FAILED = "storage_read_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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

    # Context - which record(s) is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'record', 'collection')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Record ID this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one form submission)"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

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
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_saved(record_id, name, total, correlation_id)
        event = AuditEventBuilder.records_deleted(ids, correlation_id)
    """

    @staticmethod
    def record_saved(
        record_id: int,
        name: str,
        total_price: int,
        is_update: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.RECORD_UPDATED if is_update else AuditEventType.RECORD_SAVED
        )
        verb = "updated" if is_update else "saved"
        return AuditEvent(
            event_type=event_type,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Record {verb}: {name}",
            details={"name": name, "total_price": total_price},
            is_user_action=True,
        )

    @staticmethod
    def records_deleted(
        record_ids: list[int],
        removed: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_DELETED,
            entity_type="record",
            entity_id=record_ids[0] if len(record_ids) == 1 else None,
            correlation_id=correlation_id,
            description=f"Deleted {removed} record(s)",
            details={"requested_ids": record_ids, "removed": removed},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        record_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description="Failed to save record",
            error_message=error_message,
        )

    @staticmethod
    def delete_failed(
        record_ids: list[int],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="record",
            correlation_id=correlation_id,
            description=f"Failed to delete {len(record_ids)} record(s)",
            details={"requested_ids": record_ids},
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="record",
            correlation_id=correlation_id,
            description=f"Record rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def collection_loaded(
        record_count: int,
        storage_key: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="collection",
            description=f"Loaded {record_count} record(s)",
            details={"record_count": record_count, "storage_key": storage_key},
        )

    @staticmethod
    def storage_read_failed(
        storage_key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            description="Stored records could not be read; showing an empty list",
            details={"storage_key": storage_key},
            error_message=error_message,
        )
