"""
Audit Logger

DESIGN DECISION: Every mutation and every storage failure is logged.
This provides:
1. Traceability of what was saved and deleted
2. Debugging capability when the blob store misbehaves
3. Visibility into reads that were silently recovered

The audit logger:
- Writes structured JSON lines through structlog
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from belanja.models.audit import AuditEvent, AuditEventBuilder


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


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured log at the level matching their severity.
    """

    def __init__(self, logger_name: str = "belanja.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity."""
        log_dict = event.to_log_dict()
        severity = event.severity.value

        if severity == "error":
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_record_saved(
        self,
        record_id: int,
        name: str,
        total_price: int,
        is_update: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful save or edit."""
        self.log(AuditEventBuilder.record_saved(
            record_id=record_id,
            name=name,
            total_price=total_price,
            is_update=is_update,
            correlation_id=correlation_id,
        ))

    def log_records_deleted(
        self,
        record_ids: list[int],
        removed: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a single or bulk delete."""
        self.log(AuditEventBuilder.records_deleted(
            record_ids=record_ids,
            removed=removed,
            correlation_id=correlation_id,
        ))

    def log_save_failed(
        self,
        record_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(
            record_id=record_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_delete_failed(
        self,
        record_ids: list[int],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.delete_failed(
            record_ids=record_ids,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_collection_loaded(self, record_count: int, storage_key: str) -> None:
        self.log(AuditEventBuilder.collection_loaded(
            record_count=record_count,
            storage_key=storage_key,
        ))

    def log_storage_read_failed(self, storage_key: str, error_message: str) -> None:
        """Log a read failure that was recovered as an empty collection."""
        self.log(AuditEventBuilder.storage_read_failed(
            storage_key=storage_key,
            error_message=error_message,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., a form submission).
    """
    return uuid4()
