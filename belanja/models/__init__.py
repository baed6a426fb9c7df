"""
Data Models Package

This package contains the Pydantic models used in Daftar Belanja.
Everything read from or written to storage goes through `Record`.
"""

from belanja.models.record import (
    DEFAULT_UNIT,
    Record,
    parse_record_date,
)
from belanja.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record model
    "DEFAULT_UNIT",
    "Record",
    "parse_record_date",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
