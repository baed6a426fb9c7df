"""Record input validation package."""

from belanja.validation.validator import (
    RecordValidator,
    ValidationError,
    ValidationIssue,
    parse_amount,
)

__all__ = ["RecordValidator", "ValidationError", "ValidationIssue", "parse_amount"]
