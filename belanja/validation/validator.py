"""
Record Input Validation

DESIGN DECISION: Raw form input is validated in two steps:

STEP 1 - INPUT PARSING:
- Amount fields arrive as display strings ("Rp 15.000")
- Grouping separators and currency prefixes are stripped
- Anything that is still not a whole number is rejected

STEP 2 - MODEL VALIDATION:
- The parsed values are handed to the Record model
- Pydantic errors are translated into ValidationIssue objects

Warnings (future date, unit without quantity) never block a save.
They are returned separately so the caller can show them.

IMPORTANT: Validation NEVER silently fixes bad values.
An unparseable amount is an error, not a zero.
"""

import re
from datetime import date, timedelta
from typing import Any, Optional

import pydantic
from pydantic import BaseModel, Field

from belanja.config import AppSettings, get_settings
from belanja.models.record import Record


AMOUNT_PREFIXES = ("rp", "idr")
_SEPARATORS = re.compile(r"[.,\s]")
# Plain digits, or digits grouped in threes: 15000, 15.000, 1,250,000, 2 500
_GROUPED_AMOUNT = re.compile(r"[0-9]{1,3}(?:[.,\s][0-9]{3})+|[0-9]+")

# Persisted alias -> attribute name, for readable error locations
_ALIAS_TO_FIELD = {
    info.alias: name
    for name, info in Record.model_fields.items()
    if info.alias
}


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_numeric', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationError(Exception):
    """Record fields were rejected. Nothing was persisted."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__(
            "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        )

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    def to_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


def parse_amount(value: Any, field: str = "total_price", required: bool = True) -> int:
    """
    Parse a whole, non-negative amount from form input.

    Accepts ints, integral floats and display strings such as
    "15.000", "15,000" or "Rp 15.000". Separators must split the digits
    into groups of three. An empty value is 0 unless
    `required` is set, in which case it is a `missing` error.

    Raises:
        ValidationError: If the value is not a non-negative whole number
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError([ValidationIssue(
                field=field,
                issue_type="missing",
                message="A value is required",
                severity="error",
            )])
        return 0

    if isinstance(value, bool):
        raise _not_numeric(field, value)

    if isinstance(value, int):
        if value < 0:
            raise _negative(field, value)
        return value

    if isinstance(value, float):
        if not value.is_integer():
            raise _not_numeric(field, value)
        if value < 0:
            raise _negative(field, value)
        return int(value)

    if isinstance(value, str):
        text = value.strip().lower()
        for prefix in AMOUNT_PREFIXES:
            if text.startswith(prefix):
                text = text[len(prefix):].strip()
                break
        if text.startswith("-"):
            raise _negative(field, value)
        # "15.5" or "1,50" is a decimal, not a grouped whole amount
        if not _GROUPED_AMOUNT.fullmatch(text):
            raise _not_numeric(field, value)
        return int(_SEPARATORS.sub("", text))

    raise _not_numeric(field, value)


def _not_numeric(field: str, value: Any) -> ValidationError:
    return ValidationError([ValidationIssue(
        field=field,
        issue_type="not_numeric",
        message=f"Expected a whole number, got {value!r}",
        severity="error",
        suggested_fix="Enter digits only, e.g. 15000 or 15.000",
    )])


def _negative(field: str, value: Any) -> ValidationError:
    return ValidationError([ValidationIssue(
        field=field,
        issue_type="invalid_value",
        message=f"Must not be negative, got {value!r}",
        severity="error",
    )])


class RecordValidator:
    """
    Turns raw entry-form fields into a validated Record.

    All input errors are collected and raised together so the form can
    highlight every bad field at once.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def build(
        self,
        *,
        record_id: int,
        date: Any,
        name: Any,
        total_price: Any,
        quantity: Any = 0,
        unit: Optional[str] = None,
    ) -> Record:
        """
        Build a Record from form input.

        Raises:
            ValidationError: If any field is invalid
        """
        issues: list[ValidationIssue] = []

        parsed_price = self._collect(
            issues, parse_amount, total_price, "total_price", True
        )
        parsed_quantity = self._collect(
            issues, parse_amount, quantity, "quantity", False
        )

        unit = (unit or "").strip() or self._settings.default_unit

        try:
            record = Record(
                id=record_id,
                date=date,
                name=name if name is not None else "",
                # Placeholder keeps model errors for other fields visible
                total_price=parsed_price if parsed_price is not None else 0,
                quantity=parsed_quantity if parsed_quantity is not None else 0,
                unit=unit,
            )
        except pydantic.ValidationError as e:
            issues.extend(self._from_pydantic(e))
            record = None

        if issues:
            raise ValidationError(issues)

        return record

    def check_warnings(
        self,
        record: Record,
        today: Optional[date] = None,
    ) -> list[ValidationIssue]:
        """Non-blocking checks on an already valid record."""
        warnings = []
        today = today or date.today()

        max_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        purchase_date = record.parsed_date
        if purchase_date and purchase_date > max_date:
            warnings.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Purchase date ({record.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if record.quantity == 0 and record.unit != self._settings.default_unit:
            warnings.append(ValidationIssue(
                field="unit",
                issue_type="ignored",
                message=f"Unit '{record.unit}' has no effect without a quantity",
                severity="warning",
            ))

        return warnings

    @staticmethod
    def _collect(issues, parser, value, field, required) -> Optional[int]:
        try:
            return parser(value, field=field, required=required)
        except ValidationError as e:
            issues.extend(e.issues)
            return None

    @staticmethod
    def _from_pydantic(error: pydantic.ValidationError) -> list[ValidationIssue]:
        issues = []
        for err in error.errors():
            loc = str(err["loc"][0]) if err["loc"] else "record"
            issues.append(ValidationIssue(
                field=_ALIAS_TO_FIELD.get(loc, loc),
                issue_type=err["type"],
                message=err["msg"],
                severity="error",
            ))
        return issues
