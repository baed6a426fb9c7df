"""
Core Data Model for Daftar Belanja

A Record is one logged purchase. The model is designed to:
1. Enforce field rules when a record is created or edited
2. Stay readable for rows persisted by older versions of the app
3. Serialize to the exact persisted layout (Indonesian field names)

DESIGN DECISION: Internally we use English attribute names and map them to
the persisted names with pydantic aliases. The persisted layout is a JSON
array under a single storage key, so the aliases ARE the storage schema.
"""

import re
from datetime import date as CalendarDate
from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


ISO_DATE_FORMAT = "%Y-%m-%d"
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DEFAULT_UNIT = "pcs"

# Validation context used for rows read back from storage
STORED_CONTEXT = {"stored": True}


def parse_record_date(value: Any) -> Optional[CalendarDate]:
    """Parse a `YYYY-MM-DD` string into a date. Returns None if it is not one."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError:
        return None


def _is_stored(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("stored"))


class Record(BaseModel):
    """
    A single purchase entry.

    Records are immutable. Editing a purchase means saving a new Record
    with the same `id`, which the store swaps in place.

    Rows loaded from storage are validated leniently (see `from_storage`):
    an unparseable date or an empty name does not make the row unreadable.
    Such rows stay in storage and in unfiltered counts, but never show up
    in date-filtered or grouped views.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: int = Field(
        ...,
        ge=0,
        description="Unique record ID (creation time in epoch milliseconds)"
    )
    date: str = Field(
        ...,
        description="Purchase date as YYYY-MM-DD"
    )
    name: str = Field(
        ...,
        alias="namaBarang",
        description="Item name"
    )
    total_price: int = Field(
        ...,
        ge=0,
        alias="hargaTotal",
        description="Total price in the smallest currency unit"
    )
    quantity: int = Field(
        default=0,
        ge=0,
        alias="jumlah",
        description="Quantity bought (0 = no detail)"
    )
    unit: str = Field(
        default=DEFAULT_UNIT,
        alias="satuan",
        description="Unit label, meaningful only when quantity > 0"
    )

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        """Accept date/datetime objects and store them as ISO strings."""
        if isinstance(v, datetime):
            return v.date().strftime(ISO_DATE_FORMAT)
        if isinstance(v, CalendarDate):
            return v.strftime(ISO_DATE_FORMAT)
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str, info: ValidationInfo) -> str:
        if parse_record_date(v) is None and not _is_stored(info):
            raise ValueError(f"Date must be a valid YYYY-MM-DD date, got {v!r}")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str, info: ValidationInfo) -> str:
        if not v and not _is_stored(info):
            raise ValueError("Item name cannot be empty")
        return v

    @field_validator("total_price", "quantity", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        # bool is an int subclass and would otherwise slip through as 0/1
        if isinstance(v, bool):
            raise ValueError("Must be a number")
        return v

    @property
    def parsed_date(self) -> Optional[CalendarDate]:
        """The purchase date, or None if the stored string is not a valid date."""
        return parse_record_date(self.date)

    @property
    def unit_price(self) -> Optional[float]:
        """Price per unit. Undefined (None) when no quantity was given."""
        if self.quantity > 0:
            return self.total_price / self.quantity
        return None

    @classmethod
    def from_storage(cls, row: dict[str, Any]) -> "Record":
        """
        Build a Record from a persisted row.

        Type and non-negativity rules still apply. The stored
        `hargaSatuan` is ignored; unit price is always recomputed.
        """
        return cls.model_validate(row, context=STORED_CONTEXT)

    def to_storage_dict(self) -> dict[str, Any]:
        """
        Convert to the persisted row layout.

        `hargaSatuan` is redundant but kept so older readers of the blob
        keep working. It is 0 when the unit price is undefined.
        """
        row = self.model_dump(by_alias=True)
        row["hargaSatuan"] = self.unit_price or 0
        return row
