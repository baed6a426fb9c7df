"""
Date Range Filter

Filtering is pure and order-preserving: it never reorders its input.
Comparison is by calendar day, so a bound picked "today at 15:30"
still includes purchases dated today.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from belanja.models.record import Record


DateBound = Optional[Union[date, datetime]]


def _as_day(value: DateBound) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


class DateRange(BaseModel):
    """
    Inclusive range of purchase dates. Either bound may be open.

    An inverted range (from after to) is allowed and matches nothing.
    """
    model_config = ConfigDict(frozen=True)

    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        return _as_day(v)

    @property
    def is_active(self) -> bool:
        """True if at least one bound is set."""
        return self.date_from is not None or self.date_to is not None

    def contains(self, day: Optional[date]) -> bool:
        """Does `day` fall in the range? An unknown day never does."""
        if day is None:
            return False
        if self.date_from is not None and day < self.date_from:
            return False
        if self.date_to is not None and day > self.date_to:
            return False
        return True

    def apply(self, records: Iterable[Record]) -> list[Record]:
        return [record for record in records if self.contains(record.parsed_date)]


def apply_date_filter(
    records: Iterable[Record],
    date_from: DateBound = None,
    date_to: DateBound = None,
) -> list[Record]:
    """
    Keep records whose date is within [date_from, date_to].

    With no bounds every record with a valid date passes. Records whose
    stored date cannot be parsed are always dropped.
    """
    return DateRange(date_from=date_from, date_to=date_to).apply(records)
