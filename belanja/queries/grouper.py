"""
Group records by purchase date.

Buckets are keyed by the exact stored date string and come out newest
first. Inside a bucket records keep the order they were passed in, so
the caller decides intra-day order (the list view passes storage order).
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from belanja.models.record import Record
from belanja.queries.formatting import (
    format_currency,
    format_date_label,
    round_half_up,
)


class DateGroup(BaseModel):
    """All records sharing one purchase date, with their total."""
    model_config = ConfigDict(frozen=True)

    date_key: str = Field(..., description="Purchase date as YYYY-MM-DD")
    records: tuple[Record, ...] = Field(default_factory=tuple)
    total: int = Field(default=0, ge=0, description="Exact sum of total prices")

    @property
    def record_ids(self) -> list[int]:
        return [record.id for record in self.records]

    @property
    def display_total(self) -> int:
        """Total rounded half-up for display."""
        return round_half_up(self.total)

    @property
    def label(self) -> str:
        return format_date_label(self.date_key)

    @property
    def total_label(self) -> str:
        return format_currency(self.total)


def group_by_date(records: Iterable[Record]) -> list[DateGroup]:
    """
    Bucket records by date, most recent date first.

    Empty input gives an empty list.
    """
    buckets: dict[str, list[Record]] = {}
    for record in records:
        buckets.setdefault(record.date, []).append(record)

    return [
        DateGroup(
            date_key=date_key,
            records=tuple(members),
            total=sum(member.total_price for member in members),
        )
        for date_key, members in sorted(
            buckets.items(), key=lambda item: item[0], reverse=True
        )
    ]
