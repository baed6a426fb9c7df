"""
List Query Execution

DESIGN DECISION: The list view is computed, never stored.
Given the full collection, the active date range and the paginator,
the executor produces exactly what the list screen shows:

    all records -> filter by range -> sort newest first
                -> visible page -> group by date

Sorting is stable, so records of the same day keep storage order.
"""

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from belanja.models.record import Record
from belanja.queries.filter import DateRange
from belanja.queries.formatting import format_range
from belanja.queries.grouper import DateGroup, group_by_date
from belanja.queries.paginator import Paginator


class ListResult(BaseModel):
    """Everything the list screen renders for one state of the log."""
    model_config = ConfigDict(frozen=True)

    groups: list[DateGroup] = Field(default_factory=list)
    total_count: int = Field(ge=0, description="Records in storage, valid date or not")
    filtered_count: int = Field(ge=0, description="Records matching the date range")
    visible_count: int = Field(ge=0, description="Records on the loaded pages")
    has_more: bool = False
    summary: str = Field(..., description="Summary line above the list")

    @property
    def is_empty(self) -> bool:
        return self.visible_count == 0

    def group_for(self, date_key: str) -> Optional[DateGroup]:
        for group in self.groups:
            if group.date_key == date_key:
                return group
        return None


class ListQueryExecutor:
    """
    Builds the list view from the current collection.

    GUARANTEES:
    - Only records with a valid date are shown
    - Group keys are strictly descending
    - Visible records are a prefix of the filtered, sorted list
    """

    def execute(
        self,
        records: Sequence[Record],
        date_range: DateRange,
        paginator: Paginator,
    ) -> ListResult:
        ordered = self.ordered(records, date_range)
        visible = paginator.visible(ordered)

        return ListResult(
            groups=group_by_date(visible),
            total_count=len(records),
            filtered_count=len(ordered),
            visible_count=len(visible),
            has_more=paginator.has_more(len(ordered)),
            summary=self._summary(len(records), len(ordered), date_range),
        )

    def ordered(self, records: Sequence[Record], date_range: DateRange) -> list[Record]:
        """Records in the range, newest date first, same-day records in storage order."""
        filtered = date_range.apply(records)
        return sorted(filtered, key=lambda record: record.date, reverse=True)

    def visible_records(
        self,
        records: Sequence[Record],
        date_range: DateRange,
        paginator: Paginator,
    ) -> list[Record]:
        """The loaded page(s) of `ordered`."""
        return paginator.visible(self.ordered(records, date_range))

    def _summary(self, total: int, shown: int, date_range: DateRange) -> str:
        """'Showing all 3 records' or 'Showing 1 of 3 records (from ... to ...)'."""
        noun = "record" if total == 1 else "records"
        if not date_range.is_active:
            return f"Showing all {total} {noun}"

        range_text = format_range(date_range.date_from, date_range.date_to)
        return f"Showing {shown} of {total} {noun} ({range_text})"
