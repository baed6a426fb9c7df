"""
Display formatting for the list view.

Amounts are rounded half-up to whole currency units ON DISPLAY ONLY;
stored values are never rounded. Grouping uses the Indonesian style
(15.000), matching what the entry form shows.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from belanja.models.record import Record, parse_record_date


CURRENCY_LABEL = "IDR"

Number = Union[int, float, Decimal]


def round_half_up(value: Optional[Number]) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    if value is None:
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value: Optional[Number]) -> str:
    """15000.5 -> '15.001'"""
    return f"{round_half_up(value):,}".replace(",", ".")


def format_currency(value: Optional[Number]) -> str:
    """15000 -> 'IDR 15.000'"""
    return f"{CURRENCY_LABEL} {format_number(value)}"


def format_day(day: date) -> str:
    """Short numeric date as shown in the filter summary: 1/5/2024."""
    return f"{day.day}/{day.month}/{day.year}"


def format_date_label(date_key: str) -> str:
    """
    Group header label: '2024-05-01' -> '01-May-2024 (Wed)'.

    Unparseable keys are returned unchanged.
    """
    day = parse_record_date(date_key)
    if day is None:
        return date_key
    return f"{day:%d}-{day:%b}-{day.year} ({day:%a})"


def format_item_detail(record: Record) -> Optional[str]:
    """
    Quantity line under an item: '2 pcs × IDR 7.500'.

    None when the record has no quantity.
    """
    if record.unit_price is None:
        return None
    return (
        f"{format_number(record.quantity)} {record.unit} × "
        f"{format_currency(record.unit_price)}"
    )


def format_range(date_from: Optional[date], date_to: Optional[date]) -> str:
    """Describe an active date filter."""
    if date_from and date_to:
        return f"from {format_day(date_from)} to {format_day(date_to)}"
    elif date_from:
        return f"from {format_day(date_from)}"
    elif date_to:
        return f"until {format_day(date_to)}"
    return ""
