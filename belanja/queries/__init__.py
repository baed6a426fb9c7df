"""List view query package: filter, group, paginate."""

from belanja.queries.executor import ListQueryExecutor, ListResult
from belanja.queries.filter import DateRange, apply_date_filter
from belanja.queries.grouper import DateGroup, group_by_date
from belanja.queries.paginator import DEFAULT_PAGE_SIZE, Paginator

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DateGroup",
    "DateRange",
    "ListQueryExecutor",
    "ListResult",
    "Paginator",
    "apply_date_filter",
    "group_by_date",
]
