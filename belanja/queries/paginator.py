"""
Incremental loading for the list view.

The paginator holds a single watermark, `loaded_count`, into the
filtered and sorted record list. It only ever grows, one page at a time,
until it covers the whole list or the filter changes.
"""

from typing import Sequence, TypeVar

import structlog


DEFAULT_PAGE_SIZE = 20

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class Paginator:
    """
    Watermark over a filtered list.

    A scroll trigger can fire again before the previous page has been
    rendered. `advance` therefore sets a loading flag that blocks further
    advances until `settle` is called once the new page is on screen.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self._page_size = page_size
        self._loaded_count = page_size
        self._loading = False

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def loaded_count(self) -> int:
        return self._loaded_count

    @property
    def is_loading(self) -> bool:
        return self._loading

    def visible(self, records: Sequence[T]) -> list[T]:
        """The currently loaded prefix of `records`."""
        return list(records[:min(self._loaded_count, len(records))])

    def has_more(self, total: int) -> bool:
        return self._loaded_count < total

    def advance(self, total: int) -> bool:
        """
        Reveal the next page.

        No-op when everything is already loaded or a previous advance
        has not settled yet.

        Returns:
            True if the watermark moved
        """
        if self._loading:
            logger.debug("advance_ignored_while_loading", loaded_count=self._loaded_count)
            return False
        if self._loaded_count >= total:
            return False

        self._loading = True
        self._loaded_count = min(self._loaded_count + self._page_size, total)
        return True

    def settle(self) -> None:
        """Mark the last advance as rendered, allowing the next one."""
        self._loading = False

    def reset(self) -> None:
        """Back to the first page. Called whenever the filter changes."""
        self._loaded_count = self._page_size
        self._loading = False
