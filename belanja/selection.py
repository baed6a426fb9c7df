"""
Multi-select state for bulk actions.

The selection is process-local and never persisted. It is keyed by
record id, so it stays consistent across pages and date groups: a record
selected on page one is still selected after more pages load.

Only the methods below change the selection; `selected` is a read-only
snapshot.
"""

from enum import Enum
from typing import Iterable


class GroupSelectionState(str, Enum):
    """How much of a date group is selected (drives the group checkbox)."""
    NONE = "none"
    PARTIAL = "partial"
    ALL = "all"


class SelectionSet:
    """Selected record ids plus whether selection mode is on."""

    def __init__(self):
        self._selected: set[int] = set()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def selected(self) -> frozenset[int]:
        return frozenset(self._selected)

    @property
    def count(self) -> int:
        return len(self._selected)

    def is_selected(self, record_id: int) -> bool:
        return record_id in self._selected

    def enter(self, record_id: int) -> None:
        """Start selection mode with exactly this record selected."""
        self._active = True
        self._selected = {record_id}

    def toggle(self, record_id: int) -> None:
        if record_id in self._selected:
            self._selected.discard(record_id)
        else:
            self._selected.add(record_id)

    def exit(self) -> None:
        self._active = False
        self._selected = set()

    def group_state(self, member_ids: Iterable[int]) -> GroupSelectionState:
        """
        ALL if every member is selected, NONE if none is, else PARTIAL.

        An empty group is NONE.
        """
        members = set(member_ids)
        chosen = members & self._selected
        if not chosen:
            return GroupSelectionState.NONE
        if chosen == members:
            return GroupSelectionState.ALL
        return GroupSelectionState.PARTIAL

    def toggle_group(self, member_ids: Iterable[int]) -> None:
        """Deselect a fully selected group; otherwise select all of it."""
        members = set(member_ids)
        if self.group_state(members) is GroupSelectionState.ALL:
            self._selected -= members
        else:
            self._selected |= members

    def forget(self, record_ids: Iterable[int]) -> None:
        """
        Drop ids of records that no longer exist.

        Leaves selection mode when nothing is left selected, so the
        selection never points at deleted records.
        """
        self._selected -= set(record_ids)
        if not self._selected:
            self._active = False
