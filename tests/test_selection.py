"""Tests for the multi-select state."""

from belanja.selection import GroupSelectionState, SelectionSet


class TestSelectionSet:
    """Tests for SelectionSet."""

    def test_starts_inactive_and_empty(self):
        """Test a new selection is off with nothing selected."""
        selection = SelectionSet()
        assert selection.active is False
        assert selection.count == 0

    def test_enter_selects_exactly_one(self):
        """Test entering selection mode selects the pressed record only."""
        selection = SelectionSet()
        selection.enter(7)
        selection.enter(9)
        assert selection.active is True
        assert selection.selected == frozenset({9})

    def test_toggle(self):
        """Test toggling adds and removes an id."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle(2)
        assert selection.selected == frozenset({1, 2})
        selection.toggle(1)
        assert selection.selected == frozenset({2})
        assert selection.is_selected(2) is True
        assert selection.is_selected(1) is False

    def test_toggle_to_empty_stays_active(self):
        """Test deselecting the last record keeps selection mode on."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle(1)
        assert selection.active is True
        assert selection.count == 0

    def test_exit_clears(self):
        """Test leaving selection mode clears the selection."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle(2)
        selection.exit()
        assert selection.active is False
        assert selection.selected == frozenset()

    def test_selected_is_a_snapshot(self):
        """Test the exposed set cannot change the selection."""
        selection = SelectionSet()
        selection.enter(1)
        snapshot = selection.selected
        selection.toggle(2)
        assert snapshot == frozenset({1})


class TestGroupSelection:
    """Tests for group checkbox state and toggling."""

    def test_group_states(self):
        """Test none, partial and all."""
        selection = SelectionSet()
        selection.enter(1)
        assert selection.group_state([2, 3]) is GroupSelectionState.NONE
        assert selection.group_state([1, 2]) is GroupSelectionState.PARTIAL
        assert selection.group_state([1]) is GroupSelectionState.ALL

    def test_empty_group_is_none(self):
        """Test a group with no members is never selected."""
        selection = SelectionSet()
        selection.enter(1)
        assert selection.group_state([]) is GroupSelectionState.NONE

    def test_toggle_partial_group_selects_all(self):
        """Test a partly selected group becomes fully selected."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle_group([1, 2, 3])
        assert selection.selected == frozenset({1, 2, 3})

    def test_toggle_full_group_deselects_only_its_members(self):
        """Test deselecting a group leaves other groups alone."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle(2)
        selection.toggle(10)
        selection.toggle_group([1, 2])
        assert selection.selected == frozenset({10})

    def test_toggle_group_twice_restores_none(self):
        """Test an unselected group toggled twice ends up unselected."""
        selection = SelectionSet()
        selection.enter(10)
        selection.toggle_group([1, 2])
        selection.toggle_group([1, 2])
        assert selection.group_state([1, 2]) is GroupSelectionState.NONE
        assert selection.selected == frozenset({10})


class TestForget:
    """Tests for dropping deleted ids."""

    def test_forget_removes_ids(self):
        """Test forgotten ids leave the selection."""
        selection = SelectionSet()
        selection.enter(1)
        selection.toggle(2)
        selection.forget([2, 99])
        assert selection.selected == frozenset({1})
        assert selection.active is True

    def test_forget_last_id_leaves_selection_mode(self):
        """Test selection mode ends when nothing selected remains."""
        selection = SelectionSet()
        selection.enter(1)
        selection.forget([1])
        assert selection.active is False
