"""Unit tests for cell edits and duplicate-name rejection."""

import pytest

from bingo.board import BoardGeometry
from bingo.progress import DuplicateRejected, ProgressTracker, find_duplicate, set_cell
from bingo.win import Blackout, Lines


class TestSetCell:
    def test_fill_trims_value(self):
        assert set_cell({}, 3, "  Bob ") == {3: "Bob"}

    def test_returns_new_map(self):
        original = {0: "Alice"}
        updated = set_cell(original, 1, "Bob")
        assert updated == {0: "Alice", 1: "Bob"}
        assert original == {0: "Alice"}

    def test_overwrite_same_index(self):
        assert set_cell({0: "Alice"}, 0, "alice") == {0: "alice"}

    def test_duplicate_rejected_case_insensitive(self):
        fill_map = {0: "Alice"}
        with pytest.raises(DuplicateRejected) as exc_info:
            set_cell(fill_map, 5, "alice")
        assert exc_info.value.conflicting_index == 0
        assert exc_info.value.index == 5
        assert fill_map == {0: "Alice"}

    def test_duplicate_rejected_after_trim(self):
        fill_map = {0: "Alice"}
        with pytest.raises(DuplicateRejected):
            set_cell(fill_map, 5, "Alice ")
        assert fill_map == {0: "Alice"}

    def test_freeing_a_name_allows_reuse(self):
        fill_map = set_cell({0: "Alice"}, 0, "")
        assert fill_map == {}
        assert set_cell(fill_map, 5, "Alice") == {5: "Alice"}

    def test_clearing_absent_index_is_noop(self):
        assert set_cell({1: "Bob"}, 4, "") == {1: "Bob"}
        assert set_cell({1: "Bob"}, 4, "   ") == {1: "Bob"}

    def test_message_names_value(self):
        with pytest.raises(DuplicateRejected, match='"Bob" is already used'):
            set_cell({2: "BOB"}, 7, "Bob")

    def test_comparison_is_lowercase_not_casefold(self):
        assert set_cell({0: "Straße"}, 1, "STRASSE") == {0: "Straße", 1: "STRASSE"}
        with pytest.raises(DuplicateRejected):
            set_cell({0: "Straße"}, 1, "STRAßE")


class TestFindDuplicate:
    def test_no_conflict_with_own_index(self):
        assert find_duplicate({0: "Alice"}, 0, "ALICE") is None

    def test_conflict(self):
        assert find_duplicate({0: "Alice", 3: "Carol"}, 1, " carol") == 3

    def test_blank_never_conflicts(self):
        assert find_duplicate({0: "Alice"}, 1, "  ") is None


class TestProgressTracker:
    def test_commit_and_evaluate(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1))
        for i, name in enumerate(["Ann", "Ben"]):
            tracker.set_cell(i, name)
        result = tracker.set_cell(2, "Cy")
        assert result.completed_lines == (0,)
        assert result.has_won is True
        assert tracker.fill_map == {0: "Ann", 1: "Ben", 2: "Cy"}

    def test_rejection_keeps_state(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1), {0: "Ann"})
        with pytest.raises(DuplicateRejected):
            tracker.set_cell(4, "ann")
        assert tracker.fill_map == {0: "Ann"}

    def test_check_does_not_mutate(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1), {0: "Ann"})
        assert tracker.check(4, "ANN") == 0
        assert tracker.check(4, "Bea") is None
        assert tracker.filled_indices == {0}

    def test_fill_map_is_a_copy(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1))
        tracker.fill_map[0] = "Sneaky"
        assert tracker.filled_indices == set()

    def test_off_board_index_rejected(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1))
        with pytest.raises(ValueError):
            tracker.set_cell(9, "Ann")

    def test_blackout_tracking(self):
        tracker = ProgressTracker(BoardGeometry(3), Blackout())
        for i in range(8):
            assert tracker.set_cell(i, f"Person {i}").has_won is False
        assert tracker.set_cell(8, "Person 8").has_won is True
        assert tracker.set_cell(8, "").has_won is False

    def test_clear_all(self):
        tracker = ProgressTracker(BoardGeometry(3), Lines(1), {0: "Ann", 1: "Ben"})
        tracker.clear_all()
        assert tracker.fill_map == {}

    def test_invalid_condition_for_board(self):
        with pytest.raises(ValueError):
            ProgressTracker(BoardGeometry(3), Lines(9))


class TestConcurrentSessions:
    """Two sessions of one player do not converge: the last commit wins."""

    def test_last_committed_map_wins(self):
        stored = {0: "Ann"}
        tab_a = set_cell(stored, 1, "Ben")
        tab_b = set_cell(stored, 2, "Ben")

        # Each tab persists its own view of the whole map
        stored = tab_a
        stored = tab_b
        assert stored == {0: "Ann", 2: "Ben"}
        assert 1 not in stored
