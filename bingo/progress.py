"""Cell edits for one player's board, with duplicate-name rejection."""

from __future__ import annotations

from collections.abc import Mapping

from bingo.board import BoardGeometry
from bingo.win import Evaluation, WinCondition, evaluate, validate_condition

FillMap = dict[int, str]


class DuplicateRejected(Exception):
    def __init__(self, index: int, value: str, conflicting_index: int):
        super().__init__(f'"{value}" is already used in square {conflicting_index}')
        self.index = index
        self.value = value
        self.conflicting_index = conflicting_index


def find_duplicate(fill_map: Mapping[int, str], index: int, raw_value: str) -> int | None:
    """Return the other index already holding this name, or None.

    Names are compared trimmed and case-insensitively. An empty value never
    conflicts.
    """
    value = raw_value.strip().lower()
    if not value:
        return None
    for other, existing in fill_map.items():
        if other != index and existing.strip().lower() == value:
            return other
    return None


def set_cell(fill_map: Mapping[int, str], index: int, raw_value: str) -> FillMap:
    """Return a new fill map with the edit at `index` applied.

    A blank value clears the cell. Raises DuplicateRejected, leaving
    `fill_map` untouched, if another cell already holds the same name.
    """
    value = raw_value.strip()
    updated = dict(fill_map)
    if not value:
        updated.pop(index, None)
        return updated

    conflict = find_duplicate(fill_map, index, value)
    if conflict is not None:
        raise DuplicateRejected(index, value, conflict)

    updated[index] = value
    return updated


class ProgressTracker:
    """The fill state of a single board, owned by one player session."""

    def __init__(
        self,
        geometry: BoardGeometry,
        condition: WinCondition,
        fill_map: Mapping[int, str] | None = None,
    ):
        validate_condition(condition, geometry)
        self.geometry = geometry
        self.condition = condition
        self._fill_map: FillMap = dict(fill_map or {})

    @property
    def fill_map(self) -> FillMap:
        return dict(self._fill_map)

    @property
    def filled_indices(self) -> set[int]:
        return set(self._fill_map)

    def check(self, index: int, raw_value: str) -> int | None:
        """Preview an edit without committing it; returns the conflicting index."""
        return find_duplicate(self._fill_map, index, raw_value)

    def set_cell(self, index: int, raw_value: str) -> Evaluation:
        """Commit an edit and return the board's new evaluation."""
        if not self.geometry.contains(index):
            raise ValueError(f"Square {index} is not on a {self.geometry.size}x{self.geometry.size} board")
        self._fill_map = set_cell(self._fill_map, index, raw_value)
        return self.evaluate()

    def clear_all(self):
        self._fill_map = {}

    def evaluate(self) -> Evaluation:
        return evaluate(self._fill_map.keys(), self.geometry, self.condition)
