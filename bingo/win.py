"""Win conditions and line completion checks for a filled board."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass

from bingo.board import BoardGeometry, Line


@dataclass(frozen=True)
class Lines:
    """Win when at least `required` distinct lines are fully filled."""

    required: int = 1

    def __post_init__(self):
        if self.required < 1:
            raise ValueError(f"At least one line must be required, got {self.required}")


@dataclass(frozen=True)
class Blackout:
    """Win when every cell on the board is filled."""


WinCondition = Lines | Blackout


@dataclass(frozen=True)
class Evaluation:
    completed_lines: tuple[int, ...]
    filled_count: int
    has_won: bool

    @property
    def completed_count(self) -> int:
        return len(self.completed_lines)


def validate_condition(condition: WinCondition, geometry: BoardGeometry) -> None:
    """Raise ValueError if the condition cannot apply to this board."""
    if isinstance(condition, Lines):
        if condition.required > geometry.line_count:
            raise ValueError(
                f"A {geometry.size}x{geometry.size} board has only "
                f"{geometry.line_count} lines, {condition.required} required"
            )
    elif not isinstance(condition, Blackout):
        raise TypeError(f"Unknown win condition: {condition!r}")


def completed_lines(filled: Collection[int], lines: Iterable[Line]) -> list[int]:
    """Return the numbers of the lines whose cells are all in `filled`.

    Indices in `filled` that lie off the board belong to no line and are
    ignored.
    """
    return [n for n, line in enumerate(lines) if all(i in filled for i in line)]


def count_completed_lines(filled: Collection[int], lines: Iterable[Line]) -> int:
    return len(completed_lines(filled, lines))


def is_blackout(filled: Collection[int], cell_count: int) -> bool:
    if len(filled) != cell_count:
        return False
    return all(i in filled for i in range(cell_count))


def has_won(filled: Collection[int], geometry: BoardGeometry, condition: WinCondition) -> bool:
    if isinstance(condition, Blackout):
        return is_blackout(filled, geometry.cell_count)
    if isinstance(condition, Lines):
        return count_completed_lines(filled, geometry.lines) >= condition.required
    raise TypeError(f"Unknown win condition: {condition!r}")


def evaluate(filled: Collection[int], geometry: BoardGeometry, condition: WinCondition) -> Evaluation:
    filled = set(filled)
    return Evaluation(
        completed_lines=tuple(completed_lines(filled, geometry.lines)),
        filled_count=len(filled),
        has_won=has_won(filled, geometry, condition),
    )
