"""Board geometry: cell indexing and the winning lines of an N×N grid."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

SUPPORTED_GRID_SIZES = (3, 4, 5)
DEFAULT_GRID_SIZE = 5

Line = tuple[int, ...]


@lru_cache(maxsize=None)
def compute_lines(size: int) -> tuple[Line, ...]:
    """Return every winning line for a board of the given side length.

    Cells are numbered row-major from 0. Lines come out rows first, then
    columns, then the main diagonal and the anti-diagonal, so a line's
    position in the result is a stable line number.
    """
    if size < 1:
        raise ValueError(f"Grid size must be at least 1, got {size}")

    rows = [tuple(row * size + col for col in range(size)) for row in range(size)]
    cols = [tuple(row * size + col for row in range(size)) for col in range(size)]
    diagonal = tuple(i * size + i for i in range(size))
    anti_diagonal = tuple(i * size + (size - 1 - i) for i in range(size))

    return tuple(rows + cols + [diagonal, anti_diagonal])


@dataclass(frozen=True)
class BoardGeometry:
    size: int = DEFAULT_GRID_SIZE

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Grid size must be at least 1, got {self.size}")

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @property
    def lines(self) -> tuple[Line, ...]:
        return compute_lines(self.size)

    @property
    def line_count(self) -> int:
        return 2 * self.size + 2

    def contains(self, index: int) -> bool:
        return 0 <= index < self.cell_count

    def line_label(self, line_number: int) -> str:
        """Human-readable name for a line number, e.g. "row 2" or "diagonal"."""
        if line_number < 0 or line_number >= self.line_count:
            raise ValueError(f"No line {line_number} on a {self.size}x{self.size} board")
        if line_number < self.size:
            return f"row {line_number + 1}"
        if line_number < 2 * self.size:
            return f"column {line_number - self.size + 1}"
        if line_number == 2 * self.size:
            return "diagonal"
        return "anti-diagonal"
