"""Rectangle and index helpers shared by the viewport and selection code."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


class InvalidDimensionsError(ValueError):
    """Raised when a caller supplies a negative table or viewport size."""


def require_non_negative(**sizes: int) -> None:
    """Fail fast if any of the named sizes is negative."""
    for name, value in sizes.items():
        if value < 0:
            raise InvalidDimensionsError(f"{name} must be >= 0, got {value}")


def clamp_index(value: int, count: int) -> int:
    """Clamp value into [0, count - 1], or 0 when count is 0."""
    if count <= 0:
        return 0
    return max(0, min(value, count - 1))


@dataclass(frozen=True)
class CellRect:
    """Closed cell rectangle with normalized corners."""

    row_start: int
    row_end: int
    col_start: int
    col_end: int

    @classmethod
    def from_corners(cls, row_a: int, col_a: int, row_b: int, col_b: int) -> CellRect:
        return cls(
            row_start=min(row_a, row_b),
            row_end=max(row_a, row_b),
            col_start=min(col_a, col_b),
            col_end=max(col_a, col_b),
        )

    @classmethod
    def single(cls, row: int, col: int) -> CellRect:
        return cls(row, row, col, col)

    @property
    def height(self) -> int:
        return self.row_end - self.row_start + 1

    @property
    def width(self) -> int:
        return self.col_end - self.col_start + 1

    def contains(self, row: int, col: int) -> bool:
        return (
            self.row_start <= row <= self.row_end
            and self.col_start <= col <= self.col_end
        )

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield (col, row) pairs in row-major order."""
        for row in range(self.row_start, self.row_end + 1):
            for col in range(self.col_start, self.col_end + 1):
                yield col, row

    def __repr__(self) -> str:
        return (
            f"CellRect(({self.row_start}, {self.col_start}) -> "
            f"({self.row_end}, {self.col_end}))"
        )
