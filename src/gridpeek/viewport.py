"""Scroll offset bookkeeping for a table viewport."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from gridpeek.geometry import clamp_index, require_non_negative

DIVIDE_CHARS = 1


class ViewportOffsetManager:
    """
    Owns the (row_offset, column_offset) pair of a scrollable table.

    Offsets are clamped, never rejected: any requested value is pulled into
    [0, count - 1] for the matching axis. Both offsets are forced to 0 when
    the table has no rows or no columns.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger("ViewportOffsetManager")
        self.row_count = 0
        self.column_count = 0
        self.visible_rows = 0
        self.visible_columns = 0
        self._row_offset = 0
        self._column_offset = 0

    @property
    def row_offset(self) -> int:
        return self._row_offset

    @row_offset.setter
    def row_offset(self, value: int) -> None:
        self._row_offset = self._clamp("row_offset", value, self._axis_count(self.row_count))

    @property
    def column_offset(self) -> int:
        return self._column_offset

    @column_offset.setter
    def column_offset(self, value: int) -> None:
        self._column_offset = self._clamp(
            "column_offset", value, self._axis_count(self.column_count)
        )

    def _axis_count(self, count: int) -> int:
        # No valid non-zero offset exists once either axis is empty
        if self.row_count == 0 or self.column_count == 0:
            return 0
        return count

    def _clamp(self, name: str, value: int, count: int) -> int:
        clamped = clamp_index(value, count)
        if clamped != value:
            self._logger.debug("clamped %s %d -> %d (count %d)", name, value, clamped, count)
        return clamped

    # ------------------------------------------------------------------
    # Size changes
    # ------------------------------------------------------------------
    def set_dataset(self, row_count: int, column_count: int) -> None:
        require_non_negative(row_count=row_count, column_count=column_count)
        self._logger.debug("dataset %dx%d installed", row_count, column_count)
        self.row_count = row_count
        self.column_count = column_count
        self._row_offset = 0
        self._column_offset = 0
        self.ensure_valid_scroll_offsets()

    def set_visible_area(self, rows: int, columns: int) -> None:
        require_non_negative(rows=rows, columns=columns)
        self.visible_rows = rows
        self.visible_columns = columns
        self.ensure_valid_scroll_offsets()

    def ensure_valid_scroll_offsets(self) -> None:
        self.row_offset = self._row_offset
        self.column_offset = self._column_offset

    def scroll_by(self, rows: int = 0, columns: int = 0) -> None:
        self.row_offset = self._row_offset + rows
        self.column_offset = self._column_offset + columns

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def visible_row_range(self) -> range:
        end = min(self.row_count, self._row_offset + max(self.visible_rows, 0))
        return range(self._row_offset, end)

    def visible_column_indices(self, column_widths: Sequence[int]) -> list[int]:
        """Columns that fit in visible_columns cells, starting at the offset."""
        if not column_widths or self.column_count == 0:
            return []
        start = min(self._column_offset, len(column_widths) - 1)
        chosen: list[int] = []
        used = 0
        for idx in range(start, min(len(column_widths), self.column_count)):
            w = column_widths[idx]
            extra = w if not chosen else w + DIVIDE_CHARS
            if used + extra > self.visible_columns and chosen:
                break
            chosen.append(idx)
            used += extra
        return chosen

    def ensure_cell_visible(
        self, row: int, col: int, column_widths: Optional[Sequence[int]] = None
    ) -> None:
        """Scroll, best effort, so that (row, col) lies inside the visible area."""
        if self.row_count == 0 or self.column_count == 0:
            self.ensure_valid_scroll_offsets()
            return

        row = clamp_index(row, self.row_count)
        if row < self._row_offset:
            self.row_offset = row
        elif self.visible_rows > 0 and row >= self._row_offset + self.visible_rows:
            self.row_offset = row - self.visible_rows + 1

        widths = list(column_widths) if column_widths else [1] * self.column_count
        col = min(clamp_index(col, self.column_count), len(widths) - 1)
        if col < self._column_offset:
            self.column_offset = col
            return

        # Shift right until the target column fits
        while True:
            total = 0
            for idx in range(self._column_offset, col + 1):
                total += widths[idx]
                if idx > self._column_offset:
                    total += DIVIDE_CHARS
            if total <= self.visible_columns or self._column_offset >= col:
                break
            self._column_offset += 1
        self.ensure_valid_scroll_offsets()
