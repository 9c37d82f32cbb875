"""Anchored cell selection with change notifications."""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple, Optional

import urwid

from gridpeek.geometry import CellRect, clamp_index, require_non_negative

SELECTED_CELL_CHANGED = "selected_cell_changed"


class SelectedCellChanged(NamedTuple):
    old_row: int
    old_col: int
    new_row: int
    new_col: int


class SelectionTracker(metaclass=urwid.MetaSignals):
    """
    Tracks the active cell plus an optional anchor.

    The selected region is the rectangle spanned by the anchor and the active
    cell when multi-select is on and an anchor exists; otherwise it is just
    the active cell. Subscribers to ``selected_cell_changed`` receive a
    SelectedCellChanged every time a coordinate of the active cell actually
    changes, synchronously and in subscription order.
    """

    signals = [SELECTED_CELL_CHANGED]

    def __init__(self, multi_select: bool = False) -> None:
        self._logger = logging.getLogger("SelectionTracker")
        self.multi_select = multi_select
        self._row = 0
        self._col = 0
        self._anchor: Optional[tuple[int, int]] = None
        # None means unbounded: coordinates are taken as given
        self._row_count: Optional[int] = None
        self._col_count: Optional[int] = None

    def subscribe(self, callback: Callable[[SelectedCellChanged], object]) -> None:
        urwid.connect_signal(self, SELECTED_CELL_CHANGED, callback)

    def unsubscribe(self, callback: Callable[[SelectedCellChanged], object]) -> None:
        urwid.disconnect_signal(self, SELECTED_CELL_CHANGED, callback)

    # ------------------------------------------------------------------
    # Active cell
    # ------------------------------------------------------------------
    @property
    def selected_row(self) -> int:
        return self._row

    @selected_row.setter
    def selected_row(self, value: int) -> None:
        self._move_to(self._bound(value, self._row_count), self._col)

    @property
    def selected_column(self) -> int:
        return self._col

    @selected_column.setter
    def selected_column(self, value: int) -> None:
        self._move_to(self._row, self._bound(value, self._col_count))

    def _bound(self, value: int, count: Optional[int]) -> int:
        if count is None:
            return value
        if self._row_count == 0 or self._col_count == 0:
            return 0
        return clamp_index(value, count)

    def _move_to(self, row: int, col: int) -> None:
        if row == self._row and col == self._col:
            return
        event = SelectedCellChanged(self._row, self._col, row, col)
        self._row = row
        self._col = col
        urwid.emit_signal(self, SELECTED_CELL_CHANGED, event)

    # ------------------------------------------------------------------
    # Anchor
    # ------------------------------------------------------------------
    @property
    def anchor(self) -> Optional[tuple[int, int]]:
        """(row, col) of the anchor, or None."""
        return self._anchor

    def clear_anchor(self) -> None:
        self._anchor = None

    def reset(self, row_count: int, column_count: int) -> None:
        """Install new table bounds and go back to cell (0, 0)."""
        require_non_negative(row_count=row_count, column_count=column_count)
        self._logger.debug("selection reset for %dx%d table", row_count, column_count)
        self._row_count = row_count
        self._col_count = column_count
        self._anchor = None
        self.selected_column = 0
        self.selected_row = 0

    def set_selection(self, column: int, row: int, extend_existing: bool) -> None:
        """
        Move the active cell, starting or stretching a rectangular region.

        A non-extending call drops the old region and anchors a new one at
        the target cell. An extending call keeps the anchor, or adopts the
        current active cell as anchor when none has been set yet.
        """
        column = self._bound(column, self._col_count)
        row = self._bound(row, self._row_count)

        if self.multi_select and extend_existing:
            if self._anchor is None:
                self._anchor = (self._row, self._col)
            self.selected_column = column
            self.selected_row = row
            return

        # Subscribers see a single cell until the new anchor is placed
        self._anchor = None
        self.selected_column = column
        self.selected_row = row
        if self.multi_select:
            self._anchor = (row, column)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def has_region(self) -> bool:
        return self.multi_select and self._anchor is not None

    @property
    def selected_region(self) -> CellRect:
        if not self.has_region:
            return CellRect.single(self._row, self._col)
        anchor_row, anchor_col = self._anchor
        return CellRect.from_corners(anchor_row, anchor_col, self._row, self._col)

    def is_selected(self, column: int, row: int) -> bool:
        return self.selected_region.contains(row, column)

    def selection_dimensions(self) -> tuple[int, int]:
        """(rows, columns) covered by the selected region."""
        region = self.selected_region
        return region.height, region.width

    def __repr__(self) -> str:
        return f"SelectionTracker(active=({self._row}, {self._col}), anchor={self._anchor})"
