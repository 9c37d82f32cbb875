"""Table view state: a table source plus its viewport and selection."""

from __future__ import annotations

import logging
from typing import Optional

import polars as pl

from gridpeek.geometry import CellRect, clamp_index
from gridpeek.selection import SelectionTracker
from gridpeek.table_source import TableSource
from gridpeek.text_width import measure_column_widths
from gridpeek.viewport import ViewportOffsetManager


class TableView:
    """
    Everything a table widget needs except drawing and key dispatch.

    Installing a table resets the scroll offsets and the selection. Every
    navigation helper clamps to the table and then scrolls so that the
    active cell stays on screen.
    """

    def __init__(
        self,
        table: Optional[TableSource] = None,
        multi_select: bool = True,
        min_column_width: int = 8,
        max_column_width: int = 40,
        width_sample_size: int = 1000,
    ) -> None:
        self._logger = logging.getLogger("TableView")
        self.viewport = ViewportOffsetManager()
        self.selection = SelectionTracker(multi_select=multi_select)
        self.min_column_width = min_column_width
        self.max_column_width = max_column_width
        self.width_sample_size = width_sample_size
        self.column_widths: list[int] = []
        self._table: Optional[TableSource] = None
        if table is not None:
            self.table = table

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------
    @property
    def table(self) -> Optional[TableSource]:
        return self._table

    @table.setter
    def table(self, table: Optional[TableSource]) -> None:
        self._table = table
        rows, cols = self.dimensions
        self._logger.debug("installing table %dx%d", rows, cols)
        self.viewport.set_dataset(rows, cols)
        self.selection.reset(rows, cols)
        if table is None:
            self.column_widths = []
        else:
            self.column_widths = measure_column_widths(
                table,
                sample_size=self.width_sample_size,
                min_width=self.min_column_width,
                max_width=self.max_column_width,
            )

    @property
    def dimensions(self) -> tuple[int, int]:
        if self._table is None:
            return 0, 0
        return self._table.row_count, self._table.column_count

    # ------------------------------------------------------------------
    # Delegating accessors
    # ------------------------------------------------------------------
    @property
    def row_offset(self) -> int:
        return self.viewport.row_offset

    @row_offset.setter
    def row_offset(self, value: int) -> None:
        self.viewport.row_offset = value

    @property
    def column_offset(self) -> int:
        return self.viewport.column_offset

    @column_offset.setter
    def column_offset(self, value: int) -> None:
        self.viewport.column_offset = value

    @property
    def selected_row(self) -> int:
        return self.selection.selected_row

    @selected_row.setter
    def selected_row(self, value: int) -> None:
        self.selection.selected_row = value

    @property
    def selected_column(self) -> int:
        return self.selection.selected_column

    @selected_column.setter
    def selected_column(self, value: int) -> None:
        self.selection.selected_column = value

    @property
    def multi_select(self) -> bool:
        return self.selection.multi_select

    @multi_select.setter
    def multi_select(self, value: bool) -> None:
        self.selection.multi_select = value

    @property
    def selected_region(self) -> CellRect:
        return self.selection.selected_region

    def is_selected(self, column: int, row: int) -> bool:
        return self.selection.is_selected(column, row)

    def set_selection(self, column: int, row: int, extend_existing: bool) -> None:
        self.selection.set_selection(column, row, extend_existing)

    def ensure_valid_scroll_offsets(self) -> None:
        self.viewport.ensure_valid_scroll_offsets()

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------
    def set_visible_area(self, rows: int, columns: int) -> None:
        self.viewport.set_visible_area(rows, columns)
        self.ensure_selected_cell_is_visible()

    def ensure_selected_cell_is_visible(self) -> None:
        self.viewport.ensure_cell_visible(
            self.selected_row, self.selected_column, self.column_widths
        )

    def visible_rows(self) -> range:
        return self.viewport.visible_row_range()

    def visible_columns(self) -> list[int]:
        return self.viewport.visible_column_indices(self.column_widths)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _select_clamped(self, column: int, row: int, extend: bool) -> None:
        rows, cols = self.dimensions
        self.set_selection(clamp_index(column, cols), clamp_index(row, rows), extend)
        self.ensure_selected_cell_is_visible()

    def change_selection_by_offset(
        self, column_delta: int, row_delta: int, extend: bool = False
    ) -> None:
        self._select_clamped(
            self.selected_column + column_delta, self.selected_row + row_delta, extend
        )

    def page_down(self, extend: bool = False) -> None:
        self.change_selection_by_offset(0, max(1, self.viewport.visible_rows), extend)

    def page_up(self, extend: bool = False) -> None:
        self.change_selection_by_offset(0, -max(1, self.viewport.visible_rows), extend)

    def change_selection_to_start_of_row(self, extend: bool = False) -> None:
        self._select_clamped(0, self.selected_row, extend)

    def change_selection_to_end_of_row(self, extend: bool = False) -> None:
        _rows, cols = self.dimensions
        self._select_clamped(cols - 1, self.selected_row, extend)

    def change_selection_to_start_of_table(self, extend: bool = False) -> None:
        self._select_clamped(0, 0, extend)

    def change_selection_to_end_of_table(self, extend: bool = False) -> None:
        rows, cols = self.dimensions
        self._select_clamped(cols - 1, rows - 1, extend)

    def select_all(self) -> None:
        if not self.multi_select:
            return
        rows, cols = self.dimensions
        self.set_selection(0, 0, False)
        self.set_selection(cols - 1, rows - 1, True)
        self.ensure_selected_cell_is_visible()

    # ------------------------------------------------------------------
    # Selected data
    # ------------------------------------------------------------------
    def get_all_selected_cells(self) -> list[tuple[int, int]]:
        """(column, row) pairs of the selected region that exist in the table."""
        rows, cols = self.dimensions
        return [
            (col, row)
            for col, row in self.selected_region.cells()
            if 0 <= row < rows and 0 <= col < cols
        ]

    def selection_dimensions(self) -> tuple[int, int]:
        return self.selection.selection_dimensions()

    def selected_frame(self) -> pl.DataFrame:
        if self._table is None:
            return pl.DataFrame()
        return self._table.region(self.selected_region)

    def selected_value(self) -> str:
        if self._table is None or self._table.row_count == 0 or self._table.column_count == 0:
            return ""
        return self._table.cell(self.selected_row, self.selected_column)
