"""Polars-backed table source for the viewer."""

from __future__ import annotations

import logging
from pathlib import Path

import polars as pl

from gridpeek.geometry import CellRect

logger = logging.getLogger("TableSource")


class TableLoadError(Exception):
    """Raised when a CSV file cannot be read into a table."""


class TableSource:
    """Read-only view of a DataFrame addressed by (row, column) index."""

    def __init__(self, frame: pl.DataFrame) -> None:
        self.frame = frame

    @classmethod
    def from_csv(cls, csv_path: str | Path) -> TableSource:
        path = Path(csv_path)
        try:
            # Every column is read as a string; the viewer never does arithmetic
            frame = pl.read_csv(path, infer_schema_length=0)
        except (OSError, pl.exceptions.PolarsError) as exc:
            raise TableLoadError(f"Error loading CSV: {exc}") from exc
        logger.info("loaded %s (%d rows, %d columns)", path, frame.height, frame.width)
        return cls(frame)

    @property
    def row_count(self) -> int:
        return self.frame.height

    @property
    def column_count(self) -> int:
        return self.frame.width

    @property
    def column_names(self) -> list[str]:
        return self.frame.columns

    def cell(self, row: int, col: int) -> str:
        value = self.frame[row, col]
        return "" if value is None else str(value)

    def column_values(self, col: int, limit: int) -> list[str]:
        series = self.frame.to_series(col).head(limit)
        return ["" if v is None else str(v) for v in series.to_list()]

    def region(self, rect: CellRect) -> pl.DataFrame:
        """Cells inside rect, clipped to the table, as a DataFrame."""
        row_start = max(0, rect.row_start)
        col_start = max(0, rect.col_start)
        row_end = min(rect.row_end, self.row_count - 1)
        col_end = min(rect.col_end, self.column_count - 1)
        if row_end < row_start or col_end < col_start:
            return pl.DataFrame()
        columns = self.column_names[col_start : col_end + 1]
        return self.frame.slice(row_start, row_end - row_start + 1).select(columns)
