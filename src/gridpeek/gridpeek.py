#!/usr/bin/env python3
"""
gridpeek - A terminal CSV viewer with rectangular selection, using Polars and Urwid.
"""

from __future__ import annotations

import glob
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional, Sequence

import polars as pl
import pyperclip
import urwid

from gridpeek.config import ViewerConfig
from gridpeek.selection import SelectedCellChanged
from gridpeek.table_source import TableLoadError, TableSource
from gridpeek.table_view import TableView
from gridpeek.text_width import truncate

logger = logging.getLogger("GridPeek")

PALETTE = [
    ("header", "black", "light gray"),
    ("status", "light gray", "dark gray"),
    ("cell_selected", "black", "yellow"),
    ("cell_active", "black", "light cyan"),
    ("focus", "black", "light cyan"),
]


def setup_logging(log_dir: str, level: str = "INFO", max_logs: int = 20) -> str:
    """Log to a timestamped rotating file; the terminal belongs to urwid."""
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S-%f")[:23]
    log_file = os.path.join(log_dir, f"{timestamp}.log")

    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
    )
    cleanup_old_logs(log_dir, max_logs=max_logs)
    return log_file


def cleanup_old_logs(log_dir: str, max_logs: int) -> None:
    """Remove the oldest log files beyond max_logs."""
    log_files = glob.glob(os.path.join(log_dir, "*.log*"))
    log_files.sort(key=os.path.getctime)

    while len(log_files) > max_logs:
        oldest = log_files.pop(0)
        try:
            os.remove(oldest)
        except OSError as exc:
            logger.warning("could not remove old log %s: %s", oldest, exc)


class FlowColumns(urwid.Columns):
    """Columns that behave as a 1-line flow widget for ListBox rows."""

    sizing = frozenset(["flow"])

    def rows(self, size, focus=False):  # noqa: ANN001, D401
        return 1


class TableBody(urwid.ListBox):
    """ListBox that leaves every key to the application's input handler."""

    def keypress(self, size, key):  # noqa: ANN001
        return key


class FilenameDialog(urwid.WidgetWrap):
    """Modal dialog for choosing a filename."""

    def __init__(
        self,
        prompt: str,
        on_submit: Callable[[str], None],
        on_cancel: Callable[[], None],
    ) -> None:
        self.edit = urwid.Edit(f"{prompt}: ")
        self.on_submit = on_submit
        self.on_cancel = on_cancel
        pile = urwid.Pile(
            [
                urwid.Text("Enter filename and press Enter"),
                urwid.Divider(),
                urwid.AttrMap(self.edit, None, focus_map="focus"),
            ]
        )
        boxed = urwid.LineBox(pile, title="Save Selection")
        super().__init__(urwid.Filler(boxed, valign="top"))

    def keypress(self, size, key):  # noqa: ANN001
        if key in ("enter",):
            self.on_submit(self.edit.edit_text.strip())
            return None
        if key in ("esc", "ctrl g"):
            self.on_cancel()
            return None
        return super().keypress(size, key)


class GridPeekApp:
    """Urwid front end driving a TableView."""

    # Title, column header and divider above the rows, status line below
    CHROME_LINES = 4
    DEFAULT_SCREEN = (80, 24)

    MOVES = {
        "left": (-1, 0),
        "right": (1, 0),
        "up": (0, -1),
        "down": (0, 1),
    }

    def __init__(self, config: ViewerConfig) -> None:
        self.config = config
        self.csv_path = Path(config.csv_path)
        self.view = TableView(
            multi_select=config.multi_select,
            min_column_width=config.min_column_width,
            max_column_width=config.max_column_width,
            width_sample_size=config.width_sample_size,
        )
        self.view.selection.subscribe(self._on_selected_cell_changed)

        # UI state
        self.loop: Optional[urwid.MainLoop] = None
        self.table_walker = urwid.SimpleFocusListWalker([])
        self.table_header = urwid.Columns([])
        self.listbox = TableBody(self.table_walker)
        self.status_widget = urwid.Text("")
        self.overlaying = False

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def load_csv(self) -> None:
        self.view.table = TableSource.from_csv(self.csv_path)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def build_ui(self) -> urwid.Widget:
        header_text = urwid.Text(f"gridpeek - {self.csv_path.name}", align="center")
        header = urwid.AttrMap(header_text, "header")
        self.table_header = self._build_header_row()
        body = urwid.Pile(
            [
                ("pack", self.table_header),
                ("pack", urwid.Divider("─")),
                self.listbox,
            ]
        )
        footer = urwid.AttrMap(self.status_widget, "status")
        return urwid.Frame(body=body, header=header, footer=footer)

    def _build_header_row(self) -> urwid.Columns:
        table = self.view.table
        if table is None:
            return urwid.Columns([])
        cols = []
        for col_idx in self.view.visible_columns():
            width = self.view.column_widths[col_idx]
            label = truncate(table.column_names[col_idx], width)
            cols.append((width, urwid.Text(label, wrap="clip")))
        return urwid.Columns(cols, dividechars=1)

    def _screen_size(self) -> tuple[int, int]:
        if self.loop and self.loop.screen:
            cols, rows = self.loop.screen.get_cols_rows()
            return cols, rows
        return self.DEFAULT_SCREEN

    def _update_visible_area(self) -> None:
        cols, rows = self._screen_size()
        self.view.set_visible_area(max(0, rows - self.CHROME_LINES), max(0, cols))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _refresh_rows(self) -> None:
        table = self.view.table
        if table is None:
            return
        self._update_visible_area()
        self.table_walker.clear()

        vis_cols = self.view.visible_columns()
        for row_idx in self.view.visible_rows():
            self.table_walker.append(self._build_row_widget(row_idx, vis_cols))

        focus = self.view.selected_row - self.view.row_offset
        if 0 <= focus < len(self.table_walker):
            self.table_walker.set_focus(focus)

        self.table_header = self._build_header_row()
        if self.loop:
            frame_widget = self.loop.widget
            if isinstance(frame_widget, urwid.Overlay):
                frame_widget = frame_widget.bottom_w
            if isinstance(frame_widget, urwid.Frame):
                frame_widget.body.contents[0] = (
                    self.table_header,
                    frame_widget.body.options("pack"),
                )
        self._update_status()

    def _build_row_widget(self, row_idx: int, vis_cols: Sequence[int]) -> urwid.Widget:
        table = self.view.table
        if table is None:
            return urwid.Text("")
        cells = []
        for col_idx in vis_cols:
            width = self.view.column_widths[col_idx]
            text = truncate(table.cell(row_idx, col_idx), width)
            attr = self._cell_attr(row_idx, col_idx)
            markup = [(attr, text)] if attr else text
            cells.append((width, urwid.Text(markup, wrap="clip")))
        return FlowColumns(cells, dividechars=1)

    def _cell_attr(self, row_idx: int, col_idx: int) -> Optional[str]:
        if row_idx == self.view.selected_row and col_idx == self.view.selected_column:
            return "cell_active"
        if self.view.is_selected(col_idx, row_idx):
            return "cell_selected"
        return None

    # ------------------------------------------------------------------
    # Interaction handlers
    # ------------------------------------------------------------------
    def handle_input(self, key: str) -> None:
        if self.overlaying:
            return
        if key in ("q", "Q"):
            raise urwid.ExitMainLoop()
        if key == "window resize":
            self._refresh_rows()
            return
        if key in ("c", "C"):
            self.copy_selection()
            return
        if key in ("w", "W"):
            self.save_selection_dialog()
            return
        if key in ("m", "M"):
            self.toggle_multi_select()
            return
        if key == "esc":
            self.view.selection.clear_anchor()
            self._refresh_rows()
            return
        if self.navigate(key):
            self._refresh_rows()

    def navigate(self, key: str) -> bool:
        """Apply a navigation key to the view. Returns False for other keys."""
        extend = key.startswith("shift ")
        base = key[len("shift ") :] if extend else key
        view = self.view

        if base in self.MOVES:
            dx, dy = self.MOVES[base]
            view.change_selection_by_offset(dx, dy, extend)
        elif base in ("page down", "ctrl d"):
            view.page_down(extend)
        elif base in ("page up", "ctrl u"):
            view.page_up(extend)
        elif base == "home":
            view.change_selection_to_start_of_row(extend)
        elif base == "end":
            view.change_selection_to_end_of_row(extend)
        elif base in ("ctrl home", "g"):
            view.change_selection_to_start_of_table(extend)
        elif base in ("ctrl end", "G"):
            view.change_selection_to_end_of_table(extend)
        elif base == "ctrl a":
            view.select_all()
        else:
            return False
        return True

    def toggle_multi_select(self) -> None:
        self.view.multi_select = not self.view.multi_select
        state = "on" if self.view.multi_select else "off"
        self._refresh_rows()
        self.notify(f"Multi-select {state}")

    def _on_selected_cell_changed(self, event: SelectedCellChanged) -> None:
        logger.debug(
            "selected cell (%d, %d) -> (%d, %d)",
            event.old_row,
            event.old_col,
            event.new_row,
            event.new_col,
        )
        self._update_status()

    # ------------------------------------------------------------------
    # Copy and save
    # ------------------------------------------------------------------
    def has_multi_cell_selection(self) -> bool:
        return self.view.selection_dimensions() != (1, 1)

    def selection_as_csv(self) -> str:
        if not self.has_multi_cell_selection():
            return self.view.selected_value()
        return self.view.selected_frame().write_csv(include_header=True)

    def copy_selection(self) -> None:
        if self.view.table is None:
            return
        num_rows, num_cols = self.view.selection_dimensions()
        try:
            pyperclip.copy(self.selection_as_csv())
        except pyperclip.PyperclipException as exc:
            logger.error("clipboard copy failed: %s", exc)
            self.notify(f"Copy failed: {exc}")
            return
        logger.info("copied %dx%d selection", num_rows, num_cols)
        self.view.selection.clear_anchor()
        self._refresh_rows()
        self.notify(f"Copied {num_rows}x{num_cols}")

    def save_selection_dialog(self) -> None:
        if self.view.table is None or self.loop is None:
            return

        def _on_submit(filename: str) -> None:
            if not filename:
                self.notify("Filename required")
                return
            self.close_overlay()
            self._save_to_file(filename)

        def _on_cancel() -> None:
            self.close_overlay()

        dialog = FilenameDialog("Save as", _on_submit, _on_cancel)
        self.show_overlay(dialog)

    def _save_to_file(self, file_path: str) -> None:
        if self.view.table is None:
            self.notify("No data to save")
            return
        target = Path(file_path)
        if target.exists():
            self.notify(f"File {target} exists")
            return
        num_rows, num_cols = self.view.selection_dimensions()
        try:
            self.view.selected_frame().write_csv(target, include_header=True)
        except (OSError, pl.exceptions.PolarsError) as exc:
            logger.error("saving %s failed: %s", target, exc)
            self.notify(f"Error saving file: {exc}")
            return
        logger.info("saved %dx%d selection to %s", num_rows, num_cols, target)
        self.view.selection.clear_anchor()
        self._refresh_rows()
        self.notify(f"Saved {num_rows}x{num_cols} to {target.name}")

    # ------------------------------------------------------------------
    # Overlay helpers
    # ------------------------------------------------------------------
    def show_overlay(self, widget: urwid.Widget) -> None:
        if self.loop is None:
            return
        overlay = urwid.Overlay(
            widget,
            self.loop.widget,
            align="center",
            width=("relative", 80),
            valign="middle",
            height=("relative", 80),
        )
        self.loop.widget = overlay
        self.overlaying = True

    def close_overlay(self) -> None:
        if self.loop is None:
            return
        if isinstance(self.loop.widget, urwid.Overlay):
            self.loop.widget = self.loop.widget.bottom_w
        self.overlaying = False
        self._refresh_rows()

    # ------------------------------------------------------------------
    # Status handling
    # ------------------------------------------------------------------
    def notify(self, message: str, duration: float = 2.0) -> None:
        self.status_widget.set_text(message)
        if self.loop:
            self.loop.set_alarm_in(duration, lambda *_: self._update_status())

    def status_text(self) -> str:
        rows, cols = self.view.dimensions
        selection_text = ""
        if self.has_multi_cell_selection():
            sel_rows, sel_cols = self.view.selection_dimensions()
            selection_text = f"SELECT {sel_rows}x{sel_cols} | "
        mode = "multi" if self.view.multi_select else "single"
        return (
            f"{selection_text}Cell R{self.view.selected_row + 1}"
            f" C{self.view.selected_column + 1} | "
            f"Rows: {rows:,} | Columns: {cols} | {mode}"
        )

    def _update_status(self, *_args) -> None:  # noqa: ANN002, D401
        if self.view.table is None:
            return
        self.status_widget.set_text(self.status_text())

    # ------------------------------------------------------------------
    # Main entry
    # ------------------------------------------------------------------
    def run(self) -> None:
        self.load_csv()
        root = self.build_ui()
        self.loop = urwid.MainLoop(
            root,
            palette=PALETTE,
            unhandled_input=self.handle_input,
        )
        self._refresh_rows()

        try:
            self.loop.run()
        finally:
            # Ensure terminal modes are restored even on errors/interrupts
            try:
                self.loop.screen.clear()
                self.loop.screen.reset_default_terminal_colors()
            except Exception as exc:  # noqa: BLE001
                logger.warning("terminal reset failed: %s", exc)


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        config = ViewerConfig.from_args(argv)
    except ValueError as exc:
        print(f"Error: {exc}")
        raise SystemExit(2) from exc

    if not Path(config.csv_path).exists():
        print(f"Error: File '{config.csv_path}' not found.")
        raise SystemExit(1)

    log_file = setup_logging(config.log_dir, config.log_level)
    logger.info("gridpeek starting on %s (log %s)", config.csv_path, log_file)

    app = GridPeekApp(config)
    try:
        app.run()
    except TableLoadError as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
