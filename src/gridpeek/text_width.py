"""Terminal display width helpers used for column layout."""

from __future__ import annotations

from typing import Iterable, Protocol

from urwid import str_util

ELLIPSIS = "…"


class ColumnSource(Protocol):
    @property
    def column_names(self) -> list[str]: ...

    def column_values(self, col: int, limit: int) -> list[str]: ...


def char_width(char: str) -> int:
    """Terminal columns occupied by a single character."""
    return str_util.get_width(ord(char))


def display_width(text: str) -> int:
    """
    Sum of the per-character terminal widths of text.

    Combining marks count as 0 and wide East Asian characters as 2, so the
    result can be smaller or larger than len(text).
    """
    return sum(char_width(char) for char in text)


def truncate(text: str, width: int) -> str:
    """Truncate and pad text so that it occupies exactly width cells."""
    if width <= 0:
        return ""
    total = display_width(text)
    if total <= width:
        return text + " " * (width - total)

    # Leave one cell for the ellipsis
    budget = width - 1
    used = 0
    out: list[str] = []
    for char in text:
        w = char_width(char)
        if used + w > budget:
            break
        out.append(char)
        used += w
    return "".join(out) + ELLIPSIS + " " * (budget - used)


def widest(values: Iterable[str]) -> int:
    return max((display_width(v) for v in values), default=0)


def measure_column_widths(
    source: ColumnSource,
    sample_size: int = 1000,
    min_width: int = 8,
    max_width: int = 40,
) -> list[int]:
    """Pick a display width per column from the header and a sample of rows."""
    widths = []
    for col, name in enumerate(source.column_names):
        header_len = display_width(name) + 2
        max_len = widest(source.column_values(col, sample_size))
        width = max(header_len, max_len)
        widths.append(max(min_width, min(width, max_width)))
    return widths
