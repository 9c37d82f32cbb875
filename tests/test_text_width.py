"""Tests for display width and truncation."""

from gridpeek.table_source import TableSource
from gridpeek.text_width import (
    ELLIPSIS,
    display_width,
    measure_column_widths,
    truncate,
)


class TestDisplayWidth:
    def test_ascii_width_is_length(self):
        assert display_width("hello there") == 11

    def test_combining_mark_has_no_width(self):
        text = "Les Mise" + "\u0301" + "rables"
        assert display_width(text) == 14
        assert len(text) == 15

    def test_width_shorter_than_length_with_combining_mark(self):
        text = "abcdefghijklmnopqrst" + "\u0301"
        assert display_width(text) < len(text)

    def test_wide_characters_count_double(self):
        assert display_width("中文") == 4

    def test_empty_string(self):
        assert display_width("") == 0


class TestTruncate:
    def test_pads_short_text(self):
        assert truncate("abc", 6) == "abc   "

    def test_cuts_long_text_with_ellipsis(self):
        result = truncate("abcdefghij", 5)
        assert result == "abcd" + ELLIPSIS
        assert display_width(result) == 5

    def test_pads_by_width_not_length(self):
        text = "Mise" + "\u0301"
        result = truncate(text, 6)
        assert display_width(result) == 6
        assert result.startswith(text)

    def test_wide_character_does_not_overflow(self):
        result = truncate("中文字", 4)
        assert display_width(result) == 4
        assert result.startswith("中")

    def test_zero_width(self):
        assert truncate("abc", 0) == ""


class TestMeasureColumnWidths:
    def test_sample_widths(self, sample_csv_path):
        source = TableSource.from_csv(sample_csv_path)
        assert measure_column_widths(source) == [14, 8, 8]

    def test_respects_bounds(self, sample_csv_path):
        source = TableSource.from_csv(sample_csv_path)
        assert measure_column_widths(source, min_width=1, max_width=10) == [10, 5, 8]

    def test_sample_size_limits_rows(self, sample_csv_path):
        source = TableSource.from_csv(sample_csv_path)
        # Only "John Doe" is sampled from the name column
        assert measure_column_widths(source, sample_size=1, min_width=1)[0] == 8
