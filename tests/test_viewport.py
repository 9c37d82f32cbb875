"""Tests for scroll offset clamping."""

import pytest

from gridpeek.geometry import InvalidDimensionsError
from gridpeek.viewport import ViewportOffsetManager


def make_viewport(rows: int, cols: int, visible_rows: int = 10, visible_cols: int = 25):
    viewport = ViewportOffsetManager()
    viewport.set_dataset(rows, cols)
    viewport.set_visible_area(visible_rows, visible_cols)
    return viewport


class TestOffsetBounds:
    @pytest.mark.parametrize("count", [0, 1, 2, 50])
    @pytest.mark.parametrize("requested", [-100, -1, 0, 1, 49, 50, 1000])
    def test_row_and_column_offsets_stay_in_bounds(self, count, requested):
        viewport = make_viewport(count, count)
        viewport.row_offset = requested
        viewport.column_offset = requested

        for offset in (viewport.row_offset, viewport.column_offset):
            assert offset >= 0
            if count == 0:
                assert offset == 0
            else:
                assert offset < count

    def test_starts_at_zero(self):
        viewport = ViewportOffsetManager()
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)

    def test_empty_table_forces_zero(self):
        viewport = ViewportOffsetManager()
        viewport.set_dataset(0, 0)
        viewport.ensure_valid_scroll_offsets()
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)

    @pytest.mark.parametrize("rows,cols", [(10, 0), (0, 10)])
    def test_any_empty_axis_zeroes_both_offsets(self, rows, cols):
        viewport = make_viewport(rows, cols)
        viewport.row_offset = 5
        viewport.column_offset = 5
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)

    def test_emptying_one_axis_resets_scrolled_view(self):
        viewport = make_viewport(50, 25)
        viewport.row_offset = 20
        viewport.set_dataset(50, 0)
        viewport.scroll_by(rows=7)
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)


class TestValidation:
    def test_ensure_valid_is_idempotent(self):
        viewport = make_viewport(50, 25)
        viewport.row_offset = 20
        viewport.column_offset = 10

        viewport.ensure_valid_scroll_offsets()
        first = (viewport.row_offset, viewport.column_offset)
        viewport.ensure_valid_scroll_offsets()
        assert (viewport.row_offset, viewport.column_offset) == first == (20, 10)

    def test_loading_smaller_table_resets_and_clamps(self):
        viewport = make_viewport(50, 25)
        viewport.row_offset = 20
        viewport.column_offset = 10
        viewport.ensure_valid_scroll_offsets()
        assert (viewport.row_offset, viewport.column_offset) == (20, 10)

        viewport.set_dataset(2, 2)
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)

        viewport.row_offset = 20
        viewport.column_offset = 10
        assert (viewport.row_offset, viewport.column_offset) == (1, 1)

    def test_resize_keeps_offsets_valid(self):
        viewport = make_viewport(50, 25)
        viewport.row_offset = 30
        viewport.set_visible_area(3, 5)
        assert viewport.row_offset == 30
        assert viewport.visible_rows == 3

    def test_scroll_by_clamps(self):
        viewport = make_viewport(50, 25)
        viewport.scroll_by(rows=10, columns=-3)
        assert (viewport.row_offset, viewport.column_offset) == (10, 0)
        viewport.scroll_by(rows=100, columns=100)
        assert (viewport.row_offset, viewport.column_offset) == (49, 24)


class TestInvalidSizes:
    def test_negative_dataset_rejected_without_mutation(self):
        viewport = make_viewport(50, 25)
        viewport.row_offset = 7
        with pytest.raises(InvalidDimensionsError):
            viewport.set_dataset(-1, 5)
        assert viewport.row_count == 50
        assert viewport.row_offset == 7

    def test_negative_visible_area_rejected(self):
        viewport = make_viewport(50, 25)
        with pytest.raises(InvalidDimensionsError):
            viewport.set_visible_area(10, -2)
        assert viewport.visible_columns == 25


class TestLayout:
    def test_visible_row_range(self):
        viewport = make_viewport(12, 3, visible_rows=5)
        viewport.row_offset = 9
        assert list(viewport.visible_row_range()) == [9, 10, 11]

    def test_visible_columns_fit_width_with_dividers(self):
        viewport = make_viewport(1, 5, visible_cols=20)
        assert viewport.visible_column_indices([8] * 5) == [0, 1]
        viewport.column_offset = 3
        assert viewport.visible_column_indices([8] * 5) == [3, 4]

    def test_visible_columns_shows_one_even_when_too_narrow(self):
        viewport = make_viewport(1, 5, visible_cols=5)
        assert viewport.visible_column_indices([8] * 5) == [0]

    def test_visible_columns_empty_table(self):
        viewport = make_viewport(0, 0)
        assert viewport.visible_column_indices([]) == []


class TestEnsureCellVisible:
    def test_scrolls_rows_down_and_up(self):
        viewport = make_viewport(100, 5, visible_rows=10)
        viewport.ensure_cell_visible(25, 0)
        assert viewport.row_offset == 16
        viewport.ensure_cell_visible(5, 0)
        assert viewport.row_offset == 5

    def test_visible_cell_does_not_scroll(self):
        viewport = make_viewport(100, 5, visible_rows=10)
        viewport.row_offset = 4
        viewport.ensure_cell_visible(13, 0)
        assert viewport.row_offset == 4

    def test_scrolls_columns_by_width(self):
        viewport = make_viewport(1, 5, visible_cols=20)
        viewport.ensure_cell_visible(0, 4, [8] * 5)
        assert viewport.column_offset == 3
        viewport.ensure_cell_visible(0, 1, [8] * 5)
        assert viewport.column_offset == 1

    def test_wide_column_still_becomes_first(self):
        viewport = make_viewport(1, 3, visible_cols=10)
        viewport.ensure_cell_visible(0, 2, [8, 8, 30])
        assert viewport.column_offset == 2

    def test_empty_table_stays_at_zero(self):
        viewport = make_viewport(0, 0)
        viewport.ensure_cell_visible(10, 10)
        assert (viewport.row_offset, viewport.column_offset) == (0, 0)
