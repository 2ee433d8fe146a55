"""
tests/test_cursor.py

Unit tests for sheetmap.cursor — the standalone cell-position allocator.

No worksheet involved: the cursor only hands out (row, col) positions.
"""
from __future__ import annotations

import pytest

from sheetmap.cursor import Cursor
from sheetmap.errors import AppError, INVALID_ARGUMENT
from sheetmap.models import HORIZONTAL, VERTICAL, MergeRegion


# ══════════════════════════════════════════════════════════════════════════════
# next_cell / new_line
# ══════════════════════════════════════════════════════════════════════════════

class TestNextCell:
    def test_horizontal_walks_across_columns(self):
        c = Cursor()
        assert [c.next_cell() for _ in range(3)] == [(0, 0), (0, 1), (0, 2)]

    def test_vertical_walks_down_rows(self):
        c = Cursor(VERTICAL)
        assert [c.next_cell() for _ in range(3)] == [(0, 0), (1, 0), (2, 0)]

    def test_new_line_horizontal_moves_to_next_row_column_zero(self):
        c = Cursor()
        c.next_cell()
        c.next_cell()
        c.new_line()
        assert c.next_cell() == (1, 0)

    def test_new_line_vertical_moves_to_next_column_row_zero(self):
        c = Cursor(VERTICAL)
        c.next_cell()
        c.next_cell()
        c.new_line()
        assert c.next_cell() == (0, 1)

    def test_double_new_line_advances_two_rows(self):
        c = Cursor()
        c.next_cell()
        c.new_line()
        c.new_line()
        assert c.next_cell() == (2, 0)

    def test_new_line_on_fresh_cursor_still_advances(self):
        c = Cursor()
        c.new_line()
        assert c.next_cell() == (1, 0)

    def test_last_tracks_current_run(self):
        c = Cursor()
        assert c.last is None
        c.next_cell()
        assert c.last == (0, 0)
        c.new_line()
        assert c.last is None


# ══════════════════════════════════════════════════════════════════════════════
# skip
# ══════════════════════════════════════════════════════════════════════════════

class TestSkip:
    @pytest.mark.parametrize("n", [0, 1, 2, 5])
    def test_skip_returns_n_fresh_positions_then_continues(self, n):
        c = Cursor()
        first = c.next_cell()
        skipped = c.skip(n)
        assert len(skipped) == n
        assert first not in skipped
        assert len(set(skipped)) == n
        assert skipped == [(0, 1 + i) for i in range(n)]
        assert c.next_cell() == (0, 1 + n)

    def test_skip_vertical(self):
        c = Cursor(VERTICAL)
        assert c.skip(2) == [(0, 0), (1, 0)]
        assert c.next_cell() == (2, 0)

    def test_skip_negative_raises_and_leaves_state(self):
        c = Cursor()
        c.next_cell()
        before = (c.position, c.last)
        with pytest.raises(AppError) as ei:
            c.skip(-1)
        assert ei.value.code == INVALID_ARGUMENT
        assert (c.position, c.last) == before
        assert c.next_cell() == (0, 1)

    def test_skip_non_int_raises(self):
        c = Cursor()
        with pytest.raises(AppError) as ei:
            c.skip("2")
        assert ei.value.code == INVALID_ARGUMENT


# ══════════════════════════════════════════════════════════════════════════════
# merge
# ══════════════════════════════════════════════════════════════════════════════

class TestMerge:
    def test_merge_anchors_on_last_cell_and_skips_block(self):
        c = Cursor()
        assert c.next_cell() == (0, 0)
        region = c.merge(3, 1)
        assert region == MergeRegion(row=0, col=0, width=3, height=1)
        assert c.next_cell() == (0, 3)

    def test_merge_reserves_rows_below_for_next_line(self):
        c = Cursor()
        c.next_cell()
        c.merge(2, 2)
        c.new_line()
        assert c.next_cell() == (1, 2)

    def test_merge_at_start_of_run_claims_anchor(self):
        c = Cursor()
        region = c.merge(2, 2)
        assert region == MergeRegion(row=0, col=0, width=2, height=2)
        assert c.next_cell() == (0, 2)

    def test_one_by_one_is_noop(self):
        c = Cursor()
        c.next_cell()
        assert c.merge(1, 1) is None
        assert c.merges == []
        assert c.next_cell() == (0, 1)

    @pytest.mark.parametrize("w,h", [(0, 1), (1, 0), (-1, 2), (2, -3)])
    def test_bad_extents_raise(self, w, h):
        c = Cursor()
        with pytest.raises(AppError) as ei:
            c.merge(w, h)
        assert ei.value.code == INVALID_ARGUMENT
        assert c.position == (0, 0)

    def test_overlapping_merge_rejected_without_change(self):
        c = Cursor()
        c.next_cell()
        c.next_cell()       # (0, 1)
        c.merge(1, 2)       # reserves (1, 1)
        c.new_line()
        assert c.next_cell() == (1, 0)
        with pytest.raises(AppError) as ei:
            c.merge(2, 1)   # would cover (1, 1)
        assert ei.value.code == INVALID_ARGUMENT
        assert ei.value.details["blocked"] == "B2"
        assert len(c.merges) == 1
        assert c.next_cell() == (1, 2)

    def test_merge_after_direction_switch_never_revisited(self):
        c = Cursor()
        c.next_cell()
        region = c.merge(2, 2)
        c.update_direction(VERTICAL)
        handed = [c.next_cell() for _ in range(6)]
        c.new_line()
        handed += [c.next_cell() for _ in range(6)]
        c.update_direction(HORIZONTAL)
        c.new_line()
        handed += [c.next_cell() for _ in range(6)]
        assert not any(region.contains(p) for p in handed)
        assert len(set(handed)) == len(handed)


# ══════════════════════════════════════════════════════════════════════════════
# direction / clear
# ══════════════════════════════════════════════════════════════════════════════

class TestDirectionAndClear:
    def test_switch_does_not_move_existing_cells(self):
        c = Cursor()
        c.next_cell()
        c.next_cell()
        c.update_direction(VERTICAL)
        assert c.next_cell() == (0, 2)
        assert c.next_cell() == (1, 2)

    def test_new_line_after_switch_skips_taken_cells(self):
        c = Cursor()
        c.skip(3)             # (0,0) (0,1) (0,2)
        c.new_line()
        c.update_direction(VERTICAL)
        assert c.next_cell() == (1, 0)
        c.new_line()          # column 1, row 0 — (0,1) already handed out
        assert c.next_cell() == (1, 1)

    def test_unknown_direction_rejected(self):
        c = Cursor()
        with pytest.raises(AppError) as ei:
            c.update_direction("diagonal")
        assert ei.value.code == INVALID_ARGUMENT
        assert c.direction == HORIZONTAL

    def test_clear_resets_everything_but_direction(self):
        c = Cursor(VERTICAL)
        c.skip(3)
        c.merge(2, 2)
        c.clear()
        assert c.position == (0, 0)
        assert c.merges == []
        assert c.direction == VERTICAL
        assert c.next_cell() == (0, 0)
