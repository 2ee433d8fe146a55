"""Tests for sheetmap.locator — title-row detection."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from openpyxl import Workbook

from sheetmap.fields import HeaderField, derive_schema, header, register_schema, unregister_schema
from sheetmap.locator import (
    count_header_matches,
    find_title_row,
    header_map_from_values,
    read_header_map,
)


@dataclass
class Row3:
    a: str = header(1, "A")
    b: str = header(2, "B", aliases=("Bee",))
    c: str = header(3, "C")


def _ws(rows):
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    return ws


def test_header_map_skips_blank_cells_and_stringifies():
    values = ("A", None, "", 2024, dt.date(2024, 1, 1))
    assert header_map_from_values(values) == {0: "A", 3: "2024", 4: "2024-01-01"}


def test_count_header_matches_counts_fields_not_cells():
    schema = derive_schema(Row3)
    assert count_header_matches({0: "B", 1: "Bee", 2: "X"}, schema) == 1
    assert count_header_matches({0: "A", 1: "Bee", 2: "C"}, schema) == 3


def test_first_matching_row_wins():
    ws = _ws([["junk"], ["A", "x"], ["A", "B", "C"]])
    assert find_title_row(derive_schema(Row3), ws) == 2


def test_min_matches_argument():
    ws = _ws([["junk"], ["A", "x"], ["A", "B", "C"]])
    assert find_title_row(derive_schema(Row3), ws, min_matches=3) == 3


def test_min_matches_capped_at_field_count():
    ws = _ws([["A", "B", "C"]])
    assert find_title_row(derive_schema(Row3), ws, min_matches=10) == 1


def test_schema_min_header_matches_takes_precedence():
    class Rec:
        pass

    schema = register_schema(
        Rec,
        [HeaderField.build("a", "A", order=1), HeaderField.build("b", "B", order=2)],
        min_header_matches=2,
    )
    try:
        ws = _ws([["A"], ["A", "B"]])
        assert find_title_row(schema, ws, min_matches=1) == 2
    finally:
        unregister_schema(Rec)


def test_no_match_returns_none():
    ws = _ws([["x", "y"], [1, 2]])
    assert find_title_row(derive_schema(Row3), ws) is None


def test_scan_does_not_grow_sheet():
    ws = _ws([["x"], ["y"]])
    find_title_row(derive_schema(Row3), ws)
    assert ws.max_row == 2
    assert ws.max_column == 1


def test_read_header_map():
    ws = _ws([["t"], ["A", None, "C"]])
    assert read_header_map(ws, 2) == {0: "A", 2: "C"}
