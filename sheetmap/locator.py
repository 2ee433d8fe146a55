"""
sheetmap/locator.py — Title-row detection for the read path.

A title row is the first row, scanning top-down, whose populated cells match
at least N header names or aliases of the record schema. N comes from the
schema (min_header_matches) or, failing that, from the caller.

Uses ws.iter_rows(values_only=True) for every scan — never ws.cell() in a
loop — so reading never registers phantom cells that would inflate
ws.max_row.

Public API:
  header_map_from_values(values)                -> {col: header text}
  count_header_matches(header_map, schema)      -> int
  find_title_row(schema, ws, min_matches)       -> 1-based row number | None
  read_header_map(ws, row)                      -> {col: header text}
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openpyxl.worksheet.worksheet import Worksheet

from .coerce import is_blank
from .fields import RecordSchema

HeaderColumnMap = Dict[int, str]


def header_map_from_values(values: Sequence[Any]) -> HeaderColumnMap:
    """
    Populated cells of one row → {0-based column: header text}.
    Non-text headers (numbers, dates) are keyed by their str() form.
    """
    header_map: HeaderColumnMap = {}
    for col, value in enumerate(values):
        if is_blank(value):
            continue
        header_map[col] = value if isinstance(value, str) else str(value)
    return header_map


def count_header_matches(header_map: HeaderColumnMap, schema: RecordSchema) -> int:
    """Number of distinct schema fields that some cell in the row names."""
    matched = set()
    for text in header_map.values():
        f = schema.field_for(text)
        if f is not None:
            matched.add(f.attr)
    return len(matched)


def find_title_row(
    schema: RecordSchema,
    ws: Worksheet,
    min_matches: int = 1,
) -> Optional[int]:
    """
    Return the 1-based number of the first row that looks like this schema's
    title row, or None.
    """
    needed = schema.min_header_matches or min_matches
    needed = min(needed, len(schema.fields))
    for r_idx, values in enumerate(ws.iter_rows(values_only=True), start=1):
        header_map = header_map_from_values(values)
        if header_map and count_header_matches(header_map, schema) >= needed:
            return r_idx
    return None


def read_header_map(ws: Worksheet, row: int) -> HeaderColumnMap:
    for values in ws.iter_rows(min_row=row, max_row=row, values_only=True):
        return header_map_from_values(values)
    return {}
