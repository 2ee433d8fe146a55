"""
sheetmap/cell.py — Wrapper around one worksheet cell handed out by a Sheet.

Value rules when writing:
  None                      → nothing written (the cell exists, stays empty)
  bool / float              → stored as the same native value
  int / Decimal             → stored as text ("30"); int and Decimal
                              fields parse it back when read
  date / datetime / time    → stored as a date/time value
  str                       → stored as text
  anything else             → str(value)

Formulas are out of scope: text starting with "=" is stored as a string
value (data_type "s"), never evaluated.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from openpyxl.cell.cell import Cell
from openpyxl.styles import Font

from .parsing import cell_ref

TITLE = "title"
VALUE = "value"

TITLE_FONT = Font(bold=True)


def cell_value(value: Any) -> Any:
    """Python value → value openpyxl should store."""
    if value is None:
        return None
    if isinstance(value, (bool, float, str, dt.date, dt.time)):
        return value
    return str(value)


class WorkCell:
    """
    One allocated cell. Holds the worksheet cell but does not expose it;
    callers read and restyle through this wrapper.
    """

    def __init__(self, cell: Cell, value: Any = None, kind: str = VALUE, style: Optional[Font] = None) -> None:
        self._cell = cell
        self.kind = kind
        if style is not None:
            self._cell.font = style
        if value is not None:
            self.update_value(value)

    @property
    def row(self) -> int:
        """0-based row."""
        return self._cell.row - 1

    @property
    def col(self) -> int:
        """0-based column."""
        return self._cell.column - 1

    @property
    def position(self):
        return (self.row, self.col)

    @property
    def coordinate(self) -> str:
        return cell_ref(self.row, self.col)

    @property
    def value(self) -> Any:
        return self._cell.value

    @property
    def is_title(self) -> bool:
        return self.kind == TITLE

    def update_value(self, value: Any) -> "WorkCell":
        stored = cell_value(value)
        if isinstance(stored, str) and stored.startswith("="):
            self._cell.value = stored
            self._cell.data_type = "s"
        else:
            self._cell.value = stored
        return self

    def update_style(self, font: Font) -> "WorkCell":
        self._cell.font = font
        return self

    def __repr__(self) -> str:
        return f"WorkCell({self.coordinate}, {self.value!r}, kind={self.kind!r})"
