\
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Literal, Optional, Tuple


# ---- Fill direction ----

HORIZONTAL = "horizontal"   # cells advance across columns; new_line() moves down a row
VERTICAL   = "vertical"     # cells advance down rows; new_line() moves right a column

Direction = Literal["horizontal", "vertical"]
DIRECTIONS: FrozenSet[str] = frozenset({HORIZONTAL, VERTICAL})

Position = Tuple[int, int]
"""(row, col), both 0-based."""


# ---- Sheet lifecycle ----

EMPTY             = "EMPTY"
HEADER_WRITTEN    = "HEADER_WRITTEN"
DATA_ROW_WRITTEN  = "DATA_ROW_WRITTEN"

SCANNING_FOR_HEADER = "SCANNING_FOR_HEADER"
HEADER_FOUND        = "HEADER_FOUND"
ROW_ITERATION       = "ROW_ITERATION"
DONE                = "DONE"


@dataclass(frozen=True)
class MergeRegion:
    """
    Rectangular block rendered as one logical cell.
    (row, col) is the anchor (top-left); width counts columns, height rows.
    """
    row: int
    col: int
    width: int
    height: int

    @property
    def bottom_right(self) -> Position:
        return (self.row + self.height - 1, self.col + self.width - 1)

    def contains(self, pos: Position) -> bool:
        r, c = pos
        return (self.row <= r < self.row + self.height
                and self.col <= c < self.col + self.width)

    def positions(self) -> Iterator[Position]:
        for r in range(self.row, self.row + self.height):
            for c in range(self.col, self.col + self.width):
                yield (r, c)


# ---- Run reporting ----

@dataclass
class FieldError:
    """A field getter failed during write; the cell received an empty value."""
    row: int                    # 0-based data row index within the written records
    field: str
    message: str


@dataclass
class RowError:
    """A sheet row could not be turned into a record and was skipped."""
    row: int                    # 1-based worksheet row number
    message: str
    field: Optional[str] = None
    header: Optional[str] = None
    value: Any = None


@dataclass
class WriteReport:
    """
    Returned by Sheet.from_records. Tests can assert it.
    """
    rows_written: int = 0
    columns: List[str] = field(default_factory=list)
    field_errors: List[FieldError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.field_errors)


@dataclass
class ReadReport:
    """
    Returned by Sheet.read. ok is False only when the header row is missing;
    per-row failures are collected in errors and do not flip ok.
    """
    ok: bool
    records: List[Any] = field(default_factory=list)
    header_row: Optional[int] = None            # 1-based worksheet row number
    columns: Dict[int, str] = field(default_factory=dict)
    errors: List[RowError] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors) or self.error_code is not None
