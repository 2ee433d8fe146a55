\
from __future__ import annotations

import re
from typing import Tuple

from .errors import AppError, BAD_SPEC


_COL_RE = re.compile(r"^[A-Z]+$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_SPEC, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(BAD_SPEC, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def cell_ref(row: int, col: int) -> str:
    """
    0-based cursor position -> A1 reference ((0, 0) -> "A1", (4, 27) -> "AB5").
    """
    if row < 0 or col < 0:
        raise AppError(BAD_SPEC, f"Bad cell position: {(row, col)!r}")
    return f"{col_index_to_letters(col + 1)}{row + 1}"


def range_ref(top_left: Tuple[int, int], bottom_right: Tuple[int, int]) -> str:
    """
    Two 0-based corners -> "A1:C3" range string, as openpyxl merge_cells expects.
    """
    return f"{cell_ref(*top_left)}:{cell_ref(*bottom_right)}"
