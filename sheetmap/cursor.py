"""
sheetmap/cursor.py — Cell-position allocator for one sheet.

The cursor hands out (row, col) positions, 0-based, in fill order:

  horizontal  — next_cell() walks right along the current row;
                new_line() drops to the next row and returns to column 0.
  vertical    — next_cell() walks down the current column;
                new_line() moves to the next column and returns to row 0.

Invariants:
  - No position is handed out twice between clear() calls, even after
    direction switches send the counters back over earlier ground.
  - Cells inside a merge region (other than its anchor) are reserved and
    never handed out.
  - Rejected calls (bad skip count, bad merge extents) leave the state as is.

Pure logic: nothing here touches openpyxl. The Sheet translates positions
into worksheet cells and merge regions into merged ranges.
"""
from __future__ import annotations

from typing import List, Optional, Set

from .errors import AppError, INVALID_ARGUMENT
from .models import DIRECTIONS, HORIZONTAL, MergeRegion, Position
from .parsing import cell_ref


class Cursor:
    """
    Stateful 2-D allocator. One per sheet; not thread-safe.
    """

    def __init__(self, direction: str = HORIZONTAL) -> None:
        _check_direction(direction)
        self._direction = direction
        self._row = 0
        self._col = 0
        self._last: Optional[Position] = None
        self._allocated: Set[Position] = set()
        self._reserved: Set[Position] = set()
        self._merges: List[MergeRegion] = []

    # ── Read-only state ───────────────────────────────────────────────────────

    @property
    def direction(self) -> str:
        return self._direction

    @property
    def position(self) -> Position:
        """Raw counters; the next allocation lands here unless it is taken."""
        return (self._row, self._col)

    @property
    def last(self) -> Optional[Position]:
        """Most recent allocation in the current run, None after new_line()/clear()."""
        return self._last

    @property
    def merges(self) -> List[MergeRegion]:
        return list(self._merges)

    def is_taken(self, pos: Position) -> bool:
        return pos in self._allocated or pos in self._reserved

    # ── Allocation ────────────────────────────────────────────────────────────

    def next_cell(self) -> Position:
        """Allocate the next free position along the active direction."""
        while self.is_taken((self._row, self._col)):
            self._advance()
        pos = (self._row, self._col)
        self._allocated.add(pos)
        self._last = pos
        self._advance()
        return pos

    def skip(self, n: int) -> List[Position]:
        """
        Allocate n consecutive positions without values, in allocation order.
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise AppError(INVALID_ARGUMENT, f"Skip count must be an integer (got {n!r})")
        if n < 0:
            raise AppError(INVALID_ARGUMENT, f"Skip count must be >= 0 (got {n})", {"count": n})
        return [self.next_cell() for _ in range(n)]

    def new_line(self) -> None:
        if self._direction == HORIZONTAL:
            self._row += 1
            self._col = 0
        else:
            self._col += 1
            self._row = 0
        self._last = None

    def merge(self, width: int, height: int) -> Optional[MergeRegion]:
        """
        Reserve a width x height block anchored at the current position.

        The anchor is the last cell allocated in this run. At the start of a
        run there is none, so the next free position is allocated and used.
        1x1 is a no-op and returns None.
        """
        for label, extent in (("width", width), ("height", height)):
            if isinstance(extent, bool) or not isinstance(extent, int) or extent < 1:
                raise AppError(
                    INVALID_ARGUMENT,
                    f"Merge {label} must be an integer >= 1 (got {extent!r})",
                    {"width": width, "height": height},
                )
        if width == 1 and height == 1:
            return None

        anchor = self._last
        if anchor is None:
            anchor = self._peek()
        region = MergeRegion(row=anchor[0], col=anchor[1], width=width, height=height)

        for pos in region.positions():
            if pos != anchor and self.is_taken(pos):
                raise AppError(
                    INVALID_ARGUMENT,
                    "Merge region overlaps cells that are already in use.",
                    {"anchor": cell_ref(*anchor), "blocked": cell_ref(*pos),
                     "width": width, "height": height},
                )

        if self._last is None:
            # Claim the anchor now; otherwise next_cell() would hand it out again.
            self.next_cell()
        self._reserved.update(p for p in region.positions() if p != anchor)
        self._merges.append(region)
        return region

    def update_direction(self, direction: str) -> None:
        _check_direction(direction)
        self._direction = direction

    def clear(self) -> None:
        """Back to the origin; forget every allocation and merge region."""
        self._row = 0
        self._col = 0
        self._last = None
        self._allocated.clear()
        self._reserved.clear()
        self._merges.clear()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _advance(self) -> None:
        if self._direction == HORIZONTAL:
            self._col += 1
        else:
            self._row += 1

    def _peek(self) -> Position:
        """Where next_cell() would land, without allocating."""
        row, col = self._row, self._col
        while self.is_taken((row, col)):
            if self._direction == HORIZONTAL:
                col += 1
            else:
                row += 1
        return (row, col)


def _check_direction(direction: str) -> None:
    if direction not in DIRECTIONS:
        raise AppError(
            INVALID_ARGUMENT,
            f"Unknown fill direction: {direction!r}",
            {"allowed": sorted(DIRECTIONS)},
        )
