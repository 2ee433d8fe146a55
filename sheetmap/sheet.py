"""
sheetmap/sheet.py — One worksheet plus the cursor that fills it.

Cell-level API (positions come from the cursor, never from the caller):
  create_title_cell(width, *headers)  -> [WorkCell]
  create_cell(*values)                -> [WorkCell]
  create_cell_to_newline(*values)     -> [WorkCell]
  new_line() / skip(n) / merge(w, h) / update_direction(d) / clear()

Record-level API:
  from_records(records)   EMPTY → HEADER_WRITTEN → DATA_ROW_WRITTEN*
  read(record_type)       SCANNING_FOR_HEADER → HEADER_FOUND → ROW_ITERATION → DONE
  map(record_type)        read() that raises when the header row is missing

A Sheet owns its worksheet and cursor. It is not thread-safe: callers that
share one Sheet between threads must serialise access themselves.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Type, TypeVar

from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from .cell import TITLE, TITLE_FONT, VALUE, WorkCell
from .config import SheetOptions
from .correlate import build_record, correlate_columns, header_names, record_values, row_to_mapping
from .cursor import Cursor
from .errors import AppError, HEADER_NOT_FOUND, INVALID_ARGUMENT, ROW_COERCION_FAILED
from .fields import schema_for
from .locator import find_title_row, read_header_map
from .log import get_logger
from .models import (
    DATA_ROW_WRITTEN, DONE, EMPTY, HEADER_FOUND, HEADER_WRITTEN, HORIZONTAL, ROW_ITERATION,
    SCANNING_FOR_HEADER, MergeRegion, Position, ReadReport, RowError, WriteReport,
)
from .parsing import col_index_to_letters, range_ref

logger = get_logger("sheet")

T = TypeVar("T")


class Sheet:

    def __init__(self, ws: Worksheet, options: Optional[SheetOptions] = None) -> None:
        self._ws = ws
        self.options = options or SheetOptions()
        self._cursor = Cursor(self.options.direction)
        self.state = EMPTY
        self.read_state: Optional[str] = None

    @property
    def name(self) -> str:
        return self._ws.title

    @property
    def direction(self) -> str:
        return self._cursor.direction

    @property
    def position(self) -> Position:
        return self._cursor.position

    @property
    def merges(self) -> List[MergeRegion]:
        return self._cursor.merges

    # ── Cell-level writing ────────────────────────────────────────────────────

    def _cell_at(self, pos: Position):
        row, col = pos
        return self._ws.cell(row=row + 1, column=col + 1)

    def create_title_cell(self, width: int, *headers: str) -> List[WorkCell]:
        """
        Allocate one title cell per header. width scales the column width
        (options.column_width characters per unit).
        """
        if isinstance(width, bool) or not isinstance(width, int) or width < 1:
            raise AppError(INVALID_ARGUMENT, f"Title width must be an integer >= 1 (got {width!r})")
        if not headers:
            return []
        for h in headers:
            if not isinstance(h, str) or h.strip() == "":
                raise AppError(
                    INVALID_ARGUMENT,
                    f"Headers must be non-blank text (got {h!r})",
                    {"headers": list(headers)},
                )

        style = TITLE_FONT if self.options.title_bold else None
        cells = []
        for h in headers:
            pos = self._cursor.next_cell()
            letter = col_index_to_letters(pos[1] + 1)
            self._ws.column_dimensions[letter].width = self.options.column_width * width
            cells.append(WorkCell(self._cell_at(pos), h, kind=TITLE, style=style))
        return cells

    def create_cell(self, *values: Any, style: Optional[Font] = None) -> List[WorkCell]:
        return [WorkCell(self._cell_at(self._cursor.next_cell()), v, kind=VALUE, style=style)
                for v in values]

    def create_cell_to_newline(self, *values: Any, style: Optional[Font] = None) -> List[WorkCell]:
        self.new_line()
        return self.create_cell(*values, style=style)

    def new_line(self) -> None:
        self._cursor.new_line()

    def skip(self, n: int) -> List[WorkCell]:
        """Allocate n empty cells (for later styling); see Cursor.skip."""
        return [WorkCell(self._cell_at(pos)) for pos in self._cursor.skip(n)]

    def merge(self, width: int, height: int) -> None:
        region = self._cursor.merge(width, height)
        if region is None:
            return
        self._ws.merge_cells(range_ref((region.row, region.col), region.bottom_right))

    def update_direction(self, direction: str) -> "Sheet":
        self._cursor.update_direction(direction)
        return self

    def clear(self) -> None:
        """Drop every row and merged range, and reset the cursor."""
        for rng in list(self._ws.merged_cells.ranges):
            self._ws.unmerge_cells(str(rng))
        if self._ws.max_row:
            self._ws.delete_rows(1, self._ws.max_row)
        self._cursor.clear()
        self.state = EMPTY

    # ── Record writing ────────────────────────────────────────────────────────

    def from_records(self, records: Optional[Iterable[Any]]) -> WriteReport:
        """
        Replace the sheet content with a header row plus one line per record.

        The schema comes from the first record's type. An empty list is a
        no-op. A field getter that raises writes "" and is reported in
        WriteReport.field_errors; the sheet always completes.
        """
        items = list(records or [])
        if not items:
            return WriteReport()

        schema = schema_for(type(items[0]))

        self.clear()
        headers = header_names(schema)
        self.create_title_cell(1, *headers)
        self.state = HEADER_WRITTEN

        report = WriteReport(columns=list(headers))
        for i, record in enumerate(items):
            values, errors = record_values(record, schema, row=i)
            report.field_errors.extend(errors)
            self.create_cell_to_newline(*values)
            self.state = DATA_ROW_WRITTEN
            report.rows_written += 1

        logger.info(
            "Records written",
            extra={
                "sheet": self.name,
                "record_type": schema.type_name,
                "rows": report.rows_written,
                "columns": report.columns,
                "field_errors": len(report.field_errors),
            },
        )
        return report

    # ── Record reading ────────────────────────────────────────────────────────

    def read(self, record_type: Type[T]) -> ReadReport:
        """
        Rebuild records of record_type from the sheet.

        The header is read as a row and records as the rows below it, so the
        sheet must be in the horizontal direction; a vertical sheet raises
        AppError(INVALID_ARGUMENT). Rows that fail conversion are skipped and
        listed in the report's errors. A missing header row yields ok=False
        and no records.
        """
        if self.direction != HORIZONTAL:
            raise AppError(
                INVALID_ARGUMENT,
                f"Cannot read sheet {self.name!r} in {self.direction} direction; "
                "records are read from a horizontal header row",
                {"sheet": self.name, "direction": self.direction},
            )
        schema = schema_for(record_type)

        self.read_state = SCANNING_FOR_HEADER
        title_row = find_title_row(schema, self._ws, self.options.min_header_matches)
        if title_row is None:
            self.read_state = DONE
            message = f"No header row for {schema.type_name} in sheet {self.name!r}"
            logger.warning(message, extra={"sheet": self.name, "record_type": schema.type_name})
            return ReadReport(ok=False, error_code=HEADER_NOT_FOUND, error_message=message)

        self.read_state = HEADER_FOUND
        header_map = read_header_map(self._ws, title_row)
        column_map = correlate_columns(header_map, schema)
        header_by_attr = {f.attr: header_map[col] for col, f in column_map.items()}

        self.read_state = ROW_ITERATION
        report = ReadReport(ok=True, header_row=title_row, columns=header_map)
        for r_idx, values in enumerate(
            self._ws.iter_rows(min_row=title_row + 1, values_only=True),
            start=title_row + 1,
        ):
            mapping = row_to_mapping(values, column_map)
            if self.options.skip_blank_rows and all(v is None for v in mapping.values()):
                continue
            try:
                record = build_record(schema, mapping, row=r_idx, header_by_attr=header_by_attr)
            except AppError as e:
                if e.code != ROW_COERCION_FAILED:
                    raise
                details = e.details or {}
                report.errors.append(RowError(
                    row=r_idx,
                    message=e.message,
                    field=details.get("field"),
                    header=details.get("header"),
                    value=details.get("value"),
                ))
                logger.warning(
                    "Row skipped",
                    extra={"sheet": self.name, "row": r_idx, "error": e.message},
                )
                continue
            report.records.append(record)

        self.read_state = DONE
        logger.info(
            "Records read",
            extra={
                "sheet": self.name,
                "record_type": schema.type_name,
                "header_row": title_row,
                "records": len(report.records),
                "skipped_rows": len(report.errors),
            },
        )
        return report

    def map(self, record_type: Type[T]) -> List[T]:
        report = self.read(record_type)
        if not report.ok:
            raise AppError(
                HEADER_NOT_FOUND,
                report.error_message or "Header row not found",
                {"sheet": self.name, "record_type": getattr(record_type, "__qualname__", str(record_type))},
            )
        return report.records
