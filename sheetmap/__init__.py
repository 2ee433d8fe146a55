"""`sheetmap` maps lists of records to worksheet rows under a header row, and back."""

from __future__ import annotations

from .cell import WorkCell
from .config import SheetOptions, load_options, save_options
from .cursor import Cursor
from .errors import AppError, friendly_message
from .fields import HeaderField, RecordSchema, header, register_schema, schema_for
from .models import HORIZONTAL, VERTICAL, MergeRegion, ReadReport, RowError, WriteReport
from .sheet import Sheet
from .workbook import WorkBook

__all__ = [
    "AppError",
    "friendly_message",
    "Cursor",
    "HORIZONTAL",
    "VERTICAL",
    "MergeRegion",
    "HeaderField",
    "RecordSchema",
    "header",
    "register_schema",
    "schema_for",
    "Sheet",
    "WorkBook",
    "WorkCell",
    "SheetOptions",
    "load_options",
    "save_options",
    "ReadReport",
    "RowError",
    "WriteReport",
]

__version__ = "0.1.0"
