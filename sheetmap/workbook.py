from __future__ import annotations

from typing import Dict, List, Optional

from openpyxl import Workbook

from .config import SheetOptions
from .errors import AppError, INVALID_ARGUMENT, SHEET_NOT_FOUND
from .sheet import Sheet

DEFAULT_SHEET = "Sheet"


class WorkBook:
    """
    Holds one openpyxl Workbook and the Sheet wrappers created over it.
    Saving is left to the caller: WorkBook(...).workbook.save(path).
    """

    def __init__(self, wb: Optional[Workbook] = None, options: Optional[SheetOptions] = None) -> None:
        self._wb = wb if wb is not None else Workbook()
        self.options = (options or SheetOptions()).validate()
        self._sheets: Dict[str, Sheet] = {}

    @property
    def workbook(self) -> Workbook:
        return self._wb

    @property
    def sheets(self) -> List[Sheet]:
        return list(self._sheets.values())

    def create_sheet(self, name: Optional[str] = None) -> Sheet:
        if name and name in self._wb.sheetnames:
            raise AppError(INVALID_ARGUMENT, f"Sheet already exists: {name}", {"sheet": name})
        ws = self._wb.create_sheet(title=name)
        self._drop_untouched_default()
        sheet = Sheet(ws, self.options)
        self._sheets[ws.title] = sheet
        return sheet

    def get_sheet(self, name: str) -> Sheet:
        if name in self._sheets:
            return self._sheets[name]
        if name not in self._wb.sheetnames:
            raise AppError(SHEET_NOT_FOUND, f"Sheet not found: {name}", {"sheet": name})
        sheet = Sheet(self._wb[name], self.options)
        self._sheets[name] = sheet
        return sheet

    def _drop_untouched_default(self) -> None:
        """openpyxl starts every Workbook with an empty 'Sheet'; remove it once unused."""
        wb = self._wb
        if DEFAULT_SHEET in self._sheets or DEFAULT_SHEET not in wb.sheetnames:
            return
        if len(wb.sheetnames) < 2:
            return
        default = wb[DEFAULT_SHEET]
        if default.max_row == 1 and default.max_column == 1 and default["A1"].value in (None, ""):
            wb.remove(default)
