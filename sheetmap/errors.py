from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    Caller-facing error with a short code and structured details.
    Raise AppError from sheetmap modules; callers branch on .code and may show
    friendly_message(e) to end users.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and callers) ───────────────────────────

INVALID_ARGUMENT    = "INVALID_ARGUMENT"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
HEADER_NOT_FOUND    = "HEADER_NOT_FOUND"
ROW_COERCION_FAILED = "ROW_COERCION_FAILED"
SHEET_NOT_FOUND     = "SHEET_NOT_FOUND"
BAD_SPEC            = "BAD_SPEC"


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner suitable for showing to an end user.
    Never exposes raw tracebacks or internal code paths.
    """
    code = e.code
    msg  = e.message or ""
    details = e.details or {}

    if code == HEADER_NOT_FOUND:
        record = details.get("record_type", "")
        sheet  = details.get("sheet", "")
        parts = ["No header row was found"]
        if sheet:
            parts.append(f" in sheet '{sheet}'")
        if record:
            parts.append(f" for {record}")
        parts.append(". Check that the sheet has a row with the expected column titles.")
        return "".join(parts)

    if code == CONFIGURATION_ERROR:
        header = details.get("header", "")
        if header:
            return f"Two fields use the same column title '{header}'. Give each field its own title.\n({msg})"
        return f"The record type is not set up for sheet mapping.\n({msg})"

    if code == ROW_COERCION_FAILED:
        row   = details.get("row", "")
        field = details.get("field", "")
        where = f" in row {row}" if row else ""
        what  = f" for '{field}'" if field else ""
        return f"A value{where}{what} has the wrong type and the row was skipped.\n({msg})"

    if code == SHEET_NOT_FOUND:
        return f"Sheet not found in the workbook. Check that the sheet name is correct.\n({msg})"

    if code == INVALID_ARGUMENT:
        return f"Invalid value passed to the sheet.\n({msg})"

    if code == BAD_SPEC:
        if "column" in msg.lower():
            return f"Invalid column reference. Use letters like A, B or AA.\n({msg})"
        return f"Invalid setting — please check your configuration.\n({msg})"

    # Fallback: clean up the raw message, never show raw tracebacks
    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
