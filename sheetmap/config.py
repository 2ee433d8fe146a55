from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import AppError, BAD_SPEC
from .models import DIRECTIONS, HORIZONTAL


ENV_OPTIONS_PATH = "SHEETMAP_OPTIONS_PATH"


@dataclass
class SheetOptions:
    """
    Per-workbook behaviour knobs shared by every Sheet it creates.
    """
    direction: str = HORIZONTAL         # initial fill direction of new sheets
    column_width: float = 10.0          # characters per title-cell width unit
    title_bold: bool = True
    min_header_matches: int = 1         # used when a schema does not set its own
    skip_blank_rows: bool = True

    def validate(self) -> "SheetOptions":
        if self.direction not in DIRECTIONS:
            raise AppError(BAD_SPEC, f"Bad direction: {self.direction!r}")
        if isinstance(self.column_width, bool) or not isinstance(self.column_width, (int, float)) \
                or self.column_width <= 0:
            raise AppError(BAD_SPEC, f"column_width must be a positive number: {self.column_width!r}")
        if not isinstance(self.title_bold, bool):
            raise AppError(BAD_SPEC, f"title_bold must be true/false: {self.title_bold!r}")
        if isinstance(self.min_header_matches, bool) or not isinstance(self.min_header_matches, int) \
                or self.min_header_matches < 1:
            raise AppError(BAD_SPEC, f"min_header_matches must be >= 1: {self.min_header_matches!r}")
        if not isinstance(self.skip_blank_rows, bool):
            raise AppError(BAD_SPEC, f"skip_blank_rows must be true/false: {self.skip_blank_rows!r}")
        return self

    # ---------- Serialization ----------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SheetOptions":
        if not isinstance(data, dict):
            raise AppError(BAD_SPEC, "Options file must hold a JSON object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise AppError(BAD_SPEC, f"Unknown option(s): {', '.join(unknown)}", {"unknown": unknown})
        return cls(**data).validate()


def resolve_options_path(project_root: Optional[str] = None) -> str:
    """Resolve the options file path.

    Priority:
    1) SHEETMAP_OPTIONS_PATH env var (absolute or relative)
    2) User-home scoped default: ~/.sheetmap/options.json
    """
    env = os.getenv(ENV_OPTIONS_PATH)
    if env:
        p = Path(env)
        if not p.is_absolute():
            base = Path(project_root) if project_root else Path.cwd()
            p = base / p
        return str(p)

    base = Path.home() / ".sheetmap"
    return str(base / "options.json")


def atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(text, encoding=encoding)
    os.replace(str(tmp), str(p))


def save_options(options: SheetOptions, path: Optional[str] = None) -> str:
    dest = path or resolve_options_path()
    atomic_write_text(dest, json.dumps(options.validate().to_dict(), indent=2))
    return dest


def load_options(path: Optional[str] = None) -> SheetOptions:
    """Options from the JSON file, or defaults when the file does not exist."""
    p = Path(path or resolve_options_path())
    if not p.exists():
        return SheetOptions()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise AppError(BAD_SPEC, f"Options file is not valid JSON: {e}", {"path": str(p)})
    return SheetOptions.from_dict(data)
