"""
sheetmap/coerce.py — Value conversion between cells and record fields.

Two steps on the read path:

  to_generic(cell_value)   openpyxl value → number, bool, text, or a
                           date/time value passed through as is.
                           Only an empty cell (None) becomes None; text,
                           including "" and whitespace, is kept as written.
  converter_for(type)(v)   generic value → the field's annotated type.

Converters raise ValueError or TypeError when a value cannot be converted;
the reader turns that into a row-level error.

An empty cell leaves the field empty rather than failing the row: None for
every type except plain str, which reads back as "". Non-text converters
also read blank text as None.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union, get_args, get_origin

Converter = Callable[[Any], Any]

_TRUE  = frozenset({"true", "yes", "y", "1", "t"})
_FALSE = frozenset({"false", "no", "n", "0", "f"})


def is_blank(value: Any) -> bool:
    """None or whitespace-only text. Used for headers and non-text fields."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def to_generic(value: Any) -> Any:
    """
    Reduce a stored cell value to number, bool, text, or date/time.
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float, str, dt.date, dt.time, dt.timedelta)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    return str(value)


# ── Scalar converters ─────────────────────────────────────────────────────────

def to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def to_text(value: Any) -> str:
    """to_str for plain str fields: an empty cell reads back as ""."""
    text = to_str(value)
    return "" if text is None else text


def to_int(value: Any) -> Optional[int]:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not a whole number")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            as_float = float(text)
            if not as_float.is_integer():
                raise ValueError(f"{value!r} is not a whole number")
            return int(as_float)
    raise TypeError(f"Cannot convert {type(value).__name__} to int")


def to_float(value: Any) -> Optional[float]:
    if is_blank(value):
        return None
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to float")


def to_decimal(value: Any) -> Optional[Decimal]:
    if is_blank(value):
        return None
    if isinstance(value, (dt.date, dt.time)):
        raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"{value!r} is not a decimal number")


def to_bool(value: Any) -> Optional[bool]:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{value!r} is not a boolean")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"{value!r} is not a boolean")
    raise TypeError(f"Cannot convert {type(value).__name__} to bool")


def to_datetime(value: Any) -> Optional[dt.datetime]:
    if is_blank(value):
        return None
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if isinstance(value, str):
        return dt.datetime.fromisoformat(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to datetime")


def to_date(value: Any) -> Optional[dt.date]:
    if is_blank(value):
        return None
    # datetime is a date subclass; check it first.
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            return dt.datetime.fromisoformat(text).date()
    raise TypeError(f"Cannot convert {type(value).__name__} to date")


def to_time(value: Any) -> Optional[dt.time]:
    if is_blank(value):
        return None
    if isinstance(value, dt.datetime):
        return value.time()
    if isinstance(value, dt.time):
        return value
    if isinstance(value, str):
        return dt.time.fromisoformat(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to time")


def passthrough(value: Any) -> Any:
    return value


_BY_TYPE = {
    str: to_text,
    int: to_int,
    float: to_float,
    bool: to_bool,
    Decimal: to_decimal,
    dt.datetime: to_datetime,
    dt.date: to_date,
    dt.time: to_time,
}


def converter_for(annotation: Any) -> Converter:
    """
    Pick a converter for a field annotation. Optional[X] uses X's converter;
    anything unrecognised passes values through untouched.
    """
    origin = get_origin(annotation)
    if origin is Union or _is_union_type(origin):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            if members[0] is str:
                return to_str
            return converter_for(members[0])
        return passthrough
    return _BY_TYPE.get(annotation, passthrough)


def _is_union_type(origin: Any) -> bool:
    # int | None (PEP 604) reports types.UnionType as its origin.
    return getattr(origin, "__name__", "") == "UnionType"
