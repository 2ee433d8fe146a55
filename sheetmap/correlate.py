"""
sheetmap/correlate.py — Field ↔ column correlation in both directions.

Write side:
  header_names(schema)              -> header texts in schema order
  record_values(record, schema)     -> one value per field, same order.
                                       A getter that raises yields "" and a
                                       FieldError; the row always completes.

Read side:
  correlate_columns(header_map, schema)
      -> {column index: HeaderField}. Each column is matched against the
         schema fields in order; first match wins. Columns with no match are
         dropped without error, so sheets may carry extra informational
         columns. When two columns carry the same header the leftmost wins.
  row_to_mapping(row_values, column_map)
      -> {attribute: generic value} for correlated columns only.
  build_record(schema, mapping, row)
      -> typed record, or AppError(ROW_COERCION_FAILED).
"""
from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .coerce import to_generic
from .errors import AppError, ROW_COERCION_FAILED
from .fields import HeaderField, RecordSchema
from .log import get_logger
from .models import FieldError

logger = get_logger("correlate")

HeaderColumnMap = Dict[int, str]
ColumnFieldMap = Dict[int, HeaderField]

EMPTY_VALUE = ""


# ── Write direction ───────────────────────────────────────────────────────────

def header_names(schema: RecordSchema) -> List[str]:
    return schema.headers


def record_values(
    record: Any,
    schema: RecordSchema,
    row: int = 0,
) -> Tuple[List[Any], List[FieldError]]:
    values: List[Any] = []
    errors: List[FieldError] = []
    for f in schema.fields:
        try:
            value = f.read(record)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "Field read failed; writing empty value",
                extra={"record_type": schema.type_name, "field": f.attr, "row": row, "error": str(exc)},
            )
            errors.append(FieldError(row=row, field=f.attr, message=f"{type(exc).__name__}: {exc}"))
            value = EMPTY_VALUE
        values.append(value)
    return values, errors


# ── Read direction ────────────────────────────────────────────────────────────

def correlate_columns(header_map: HeaderColumnMap, schema: RecordSchema) -> ColumnFieldMap:
    column_map: ColumnFieldMap = {}
    claimed: Dict[str, int] = {}
    for col in sorted(header_map):
        text = header_map[col]
        f = schema.field_for(text)
        if f is None:
            logger.debug("Ignoring unmapped column", extra={"column": col, "header": text})
            continue
        if f.attr in claimed:
            logger.debug(
                "Ignoring repeated column for field",
                extra={"column": col, "header": text, "field": f.attr, "first_column": claimed[f.attr]},
            )
            continue
        claimed[f.attr] = col
        column_map[col] = f
    return column_map


def row_to_mapping(row_values: Sequence[Any], column_map: ColumnFieldMap) -> Dict[str, Any]:
    """
    Only correlated columns contribute; a row shorter than a correlated
    column reads as an empty cell there.
    """
    mapping: Dict[str, Any] = {}
    for col, f in column_map.items():
        raw = row_values[col] if col < len(row_values) else None
        mapping[f.attr] = to_generic(raw)
    return mapping


def build_record(
    schema: RecordSchema,
    mapping: Dict[str, Any],
    row: Optional[int] = None,
    header_by_attr: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Convert each mapped value with its field's converter and construct the
    record. Fields absent from mapping keep their defaults (dataclasses) or
    are left untouched (setter-built records).
    """
    converted: Dict[str, Any] = {}
    for f in schema.fields:
        if f.attr not in mapping:
            continue
        value = mapping[f.attr]
        try:
            converted[f.attr] = f.converter(value)
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise AppError(
                ROW_COERCION_FAILED,
                f"Cannot convert {value!r} for field {f.attr!r}: {exc}",
                {
                    "row": row,
                    "field": f.attr,
                    "header": (header_by_attr or {}).get(f.attr, f.header),
                    "value": value,
                },
            )

    try:
        return _construct(schema, converted)
    except AppError:
        raise
    except (TypeError, ValueError) as exc:
        raise AppError(
            ROW_COERCION_FAILED,
            f"Cannot build {schema.type_name}: {exc}",
            {"row": row},
        )


def _construct(schema: RecordSchema, values: Dict[str, Any]) -> Any:
    record_type = schema.record_type
    if schema.factory is not None:
        return schema.factory(values)

    if dataclasses.is_dataclass(record_type):
        kwargs = dict(values)
        for dc_field in dataclasses.fields(record_type):
            if not dc_field.init or dc_field.name in kwargs:
                continue
            if (dc_field.default is dataclasses.MISSING
                    and dc_field.default_factory is dataclasses.MISSING):
                # Required field with no matching column.
                kwargs[dc_field.name] = None
        init_names = {f.name for f in dataclasses.fields(record_type) if f.init}
        record = record_type(**{k: v for k, v in kwargs.items() if k in init_names})
        for f in schema.fields:
            if f.attr in values and f.attr not in init_names:
                f.setter(record, values[f.attr])
        return record

    record = record_type()
    for f in schema.fields:
        if f.attr in values:
            f.setter(record, values[f.attr])
    return record
