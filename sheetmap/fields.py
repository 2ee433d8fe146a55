"""
sheetmap/fields.py — Header-field descriptors and per-type record schemas.

A record type is mapped to sheet columns by a RecordSchema: an ordered tuple
of HeaderField entries, each pairing one attribute with the header text that
titles its column. Schemas come from two places:

  1. Dataclass fields marked with header():

        @dataclass
        class Person:
            name: str = header(1, "Name")
            age: int = header(2, "Age", aliases=("Years",))
            note: str = ""          # not marked → never read or written

  2. Explicit registration for any class:

        register_schema(Person, [
            HeaderField.build("name", "Name", order=1),
            HeaderField.build("age", "Age", order=2, converter=int),
        ])

Fields are sorted by order, ties broken by declaration order. Every schema
is validated when it is built: two fields resolving to the same effective
header (name or alias) raise AppError(CONFIGURATION_ERROR).
"""
from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from operator import attrgetter
from typing import (
    Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type,
    get_type_hints,
)

from .coerce import converter_for
from .errors import AppError, CONFIGURATION_ERROR

HEADER_KEY = "sheetmap.header"

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]
Converter = Callable[[Any], Any]
Factory = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class HeaderSpec:
    """What header() stores in dataclass field metadata."""
    order: int
    name: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    converter: Optional[Converter] = None


def header(
    order: int,
    name: Optional[str] = None,
    *,
    aliases: Iterable[str] = (),
    converter: Optional[Converter] = None,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """
    Mark a dataclass field for header mapping.

    order is the sort priority (ascending). name defaults to the attribute
    name. aliases are extra header texts accepted when reading.
    """
    spec = HeaderSpec(order=order, name=name, aliases=tuple(aliases), converter=converter)
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={HEADER_KEY: spec},
    )


@dataclass(frozen=True)
class HeaderField:
    """
    One mapped field of one record type.
    """
    record_type: type
    attr: str
    header: str
    order: int
    index: int                          # declaration position
    aliases: Tuple[str, ...] = ()
    getter: Getter = dataclasses.field(default=None, compare=False, repr=False)
    setter: Setter = dataclasses.field(default=None, compare=False, repr=False)
    converter: Converter = dataclasses.field(default=None, compare=False, repr=False)

    @classmethod
    def build(
        cls,
        attr: str,
        header: Optional[str] = None,
        *,
        order: int,
        aliases: Iterable[str] = (),
        getter: Optional[Getter] = None,
        setter: Optional[Setter] = None,
        converter: Optional[Converter] = None,
    ) -> "HeaderField":
        """
        Declare a field for register_schema(). record_type and index are
        filled in at registration.
        """
        return cls(
            record_type=object,
            attr=attr,
            header=header if header is not None else attr,
            order=order,
            index=-1,
            aliases=tuple(aliases),
            getter=getter,
            setter=setter,
            converter=converter,
        )

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.order, self.index)

    @property
    def names(self) -> Tuple[str, ...]:
        """Every header text this field answers to, primary name first."""
        return (self.header,) + tuple(a for a in self.aliases if a != self.header)

    def matches(self, text: str) -> bool:
        return text in self.names

    def read(self, record: Any) -> Any:
        return self.getter(record)


@dataclass(frozen=True)
class RecordSchema:
    record_type: type
    fields: Tuple[HeaderField, ...]
    factory: Optional[Factory] = dataclasses.field(default=None, compare=False)
    min_header_matches: Optional[int] = None

    @property
    def headers(self) -> List[str]:
        return [f.header for f in self.fields]

    @property
    def type_name(self) -> str:
        return getattr(self.record_type, "__qualname__", repr(self.record_type))

    def field_for(self, text: str) -> Optional[HeaderField]:
        """First field, in schema order, whose header or alias equals text."""
        for f in self.fields:
            if f.matches(text):
                return f
        return None


# ── Building and validation ───────────────────────────────────────────────────

def _check_duplicates(record_type: type, fields: Sequence[HeaderField]) -> None:
    seen: Dict[str, str] = {}
    for f in sorted(fields, key=lambda x: x.attr):
        for text in f.names:
            owner = seen.get(text)
            if owner is not None and owner != f.attr:
                first, second = sorted((owner, f.attr))
                raise AppError(
                    CONFIGURATION_ERROR,
                    f"Duplicate header {text!r} in {getattr(record_type, '__qualname__', record_type)}",
                    {"header": text, "fields": [first, second]},
                )
            seen[text] = f.attr


def make_schema(
    record_type: type,
    fields: Sequence[HeaderField],
    factory: Optional[Factory] = None,
    min_header_matches: Optional[int] = None,
) -> RecordSchema:
    """
    Sort and validate fields into a RecordSchema.
    """
    name = getattr(record_type, "__qualname__", repr(record_type))
    if not fields:
        raise AppError(CONFIGURATION_ERROR, f"{name} has no header-mapped fields",
                       {"record_type": name})
    for f in fields:
        if not isinstance(f.header, str) or f.header.strip() == "":
            raise AppError(CONFIGURATION_ERROR, f"Blank header for field {f.attr!r} in {name}",
                           {"record_type": name, "field": f.attr})
        if isinstance(f.order, bool) or not isinstance(f.order, int):
            raise AppError(CONFIGURATION_ERROR,
                           f"Field {f.attr!r} in {name} needs an integer order (got {f.order!r})",
                           {"record_type": name, "field": f.attr})
    if min_header_matches is not None and min_header_matches < 1:
        raise AppError(CONFIGURATION_ERROR, f"min_header_matches must be >= 1 for {name}",
                       {"record_type": name})

    _check_duplicates(record_type, fields)
    ordered = tuple(sorted(fields, key=attrgetter("sort_key")))
    return RecordSchema(
        record_type=record_type,
        fields=ordered,
        factory=factory,
        min_header_matches=min_header_matches,
    )


def _default_setter(attr: str) -> Setter:
    def _set(obj: Any, value: Any) -> None:
        setattr(obj, attr, value)
    return _set


def _type_hints(record_type: type) -> Mapping[str, Any]:
    """
    Resolved annotations of record_type. When the class as a whole cannot be
    resolved, each annotation is tried on its own; ones that still fail stay
    as their source text.
    """
    try:
        return get_type_hints(record_type)
    except Exception:
        pass
    module = sys.modules.get(getattr(record_type, "__module__", ""))
    globalns = dict(getattr(module, "__dict__", {}))
    localns = dict(vars(record_type))
    hints: Dict[str, Any] = {}
    for klass in reversed(getattr(record_type, "__mro__", (record_type,))):
        for name, annotation in vars(klass).get("__annotations__", {}).items():
            if isinstance(annotation, str):
                try:
                    annotation = eval(annotation, globalns, localns)
                except Exception:
                    pass
            hints[name] = annotation
    return hints


def _converter_for_field(record_type: type, attr: str, hints: Mapping[str, Any]) -> Converter:
    annotation = hints.get(attr, Any)
    if isinstance(annotation, str):
        name = getattr(record_type, "__qualname__", repr(record_type))
        raise AppError(
            CONFIGURATION_ERROR,
            f"Cannot resolve type annotation {annotation!r} of {name}.{attr}; "
            "import the type at module level or give the field a converter",
            {"record_type": name, "field": attr, "annotation": annotation},
        )
    return converter_for(annotation)


def derive_schema(record_type: type) -> RecordSchema:
    """
    Build a schema from dataclass fields marked with header().
    Idempotent: calling it twice yields equal schemas.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        name = getattr(record_type, "__qualname__", repr(record_type))
        raise AppError(
            CONFIGURATION_ERROR,
            f"{name} is not a dataclass and has no registered schema",
            {"record_type": name},
        )

    hints = _type_hints(record_type)
    fields: List[HeaderField] = []
    for index, dc_field in enumerate(dataclasses.fields(record_type)):
        spec = dc_field.metadata.get(HEADER_KEY)
        if spec is None:
            continue
        fields.append(HeaderField(
            record_type=record_type,
            attr=dc_field.name,
            header=spec.name if spec.name is not None else dc_field.name,
            order=spec.order,
            index=index,
            aliases=spec.aliases,
            getter=attrgetter(dc_field.name),
            setter=_default_setter(dc_field.name),
            converter=spec.converter or _converter_for_field(record_type, dc_field.name, hints),
        ))
    return make_schema(record_type, fields)


# ── Registry ──────────────────────────────────────────────────────────────────

_REGISTRY: Dict[type, RecordSchema] = {}


def register_schema(
    record_type: type,
    fields: Sequence[HeaderField],
    factory: Optional[Factory] = None,
    min_header_matches: Optional[int] = None,
) -> RecordSchema:
    """
    Register an explicit schema for record_type, replacing any earlier one.

    Fields without a getter read the attribute of the same name; fields
    without a setter assign it; fields without a converter use the type
    annotation on record_type when there is one.
    """
    hints = _type_hints(record_type)
    bound = [
        dataclasses.replace(
            f,
            record_type=record_type,
            index=i,
            getter=f.getter or attrgetter(f.attr),
            setter=f.setter or _default_setter(f.attr),
            converter=f.converter or _converter_for_field(record_type, f.attr, hints),
        )
        for i, f in enumerate(fields)
    ]
    schema = make_schema(record_type, bound, factory=factory, min_header_matches=min_header_matches)
    _REGISTRY[record_type] = schema
    return schema


def unregister_schema(record_type: type) -> None:
    _REGISTRY.pop(record_type, None)


def schema_for(record_type: Type[Any]) -> RecordSchema:
    """Registered schema for record_type, else one derived from header() marks."""
    schema = _REGISTRY.get(record_type)
    if schema is None:
        schema = derive_schema(record_type)
        _REGISTRY[record_type] = schema
    return schema
