"""Registration-time schema for target records.

A record type is described once by :func:`schema_of`: an ordered tuple of
:class:`FieldDescriptor` in declaration order, each carrying its kind,
width, parsed :class:`~envbind.domain.options.BindingRule` and a setter.
Nested dataclass fields hold the nested :class:`RecordSchema`.

Building the schema classifies every field and parses every annotation in
the whole record tree, so type and option errors surface before any field
of a target is touched.

INVARIANT: while a record type stays in the schema cache, its schema is
built only once.
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from envbind.domain.coercion import ZERO_VALUES
from envbind.domain.errors import (
    InvalidTargetError,
    MalformedOptionError,
    UnsupportedFieldTypeError,
)
from envbind.domain.options import BindingRule, parse_options
from envbind.domain.types import (
    DEFAULT_FLOAT_BITS,
    DEFAULT_INT_BITS,
    FLOAT_WIDTHS,
    INT_WIDTHS,
    FieldKind,
    Width,
    type_label,
)

ENV_METADATA_KEY = "env"

# Record types whose schemas stay cached; older ones are evicted and rebuilt on use.
SCHEMA_CACHE_SIZE = 256


def env(
    options: str = "",
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field bound from the environment.

    Thin wrapper over :func:`dataclasses.field` storing *options* in the
    field metadata::

        @dataclass
        class AppConfig:
            host: str = env("name=HOST,required")
            port: int = env("name=PORT,default=8080", default=0)
    """
    metadata = {**(kwargs.pop("metadata", None) or {}), ENV_METADATA_KEY: options}
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata, **kwargs
    )


@dataclass(frozen=True)
class FieldDescriptor:
    """One bindable field of a record type."""

    name: str
    kind: FieldKind
    annotation: str = ""
    rule: BindingRule | None = None
    bits: int | None = None
    record: RecordSchema | None = None
    init: bool = True

    @property
    def label(self) -> str:
        if self.record is not None:
            return self.record.name
        return type_label(self.kind, self.bits)

    def assign(self, target: Any, value: Any) -> None:
        """Overwrite this field on *target*."""
        setattr(target, self.name, value)

    def zero(self) -> Any:
        """Zero value for this field; a fresh zero instance for nested records."""
        if self.record is not None:
            return self.record.zero()
        return ZERO_VALUES[self.kind]


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field descriptors of a dataclass record type."""

    record_type: type
    fields: tuple[FieldDescriptor, ...]

    @property
    def name(self) -> str:
        return self.record_type.__name__

    def zero(self) -> Any:
        """Construct an instance with every field set to its zero value."""
        instance = self.record_type(**{f.name: f.zero() for f in self.fields if f.init})
        for descriptor in self.fields:
            if not descriptor.init:
                descriptor.assign(instance, descriptor.zero())
        return instance

    def leaves(self, prefix: str | None = None) -> Iterator[tuple[str, FieldDescriptor]]:
        """Yield ``(dotted_path, descriptor)`` for every leaf, depth-first."""
        base = prefix or self.name
        for descriptor in self.fields:
            path = f"{base}.{descriptor.name}"
            if descriptor.record is not None:
                yield from descriptor.record.leaves(path)
            else:
                yield path, descriptor


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def is_frozen(record_type: type) -> bool:
    return bool(record_type.__dataclass_params__.frozen)  # type: ignore[attr-defined]


def _type_name(hint: Any) -> str:
    if isinstance(hint, type):
        return hint.__name__
    return repr(hint)


def _classify(hint: Any) -> tuple[FieldKind, int | None, type | None] | None:
    """Map a resolved type hint to ``(kind, bits, nested_type)``, or None if unsupported."""
    width: Width | None = None
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        widths = [extra for extra in extras if isinstance(extra, Width)]
        width = widths[-1] if widths else None
        hint = base

    # bool subclasses int, so it must be checked first
    if hint is bool:
        return (FieldKind.BOOL, None, None) if width is None else None
    if hint is int:
        width = width or Width(DEFAULT_INT_BITS)
        if width.bits not in INT_WIDTHS:
            return None
        kind = FieldKind.INT if width.signed else FieldKind.UINT
        return kind, width.bits, None
    if hint is float:
        width = width or Width(DEFAULT_FLOAT_BITS)
        if width.bits not in FLOAT_WIDTHS or not width.signed:
            return None
        return FieldKind.FLOAT, width.bits, None
    if hint is str:
        return (FieldKind.STR, None, None) if width is None else None
    if is_record_type(hint) and width is None:
        return FieldKind.RECORD, None, hint
    return None


def _build(record_type: type, path: str, active: tuple[type, ...]) -> RecordSchema:
    if record_type in active:
        msg = f"record {record_type.__name__} contains itself"
        raise UnsupportedFieldTypeError(msg, field=path)

    try:
        hints = get_type_hints(record_type, include_extras=True)
    except NameError as exc:
        msg = f"cannot resolve field types of {record_type.__name__}: {exc}"
        raise UnsupportedFieldTypeError(msg, field=path) from exc

    descriptors: list[FieldDescriptor] = []
    for field in dataclasses.fields(record_type):
        field_path = f"{path}.{field.name}"
        hint = hints.get(field.name, field.type)
        classified = _classify(hint)
        if classified is None:
            msg = f"field {field.name} with type {_type_name(hint)} is not allowed"
            raise UnsupportedFieldTypeError(msg, field=field_path)
        kind, bits, nested = classified

        if nested is not None:
            if is_frozen(nested):
                msg = f"field {field.name} is a frozen record {nested.__name__}"
                raise UnsupportedFieldTypeError(msg, field=field_path)
            record = _build(nested, field_path, (*active, record_type))
            descriptors.append(FieldDescriptor(field.name, kind, record=record, init=field.init))
            continue

        annotation = field.metadata.get(ENV_METADATA_KEY, "")
        try:
            rule = parse_options(annotation, kind)
        except MalformedOptionError as exc:
            exc.field = field_path
            raise
        descriptors.append(
            FieldDescriptor(
                field.name,
                kind,
                annotation=annotation,
                rule=rule,
                bits=bits,
                init=field.init,
            )
        )

    return RecordSchema(record_type, tuple(descriptors))


@functools.lru_cache(maxsize=SCHEMA_CACHE_SIZE)
def schema_of(record_type: type) -> RecordSchema:
    """Return the schema for a dataclass record type, from a bounded LRU cache.

    Raises:
        InvalidTargetError: *record_type* is not a dataclass type.
        UnsupportedFieldTypeError: A field's type is outside the allowed set.
        MalformedOptionError: A field's ``env`` annotation is malformed.
    """
    if not is_record_type(record_type):
        msg = f"{_type_name(record_type)} is not a dataclass type"
        raise InvalidTargetError(msg)
    return _build(record_type, record_type.__name__, ())
