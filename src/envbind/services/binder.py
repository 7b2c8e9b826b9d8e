"""Schema walker: binds environment variables onto dataclass records.

Fields are bound in declaration order. Leaf fields are resolved and
coerced through their :class:`~envbind.domain.options.BindingRule`; nested
record fields receive a fresh zero instance that is bound recursively and
assigned only after it binds completely.

INVARIANT: the first failure aborts the whole call. Fields bound before
the failure keep their new values; later fields are untouched.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from typing import Any, TypeVar

from envbind.domain.coercion import coerce, resolve_raw
from envbind.domain.errors import InvalidTargetError
from envbind.domain.schema import RecordSchema, is_frozen, is_record_type, schema_of

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _bind_record(
    target: Any, schema: RecordSchema, environ: Mapping[str, str], path: str
) -> None:
    for descriptor in schema.fields:
        field_path = f"{path}.{descriptor.name}"

        if descriptor.record is not None:
            inner = descriptor.record.zero()
            _bind_record(inner, descriptor.record, environ, field_path)
            descriptor.assign(target, inner)
            continue

        rule = descriptor.rule
        assert rule is not None
        raw, source = resolve_raw(rule, environ, field=field_path)
        value = coerce(descriptor.kind, raw, rule, bits=descriptor.bits, field=field_path)
        descriptor.assign(target, value)
        logger.debug(
            "Bound %s from %s (env=%s)",
            field_path,
            source,
            rule.name or "-",
            extra={"field_path": field_path, "env_name": rule.name, "source": source},
        )


def bind(target: T, environ: Mapping[str, str] | None = None) -> T:
    """Populate a dataclass instance in place from environment variables.

    Args:
        target: A mutable dataclass instance.
        environ: Variable lookup; defaults to ``os.environ``.

    Returns:
        *target*, for chaining.

    Raises:
        InvalidTargetError: *target* is a class, not a dataclass instance,
            or a frozen dataclass.
        BindError: The first schema, option or value failure encountered.
    """
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        msg = f"target must be a dataclass instance, got {type(target).__name__}"
        raise InvalidTargetError(msg)
    record_type = type(target)
    if is_frozen(record_type):
        msg = f"target {record_type.__name__} is frozen and cannot be bound in place"
        raise InvalidTargetError(msg)

    schema = schema_of(record_type)
    _bind_record(target, schema, os.environ if environ is None else environ, schema.name)
    logger.debug("Bound record %s", schema.name)
    return target


def load(record_type: type[T], environ: Mapping[str, str] | None = None) -> T:
    """Create a zero-valued instance of *record_type* and bind it.

    Raises:
        InvalidTargetError: *record_type* is not a mutable dataclass type.
        BindError: The first schema, option or value failure encountered.
    """
    if not is_record_type(record_type):
        msg = f"{record_type!r} is not a dataclass type"
        raise InvalidTargetError(msg)
    if is_frozen(record_type):
        msg = f"{record_type.__name__} is frozen and cannot be bound in place"
        raise InvalidTargetError(msg)
    return bind(schema_of(record_type).zero(), environ)
