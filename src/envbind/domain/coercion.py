"""Value resolution and coercion for leaf fields.

Resolution: the variable named by the rule is read from the environment;
an absent variable and an empty string are both "not provided". A required
field then fails; an optional one falls back to the rule's default. An
empty result yields the kind's zero value without parsing.

Coercion is strict: integers are base 10 with no whitespace or
underscores, unsigned integers take no sign, and values must fit the
declared width. Bounds are checked after parsing, before assignment.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Mapping
from typing import Any

from envbind.domain.errors import (
    InvalidBooleanError,
    InvalidNumberError,
    MissingRequiredError,
    OutOfRangeError,
)
from envbind.domain.options import BindingRule
from envbind.domain.types import (
    DEFAULT_FLOAT_BITS,
    DEFAULT_INT_BITS,
    FieldKind,
    int_range,
    is_float_literal,
)

_SIGNED_RE = re.compile(r"^[+-]?[0-9]+$")
_UNSIGNED_RE = re.compile(r"^[0-9]+$")

TRUE_LITERALS: frozenset[str] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS: frozenset[str] = frozenset({"0", "f", "F", "FALSE", "false", "False"})

ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.INT: 0,
    FieldKind.UINT: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.STR: "",
    FieldKind.BOOL: False,
}


def resolve_raw(
    rule: BindingRule, environ: Mapping[str, str], *, field: str | None = None
) -> tuple[str, str]:
    """Return ``(raw_value, source)`` where source is ``env``, ``default`` or ``zero``.

    Raises:
        MissingRequiredError: The rule is required and the variable is unset or empty.
    """
    value = environ.get(rule.name, "") if rule.name else ""
    if value:
        return value, "env"
    if rule.required:
        msg = f"env {rule.name or '<unnamed>'} is required"
        raise MissingRequiredError(msg, field=field, env=rule.name or None)
    if rule.default:
        return rule.default, "default"
    return "", "zero"


def _parse_int(raw: str, bits: int, *, signed: bool, env: str | None, field: str | None) -> int:
    pattern = _SIGNED_RE if signed else _UNSIGNED_RE
    if not pattern.match(raw):
        msg = f"env {env or '<unnamed>'} must be a number, got {raw!r}"
        raise InvalidNumberError(msg, field=field, env=env)
    value = int(raw)
    low, high = int_range(bits, signed=signed)
    if not low <= value <= high:
        kind = "int" if signed else "uint"
        msg = f"env {env or '<unnamed>'} value {raw} does not fit in {kind}{bits}"
        raise InvalidNumberError(msg, field=field, env=env)
    return value


def _parse_float(raw: str, bits: int, *, env: str | None, field: str | None) -> float:
    if not is_float_literal(raw):
        msg = f"env {env or '<unnamed>'} must be a number, got {raw!r}"
        raise InvalidNumberError(msg, field=field, env=env)
    value = float(raw)
    if bits == 32:
        # pack rounds to nearest and only overflows when the result is infinite
        try:
            packed = struct.pack("<f", value)
        except OverflowError as exc:
            msg = f"env {env or '<unnamed>'} value {raw} does not fit in float32"
            raise InvalidNumberError(msg, field=field, env=env) from exc
        value = struct.unpack("<f", packed)[0]
    return value


def _parse_bool(raw: str, *, env: str | None, field: str | None) -> bool:
    if raw in TRUE_LITERALS:
        return True
    if raw in FALSE_LITERALS:
        return False
    msg = f"env {env or '<unnamed>'} must be a boolean, got {raw!r}"
    raise InvalidBooleanError(msg, field=field, env=env)


def check_bounds(value: float, rule: BindingRule, *, field: str | None = None) -> None:
    """Raise :class:`OutOfRangeError` if *value* violates the rule's bounds."""
    env = rule.name or None
    if rule.has_bounds and math.isnan(value):
        msg = f"env {env or '<unnamed>'} value nan is outside the declared bounds"
        raise OutOfRangeError(msg, field=field, env=env)
    if rule.min is not None and value < rule.min:
        msg = f"env {env or '<unnamed>'} value {value} is less than min {rule.min:g}"
        raise OutOfRangeError(msg, field=field, env=env)
    if rule.max is not None and value > rule.max:
        msg = f"env {env or '<unnamed>'} value {value} is greater than max {rule.max:g}"
        raise OutOfRangeError(msg, field=field, env=env)


def coerce(
    kind: FieldKind,
    raw: str,
    rule: BindingRule,
    *,
    bits: int | None = None,
    field: str | None = None,
) -> Any:
    """Convert *raw* to a value of *kind* and enforce the rule's bounds.

    Args:
        kind: Leaf kind of the target field.
        raw: Resolved text value (see :func:`resolve_raw`).
        rule: The field's binding rule.
        bits: Declared width for numeric kinds; defaults to 64.
        field: Dotted field path for error context.

    Raises:
        InvalidNumberError: A numeric value does not parse or does not fit.
        InvalidBooleanError: A boolean value is not a recognised literal.
        OutOfRangeError: A numeric value violates ``min``/``max``.
    """
    if kind is FieldKind.RECORD:
        msg = "nested records are bound by the walker, not coerced"
        raise TypeError(msg)

    env = rule.name or None
    if raw == "":
        value = ZERO_VALUES[kind]
    elif kind is FieldKind.INT:
        value = _parse_int(raw, bits or DEFAULT_INT_BITS, signed=True, env=env, field=field)
    elif kind is FieldKind.UINT:
        value = _parse_int(raw, bits or DEFAULT_INT_BITS, signed=False, env=env, field=field)
    elif kind is FieldKind.FLOAT:
        value = _parse_float(raw, bits or DEFAULT_FLOAT_BITS, env=env, field=field)
    elif kind is FieldKind.BOOL:
        value = _parse_bool(raw, env=env, field=field)
    else:
        value = raw

    if kind.is_numeric and rule.has_bounds:
        check_bounds(value, rule, field=field)
    return value
