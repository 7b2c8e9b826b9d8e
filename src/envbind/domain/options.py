"""Option parser for ``env`` field annotations.

Grammar::

    annotation := option (',' option)*
    option     := 'required' | key '=' value
    key        := 'name' | 'default' | 'min' | 'max'

Whitespace around each option is ignored and empty options are skipped, so
the empty annotation is legal and yields an unnamed, optional rule. The key
ends at the first ``=``; everything after it is the value.

Unknown and repeated keys are rejected. ``min``/``max`` are only valid on
numeric fields and use the same floating-point literal grammar as values
(no whitespace inside the value, no underscores, no NaN).
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from envbind.domain.errors import MalformedOptionError
from envbind.domain.types import FieldKind, is_float_literal

# Whether each option key takes a ``=value`` part.
OPTION_TAKES_VALUE: dict[str, bool] = {
    "required": False,
    "name": True,
    "default": True,
    "min": True,
    "max": True,
}


class BindingRule(BaseModel):
    """Parsed options governing how one leaf field is resolved and coerced.

    ``min``/``max`` are ``None`` when not given, so an explicit ``min=0`` is
    a real bound.
    """

    model_config = {"frozen": True}

    name: str = ""
    required: bool = False
    default: str = ""
    min: float | None = None
    max: float | None = None

    @property
    def has_bounds(self) -> bool:
        return self.min is not None or self.max is not None


def _parse_bound(key: str, value: str) -> float:
    if not is_float_literal(value) or math.isnan(float(value)):
        msg = f"option {key} must be a number, got {value!r}"
        raise MalformedOptionError(msg)
    return float(value)


def parse_options(options: str, kind: FieldKind) -> BindingRule:
    """Parse an annotation string into a :class:`BindingRule`.

    Args:
        options: Raw annotation, e.g. ``"name=PORT,default=8080"``.
        kind: Declared kind of the field the annotation belongs to.

    Raises:
        MalformedOptionError: The annotation violates the grammar, a bound is
            given for a non-numeric field, or a bound is not a number.
    """
    values: dict[str, str] = {}
    seen: set[str] = set()

    for fragment in options.split(","):
        fragment = fragment.strip()
        if not fragment:
            continue

        key, sep, value = fragment.partition("=")
        if key not in OPTION_TAKES_VALUE:
            msg = f"unknown option {key!r}"
            raise MalformedOptionError(msg)
        if key in seen:
            msg = f"option {key} given more than once"
            raise MalformedOptionError(msg)
        seen.add(key)

        if OPTION_TAKES_VALUE[key]:
            if not sep:
                msg = f"option {key} must have a parameter"
                raise MalformedOptionError(msg)
        elif sep:
            msg = f"option {key} does not take a parameter"
            raise MalformedOptionError(msg)

        if key == "name" and value == "":
            msg = "option name must have a parameter"
            raise MalformedOptionError(msg)

        values[key] = value

    name = values.get("name", "")
    bounds: dict[str, float] = {}
    for key in ("min", "max"):
        if key not in values:
            continue
        if not kind.is_numeric:
            msg = f"option {key} is only allowed on numeric fields, not {kind.value}"
            raise MalformedOptionError(msg, env=name or None)
        bounds[key] = _parse_bound(key, values[key])

    if "min" in bounds and "max" in bounds and bounds["min"] > bounds["max"]:
        msg = f"option min ({bounds['min']:g}) is greater than max ({bounds['max']:g})"
        raise MalformedOptionError(msg, env=name or None)

    return BindingRule(
        name=name,
        required="required" in seen,
        default=values.get("default", ""),
        min=bounds.get("min"),
        max=bounds.get("max"),
    )
