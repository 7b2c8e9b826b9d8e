"""Typed binding errors.

Every failure raised by the engine is a :class:`BindError` subclass with a
stable ``code``. Errors from nested records propagate unchanged, so the
``field`` path always names the leaf that failed.
"""

from __future__ import annotations

from typing import Any, ClassVar


class BindError(Exception):
    """Base class for all binding failures.

    Attributes:
        message: Human-readable description.
        field: Dotted field path (``AppConfig.database.port``), if known.
        env: Environment variable name involved, if any.
    """

    code: ClassVar[str] = "BIND_ERROR"

    def __init__(self, message: str, *, field: str | None = None, env: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.env = env

    def detail(self) -> dict[str, Any]:
        """Structured context for service results and JSON output."""
        detail: dict[str, Any] = {}
        if self.field is not None:
            detail["field"] = self.field
        if self.env:
            detail["env"] = self.env
        return detail


class InvalidTargetError(BindError, TypeError):
    """The target is not a mutable dataclass instance."""

    code = "INVALID_TARGET"


class UnsupportedFieldTypeError(BindError, TypeError):
    """A field's declared type is outside the allowed set."""

    code = "UNSUPPORTED_FIELD_TYPE"


class MalformedOptionError(BindError, ValueError):
    """An ``env`` annotation string violates the option grammar."""

    code = "MALFORMED_OPTION"


class MissingRequiredError(BindError):
    """A ``required`` field has no value in the environment."""

    code = "MISSING_REQUIRED"


class InvalidNumberError(BindError, ValueError):
    code = "INVALID_NUMBER"


class InvalidBooleanError(BindError, ValueError):
    code = "INVALID_BOOLEAN"


class OutOfRangeError(BindError, ValueError):
    """A numeric value violates a declared ``min``/``max`` bound."""

    code = "OUT_OF_RANGE"
