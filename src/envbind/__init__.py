"""envbind: bind environment variables onto typed dataclass records."""

from envbind.domain.errors import (
    BindError,
    InvalidBooleanError,
    InvalidNumberError,
    InvalidTargetError,
    MalformedOptionError,
    MissingRequiredError,
    OutOfRangeError,
    UnsupportedFieldTypeError,
)
from envbind.domain.options import BindingRule, parse_options
from envbind.domain.schema import env, schema_of
from envbind.domain.types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    Width,
)
from envbind.services.binder import bind, load

__version__ = "0.1.0"

__all__ = [
    "BindError",
    "BindingRule",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidBooleanError",
    "InvalidNumberError",
    "InvalidTargetError",
    "MalformedOptionError",
    "MissingRequiredError",
    "OutOfRangeError",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedFieldTypeError",
    "Width",
    "__version__",
    "bind",
    "env",
    "load",
    "parse_options",
    "schema_of",
]
