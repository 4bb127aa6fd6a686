"""
Key and value normalization.

Every value that enters the store goes through ``normalize_value``:

- strings are trimmed, then parsed as a base-10 integer, then as a boolean
  literal, and otherwise kept as the trimmed string;
- whole-valued floats are narrowed to ``int``;
- anything else (bool, int, nested mappings, lists, dates) passes through.

Keys are compared in their uppercased form.
"""

import re
from enum import Enum
from typing import Any, Optional

from .errors import ValueTypeError

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_BOOL_TRUE = frozenset({"true", "t", "1"})
_BOOL_FALSE = frozenset({"false", "f", "0"})


class ValueKind(str, Enum):
    """Kind tag of a normalized value."""
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"
    STRING = "string"
    OPAQUE = "opaque"


def normalize_key(key: str) -> str:
    """Uppercase a key. No other transformation is applied."""
    return key.upper()


def parse_int(text: str) -> Optional[int]:
    """Parse a full-string base-10 integer, or return None."""
    if not _INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    return value


def parse_bool(text: str) -> Optional[bool]:
    """
    Parse a boolean literal (1/t/true or 0/f/false, any case), or return None.

    ``normalize_value`` tries integers first, so "1" and "0" only become
    booleans when parsed directly (e.g. default literals of bool fields).
    """
    lowered = text.lower()
    if lowered in _BOOL_TRUE:
        return True
    if lowered in _BOOL_FALSE:
        return False
    return None


def normalize_value(value: Any) -> Any:
    """Canonicalize a raw value. Never raises."""
    if isinstance(value, str):
        text = value.strip()

        as_integer = parse_int(text)
        if as_integer is not None:
            return as_integer

        as_boolean = parse_bool(text)
        if as_boolean is not None:
            return as_boolean

        return text

    if isinstance(value, float) and value.is_integer():
        return int(value)

    return value


def value_kind(value: Any) -> ValueKind:
    """Return the kind tag of a stored value."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    return ValueKind.OPAQUE


def as_int(value: Any) -> int:
    if value_kind(value) is not ValueKind.INTEGER:
        raise ValueTypeError(f"expected integer, got {value_kind(value).value}: {value!r}")
    return value


def as_bool(value: Any) -> bool:
    if value_kind(value) is not ValueKind.BOOLEAN:
        raise ValueTypeError(f"expected boolean, got {value_kind(value).value}: {value!r}")
    return value


def as_float(value: Any) -> float:
    """Read a value as float; integers are widened."""
    if value_kind(value) not in (ValueKind.FLOAT, ValueKind.INTEGER):
        raise ValueTypeError(f"expected float, got {value_kind(value).value}: {value!r}")
    return float(value)


def as_str(value: Any) -> str:
    if value_kind(value) is not ValueKind.STRING:
        raise ValueTypeError(f"expected string, got {value_kind(value).value}: {value!r}")
    return value
