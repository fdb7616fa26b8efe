"""Value helpers for BotScript.

A BotScript value is exactly one of three Python types: ``float`` for
Number, ``str`` for String and ``bool`` for Boolean. Since ``bool`` is a
subclass of ``int`` in Python, every check below tests for booleans first.
"""

from __future__ import annotations

import math
from typing import Union

BotScriptValue = Union[float, str, bool]


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: object) -> bool:
    return isinstance(value, str)


def is_boolean(value: object) -> bool:
    return isinstance(value, bool)


def is_value(value: object) -> bool:
    return is_boolean(value) or is_number(value) or is_string(value)


def type_name(value: object) -> str:
    """Return the BotScript kind of a value: number, string or boolean."""
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return type(value).__name__


def to_number(value: float) -> float:
    """Normalize an int coming from the port into a float."""
    return float(value)


def format_number(value: float) -> str:
    # Whole numbers print without a fractional part: 20.0 -> "20"
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def to_string(value: object) -> str:
    """Render a value the way `say` and string concatenation show it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(float(value))
    if isinstance(value, str):
        return value
    return str(value)


def is_truthy(value: object) -> bool:
    """Booleans as-is, numbers when non-zero, strings when non-empty."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return len(value) > 0
    raise TypeError(f"not a BotScript value: {value!r}")


def values_equal(a: object, b: object) -> bool:
    """Equality by kind and value; values of different kinds are never equal."""
    if type_name(a) != type_name(b):
        return False
    if is_number(a):
        return float(a) == float(b)
    return a == b
