"""Standard library of built-in template functions.

``default_registry()`` returns a fresh ``FunctionRegistry`` holding every
function below; hosts may extend the copy with their own functions.

Built-ins receive evaluated argument values and raise ordinary Python
exceptions on bad input. The evaluator wraps any such failure in a
``FunctionCallError`` located at the call site.

Functions:
    comparison   eq, ne, lt, le, gt, ge
    logic        not, and, or
    arithmetic   add, sub, mul, div, mod
    strings      concat, upper, lower, trim, replace, match, split, join, format
    collections  size, head, tail, keys, values, contains, range
    conversion   int, float, str
    time         now, formatTime
"""

from __future__ import annotations

import math
import re
import string
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from camino.constants import MAX_INTEGER, MAX_RANGE_SIZE, MIN_INTEGER
from camino.render.registry import FunctionRegistry
from camino.render.values import (
    Value,
    is_float,
    is_integer,
    is_list,
    lookup_key,
    to_text,
    type_name,
)

__all__ = ["default_registry"]

_standard = FunctionRegistry()


def _check(value: Any, predicate: Callable[[Any], bool], expected: str) -> Any:
    if not predicate(value):
        raise TypeError(f"expected {expected}, got {type_name(value)}")
    return value


def _is_number(value: Any) -> bool:
    return is_integer(value) or is_float(value)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _long(value: int) -> int:
    if not MIN_INTEGER <= value <= MAX_INTEGER:
        raise OverflowError("integer result out of 64-bit range")
    return value


def equal(left: Value, right: Value) -> bool:
    """Structural equality; Booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (tuple, list)) and isinstance(right, (tuple, list)):
        return len(left) == len(right) and all(
            equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return len(left) == len(right) and all(
            _has_equal_entry(right, key, value) for key, value in left.items()
        )
    return bool(left == right)


def _has_equal_entry(mapping: Mapping[Any, Any], key: Value, value: Value) -> bool:
    try:
        return equal(lookup_key(mapping, key), value)
    except KeyError:
        return False


def _ordered(left: Value, right: Value) -> tuple[Any, Any]:
    if _is_number(left) and _is_number(right):
        return left, right
    if _is_string(left) and _is_string(right):
        return left, right
    raise TypeError(f"cannot compare {type_name(left)} with {type_name(right)}")


# =============================================================================
# Comparison
# =============================================================================


@_standard.register("eq", min_args=2, max_args=2)
def _eq(left: Value, right: Value) -> bool:
    """True if both values are equal."""
    return equal(left, right)


@_standard.register("ne", min_args=2, max_args=2)
def _ne(left: Value, right: Value) -> bool:
    """True if the values differ."""
    return not equal(left, right)


@_standard.register("lt", min_args=2, max_args=2)
def _lt(left: Value, right: Value) -> bool:
    """True if left < right (numbers or strings)."""
    a, b = _ordered(left, right)
    return bool(a < b)


@_standard.register("le", min_args=2, max_args=2)
def _le(left: Value, right: Value) -> bool:
    """True if left <= right (numbers or strings)."""
    a, b = _ordered(left, right)
    return bool(a <= b)


@_standard.register("gt", min_args=2, max_args=2)
def _gt(left: Value, right: Value) -> bool:
    """True if left > right (numbers or strings)."""
    a, b = _ordered(left, right)
    return bool(a > b)


@_standard.register("ge", min_args=2, max_args=2)
def _ge(left: Value, right: Value) -> bool:
    """True if left >= right (numbers or strings)."""
    a, b = _ordered(left, right)
    return bool(a >= b)


# =============================================================================
# Logic
# =============================================================================


@_standard.register("not", min_args=1, max_args=1)
def _not(value: Value) -> bool:
    """Boolean negation."""
    return not _check(value, _is_boolean, "Boolean")


@_standard.register("and", min_args=1)
def _and(*values: Value) -> bool:
    """True if every argument is true. All arguments are evaluated."""
    return all([_check(v, _is_boolean, "Boolean") for v in values])


@_standard.register("or", min_args=1)
def _or(*values: Value) -> bool:
    """True if any argument is true. All arguments are evaluated."""
    return any([_check(v, _is_boolean, "Boolean") for v in values])


# =============================================================================
# Arithmetic
# =============================================================================


def _numbers(*values: Value) -> tuple[Any, ...]:
    return tuple(_check(v, _is_number, "Integer or Float") for v in values)


def _result(value: Any) -> Value:
    if isinstance(value, int):
        return _long(value)
    return float(value)


@_standard.register("add", min_args=2)
def _add(*values: Value) -> Value:
    """Sum of the arguments."""
    return _result(sum(_numbers(*values)))


@_standard.register("sub", min_args=2, max_args=2)
def _sub(left: Value, right: Value) -> Value:
    """left - right."""
    a, b = _numbers(left, right)
    return _result(a - b)


@_standard.register("mul", min_args=2)
def _mul(*values: Value) -> Value:
    """Product of the arguments."""
    return _result(math.prod(_numbers(*values)))


@_standard.register("div", min_args=2, max_args=2)
def _div(left: Value, right: Value) -> Value:
    """left / right; Integer division truncates toward zero."""
    a, b = _numbers(left, right)
    if is_integer(a) and is_integer(b):
        if b == 0:
            raise ZeroDivisionError("integer division by zero")
        quotient = abs(a) // abs(b)
        return _long(quotient if (a < 0) == (b < 0) else -quotient)
    if b == 0:
        raise ZeroDivisionError("float division by zero")
    return float(a / b)


@_standard.register("mod", min_args=2, max_args=2)
def _mod(left: Value, right: Value) -> Value:
    """Remainder of left / right, with the sign of left."""
    a, b = _numbers(left, right)
    if b == 0:
        raise ZeroDivisionError("modulo by zero")
    if is_integer(a) and is_integer(b):
        remainder = abs(a) % abs(b)
        return remainder if a >= 0 else -remainder
    return math.fmod(a, b)


# =============================================================================
# Strings
# =============================================================================


@_standard.register("concat", min_args=0)
def _concat(*values: Value) -> str:
    """Concatenate the text of every argument."""
    return "".join(to_text(v) for v in values)


@_standard.register("upper", min_args=1, max_args=1)
def _upper(value: Value) -> str:
    """Upper-case a string."""
    return str(_check(value, _is_string, "String")).upper()


@_standard.register("lower", min_args=1, max_args=1)
def _lower(value: Value) -> str:
    """Lower-case a string."""
    return str(_check(value, _is_string, "String")).lower()


@_standard.register("trim", min_args=1, max_args=1)
def _trim(value: Value) -> str:
    """Strip leading and trailing whitespace."""
    return str(_check(value, _is_string, "String")).strip()


@_standard.register("replace", min_args=3, max_args=3)
def _replace(value: Value, old: Value, new: Value) -> str:
    """Replace every occurrence of old with new."""
    text, target, replacement = (
        _check(v, _is_string, "String") for v in (value, old, new)
    )
    return str(text.replace(target, replacement))


@_standard.register("match", min_args=2, max_args=2)
def _match(value: Value, pattern: Value) -> bool:
    """True if the whole string matches the regular expression."""
    text = _check(value, _is_string, "String")
    regex = _check(pattern, _is_string, "String")
    return re.fullmatch(regex, text) is not None


@_standard.register("split", min_args=2, max_args=2)
def _split(value: Value, separator: Value) -> tuple[str, ...]:
    """Split a string on a literal separator."""
    text = _check(value, _is_string, "String")
    sep = _check(separator, _is_string, "String")
    if not sep:
        raise ValueError("separator must not be empty")
    return tuple(text.split(sep))


@_standard.register("join", min_args=2, max_args=2)
def _join(values: Value, separator: Value) -> str:
    """Join the text of each list element with a separator."""
    items = _check(values, is_list, "List")
    sep = _check(separator, _is_string, "String")
    return str(sep.join(to_text(item) for item in items))


@_standard.register("format", min_args=1)
def _format(pattern: Value, *values: Value) -> str:
    """Fill ``{}`` or ``{N}`` fields, each with an optional format spec.

    Numbers are formatted as Python numbers so specs such as ``.2f`` apply;
    every other value is formatted as its template text.
    """
    text = _check(pattern, _is_string, "String")
    for _, field, spec, conversion in string.Formatter().parse(text):
        if field is None:
            continue
        if field and not field.isdigit():
            raise ValueError(f"Unsupported format field '{{{field}}}'")
        if conversion is not None:
            raise ValueError(f"Unsupported conversion '!{conversion}'")
        if spec and "{" in spec:
            raise ValueError("Nested format fields are not supported")
    arguments = [value if _is_number(value) else to_text(value) for value in values]
    return text.format(*arguments)


# =============================================================================
# Collections
# =============================================================================


@_standard.register("size", min_args=1, max_args=1)
def _size(value: Value) -> int:
    """Length of a List, Dictionary or String."""
    container = _check(
        value,
        lambda v: is_list(v) or _is_mapping(v) or _is_string(v),
        "List, Dictionary or String",
    )
    return len(container)


@_standard.register("head", min_args=1, max_args=1)
def _head(value: Value) -> Value:
    """First element of a non-empty List."""
    items = _check(value, is_list, "List")
    if not items:
        raise IndexError("head of empty list")
    return items[0]


@_standard.register("tail", min_args=1, max_args=1)
def _tail(value: Value) -> tuple[Value, ...]:
    """All elements of a List except the first."""
    return tuple(_check(value, is_list, "List")[1:])


@_standard.register("keys", min_args=1, max_args=1)
def _keys(value: Value) -> tuple[Value, ...]:
    """Keys of a Dictionary, in insertion order."""
    return tuple(_check(value, _is_mapping, "Dictionary").keys())


@_standard.register("values", min_args=1, max_args=1)
def _values(value: Value) -> tuple[Value, ...]:
    """Values of a Dictionary, in insertion order."""
    return tuple(_check(value, _is_mapping, "Dictionary").values())


@_standard.register("contains", min_args=2, max_args=2)
def _contains(container: Value, item: Value) -> bool:
    """List membership, Dictionary key presence or substring test."""
    if isinstance(container, (tuple, list)):
        return any(equal(element, item) for element in container)
    if isinstance(container, Mapping):
        try:
            lookup_key(container, item)
        except KeyError:
            return False
        return True
    if isinstance(container, str):
        return container.find(_check(item, _is_string, "String")) >= 0
    raise TypeError(
        f"expected List, Dictionary or String, got {type_name(container)}"
    )


@_standard.register("range", min_args=1, max_args=2)
def _range(first: Value, second: Value | None = None) -> tuple[int, ...]:
    """range(stop) or range(start, stop) as a List of Integers."""
    given = (first,) if second is None else (first, second)
    bounds = [_check(bound, is_integer, "Integer") for bound in given]
    start, stop = (0, *bounds) if len(bounds) == 1 else bounds
    if stop - start > MAX_RANGE_SIZE:
        raise ValueError(
            f"range of {stop - start} elements exceeds the limit of {MAX_RANGE_SIZE}"
        )
    return tuple(range(start, stop))


# =============================================================================
# Conversion
# =============================================================================


@_standard.register("int", min_args=1, max_args=1)
def _to_int(value: Value) -> int:
    """Convert a String or Float to an Integer (floats truncate)."""
    if isinstance(value, bool):
        raise TypeError("expected String, Integer or Float, got Boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _long(math.trunc(value))
    return _long(int(_check(value, _is_string, "String, Integer or Float").strip()))


@_standard.register("float", min_args=1, max_args=1)
def _to_float(value: Value) -> float:
    """Convert a String or Integer to a Float."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return float(_check(value, _is_string, "String, Integer or Float").strip())


@_standard.register("str", min_args=1, max_args=1)
def _to_str(value: Value) -> str:
    """Text form of any value, as it would render."""
    return to_text(value)


# =============================================================================
# Time
# =============================================================================


@_standard.register("now", min_args=0, max_args=0)
def _now() -> int:
    """Current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@_standard.register("formatTime", min_args=2, max_args=3)
def _format_time(millis: Value, pattern: Value, zone: Value = "UTC") -> str:
    """Format epoch milliseconds with a strftime pattern in a time zone."""
    instant = _check(millis, _is_number, "Integer or Float")
    fmt = _check(pattern, _is_string, "String")
    tz = ZoneInfo(_check(zone, _is_string, "String"))
    return datetime.fromtimestamp(instant / 1000, tz=tz).strftime(fmt)


def default_registry() -> FunctionRegistry:
    """Return a new registry holding the standard built-in functions.

    Each call returns an independent copy, so callers may register extra
    functions without affecting other users.
    """
    return _standard.copy()
