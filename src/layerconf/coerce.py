"""Narrow, explicit conversions from stored values to read types."""

from __future__ import annotations

import re
from typing import Any, Callable, TypeVar

from layerconf.errors import TypeCoercionError
from layerconf.value import ValueKind, kind_of

__all__ = ["coerce", "SUPPORTED_TARGETS", "is_numeric_literal"]

T = TypeVar("T")

_NUMERIC_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def is_numeric_literal(text: str) -> bool:
    """True when ``text`` is a plain decimal or exponent literal."""
    return _NUMERIC_LITERAL.fullmatch(text) is not None


def _fail(value: Any, target: type, path: str) -> TypeCoercionError:
    return TypeCoercionError(path, kind_of(value).value, target.__name__)


def _to_bool(value: Any, path: str) -> bool:
    if kind_of(value) is ValueKind.BOOL:
        return value
    raise _fail(value, bool, path)


def _to_int(value: Any, path: str) -> int:
    kind = kind_of(value)
    number: int | float
    if kind is ValueKind.NUMBER:
        number = value
    elif kind is ValueKind.STRING and is_numeric_literal(value):
        try:
            number = _parse_number(value)
        except ValueError as e:
            # digit strings beyond the interpreter's int conversion limit
            raise _fail(value, int, path) from e
    else:
        raise _fail(value, int, path)
    if isinstance(number, float):
        if not number.is_integer():
            raise _fail(value, int, path)
        return int(number)
    return number


def _to_float(value: Any, path: str) -> float:
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        try:
            return float(value)
        except OverflowError as e:
            raise _fail(value, float, path) from e
    if kind is ValueKind.STRING and is_numeric_literal(value):
        number = float(value)
        if number in (float("inf"), float("-inf")):
            raise _fail(value, float, path)
        return number
    raise _fail(value, float, path)


def _to_str(value: Any, path: str) -> str:
    kind = kind_of(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return repr(value)
    raise _fail(value, str, path)


def _parse_number(text: str) -> int | float:
    if re.fullmatch(r"[+-]?[0-9]+", text):
        return int(text)
    return float(text)


_COERCERS: dict[type, Callable[[Any, str], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: _to_float,
    str: _to_str,
}

SUPPORTED_TARGETS: tuple[type, ...] = tuple(_COERCERS)


def coerce(value: Any, target: type[T], path: str = "") -> T:
    """Convert a stored value to ``target``.

    Rules:
        - bool accepts only booleans; numbers and strings like "true" fail.
        - int accepts integral numbers and integral numeric strings.
        - float accepts numbers and numeric strings.
        - str accepts strings, booleans ("true"/"false") and numbers.
        - Booleans never become numbers. Null, sequences and mappings
          never coerce.

    Raises:
        TypeCoercionError: If the value cannot be read as ``target``.
        TypeError: If ``target`` is not one of SUPPORTED_TARGETS.
    """
    coercer = _COERCERS.get(target)
    if coercer is None:
        names = ", ".join(t.__name__ for t in SUPPORTED_TARGETS)
        raise TypeError(f"Unsupported target type {target!r}; expected one of: {names}")
    return coercer(value, path)
