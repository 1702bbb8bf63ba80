"""The configuration value model.

A configuration tree is built only from plain Python values: ``None``,
``bool``, ``int``/``float``, ``str``, ``list`` and ``dict`` with string keys.
Every other type is rejected at the boundary by :func:`normalize`.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Mapping
from enum import Enum
from typing import Any

from layerconf.errors import UnsupportedValueError

__all__ = ["ValueKind", "kind_of", "type_name", "normalize", "copy_value"]

# numbers carry float64 precision
_MAX_INT = int(sys.float_info.max)


class ValueKind(str, Enum):
    """The closed set of node kinds a configuration tree may contain."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """Classify a value. Raises UnsupportedValueError outside the closed set."""
    if value is None:
        return ValueKind.NULL
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    raise UnsupportedValueError(f"Unsupported configuration value of type {type(value).__name__}")


def type_name(value: Any) -> str:
    """Return the kind name of a value, for error messages."""
    return kind_of(value).value


def normalize(value: Any) -> Any:
    """Return a fresh, canonical deep copy of ``value``.

    Tuples become lists and any Mapping becomes a dict. Non-string keys,
    non-finite floats, integers beyond the float64 range, unsupported types
    and cycles raise UnsupportedValueError.
    """
    return _normalize(value, set())


def _normalize(value: Any, active: set[int]) -> Any:
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        if isinstance(value, float) and not math.isfinite(value):
            raise UnsupportedValueError(f"Non-finite number {value!r} is not a configuration value")
        if isinstance(value, int) and abs(value) > _MAX_INT:
            raise UnsupportedValueError("Integer is outside the float64 range of configuration numbers")
        return value
    if kind not in (ValueKind.SEQUENCE, ValueKind.MAPPING):
        return value

    marker = id(value)
    if marker in active:
        raise UnsupportedValueError("Configuration value contains a cycle")
    active.add(marker)
    try:
        if kind is ValueKind.SEQUENCE:
            return [_normalize(item, active) for item in value]
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(
                    f"Mapping keys must be strings, got {type(key).__name__} key {key!r}"
                )
            result[key] = _normalize(item, active)
        return result
    finally:
        active.discard(marker)


def copy_value(value: Any) -> Any:
    """Deep-copy an already normalized tree."""
    if isinstance(value, dict):
        return {key: copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value
