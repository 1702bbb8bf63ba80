"""Schema node definitions and validation result types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from layerconf.errors import ConfigValidationError
from layerconf.value import ValueKind, kind_of, normalize

__all__ = [
    "ExpectedType",
    "RequiredField",
    "OptionalField",
    "ObjectSchema",
    "ArrayOf",
    "SchemaNode",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
]


class ExpectedType(str, Enum):
    """Leaf types a schema can demand."""

    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ANY = "any"

    def matches(self, value: Any) -> bool:
        if self is ExpectedType.ANY:
            return True
        return kind_of(value).value == self.value


@dataclass(frozen=True)
class RequiredField:
    """A leaf that must be present and of the given type."""

    type: ExpectedType


@dataclass(frozen=True)
class OptionalField:
    """A leaf that may be absent; ``default`` is used in the effective tree."""

    type: ExpectedType
    default: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "default", normalize(self.default))


@dataclass(frozen=True)
class ObjectSchema:
    """A mapping whose declared fields are validated. Undeclared keys are ignored."""

    fields: Mapping[str, SchemaNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class ArrayOf:
    """A sequence whose every element matches ``items``."""

    items: SchemaNode


SchemaNode = Union[RequiredField, OptionalField, ObjectSchema, ArrayOf]


class ValidationErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    CONSTRAINT = "constraint"


@dataclass
class ValidationIssue:
    """One validation problem. ``path`` is the rendered path, '' for the root."""

    path: str
    kind: ValidationErrorKind
    message: str
    expected: Any = None
    actual: Any = None


@dataclass
class ValidationResult:
    """Every issue found in one validation pass, plus the effective tree."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    effective_tree: Any = None

    def to_error(self) -> ConfigValidationError:
        """Convert this result into a ConfigValidationError exception."""
        if self.valid:
            raise ValueError("Cannot convert valid result to error")
        error_dicts = [
            {
                "path": e.path,
                "kind": e.kind.value,
                "message": e.message,
                "expected": e.expected,
                "actual": e.actual,
            }
            for e in self.errors
        ]
        count = len(error_dicts)
        return ConfigValidationError(
            message=f"Configuration validation failed with {count} error{'s' if count != 1 else ''}",
            errors=error_dicts,
        )


def expected_name(node: SchemaNode) -> str:
    if isinstance(node, ObjectSchema):
        return ValueKind.MAPPING.value
    if isinstance(node, ArrayOf):
        return ValueKind.SEQUENCE.value
    return node.type.value
