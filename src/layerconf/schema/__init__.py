"""layerconf schema system -- public API.

Example usage::

    from layerconf.schema import ObjectSchema, RequiredField, ExpectedType, SchemaValidator

    schema = ObjectSchema({"host": RequiredField(ExpectedType.STRING)})
    result = SchemaValidator().validate({"host": "db"}, schema)
"""

from __future__ import annotations

from layerconf.schema.loader import SchemaLoader
from layerconf.schema.types import (
    ArrayOf,
    ExpectedType,
    ObjectSchema,
    OptionalField,
    RequiredField,
    SchemaNode,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from layerconf.schema.validator import SchemaValidator, ValidationHook

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
    "SchemaValidator",
    "ValidationHook",
    "SchemaLoader",
]
