"""SchemaValidator: exhaustive structural validation of configuration trees."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from layerconf.path import MISSING, Index, Key, PathStep, render_steps
from layerconf.schema.types import (
    ArrayOf,
    ObjectSchema,
    OptionalField,
    RequiredField,
    SchemaNode,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
    expected_name,
)
from layerconf.value import copy_value, type_name

__all__ = ["SchemaValidator", "ValidationHook"]

ValidationHook = Callable[[Any], Iterable[ValidationIssue]]


class SchemaValidator:
    """Walks a tree and a schema together, collecting every issue.

    Hooks run against the effective tree after a clean structural pass and
    may add issues of kind ``constraint``.
    """

    def __init__(self, hooks: Iterable[ValidationHook] = ()) -> None:
        self._hooks: tuple[ValidationHook, ...] = tuple(hooks)

    def validate(self, tree: Any, schema: SchemaNode) -> ValidationResult:
        """Validate ``tree`` against ``schema``. The input tree is never modified."""
        effective = copy_value(tree)
        issues: list[ValidationIssue] = []
        effective = self._walk(effective, schema, [], issues)

        if not issues:
            for hook in self._hooks:
                issues.extend(hook(effective))

        return ValidationResult(valid=not issues, errors=issues, effective_tree=effective)

    def _walk(
        self,
        node: Any,
        schema: SchemaNode,
        steps: list[PathStep],
        issues: list[ValidationIssue],
    ) -> Any:
        """Validate one node and return its effective value (MISSING if absent)."""
        if isinstance(schema, RequiredField):
            if node is MISSING:
                issues.append(_missing(steps, schema))
            elif not schema.type.matches(node):
                issues.append(_mismatch(steps, schema, node))
            return node

        if isinstance(schema, OptionalField):
            if node is MISSING:
                return copy_value(schema.default)
            if not schema.type.matches(node):
                issues.append(_mismatch(steps, schema, node))
            return node

        if isinstance(schema, ObjectSchema):
            return self._walk_object(node, schema, steps, issues)

        if isinstance(schema, ArrayOf):
            if node is MISSING:
                issues.append(_missing(steps, schema))
                return node
            if not isinstance(node, list):
                issues.append(_mismatch(steps, schema, node))
                return node
            for position, item in enumerate(node):
                node[position] = self._walk(item, schema.items, steps + [Index(position)], issues)
            return node

        raise TypeError(f"Unknown schema node {schema!r}")

    def _walk_object(
        self,
        node: Any,
        schema: ObjectSchema,
        steps: list[PathStep],
        issues: list[ValidationIssue],
    ) -> Any:
        if node is not MISSING and not isinstance(node, dict):
            issues.append(_mismatch(steps, schema, node))
            return node

        # an absent object is checked as an empty one
        current: dict[str, Any] = {} if node is MISSING else node
        for name, field_schema in schema.fields.items():
            child = current.get(name, MISSING)
            effective = self._walk(child, field_schema, steps + [Key(name)], issues)
            if effective is not MISSING:
                current[name] = effective

        if node is MISSING and not current:
            return MISSING
        return current


def _missing(steps: list[PathStep], schema: SchemaNode) -> ValidationIssue:
    path = render_steps(steps)
    return ValidationIssue(
        path=path,
        kind=ValidationErrorKind.MISSING_FIELD,
        message=f"Missing required field '{path}'",
        expected=expected_name(schema),
    )


def _mismatch(steps: list[PathStep], schema: SchemaNode, value: Any) -> ValidationIssue:
    path = render_steps(steps)
    expected = expected_name(schema)
    actual = type_name(value)
    return ValidationIssue(
        path=path,
        kind=ValidationErrorKind.TYPE_MISMATCH,
        message=f"Expected {expected} at '{path or '<root>'}', found {actual}",
        expected=expected,
        actual=actual,
    )
