"""Configuration: immutable, merged configuration with typed path access."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path as FilePath
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from layerconf import sources as source_loaders
from layerconf.coerce import coerce
from layerconf.errors import TypeCoercionError
from layerconf.merge import Merger, MergeSource, merge_values
from layerconf.path import MISSING, Path, PathResolver
from layerconf.schema.types import (
    SchemaNode,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from layerconf.schema.validator import SchemaValidator
from layerconf.value import copy_value, normalize

__all__ = ["Configuration"]

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_SHARED_RESOLVER = PathResolver()

_PYDANTIC_MISSING = {"missing"}
_PYDANTIC_TYPE_ERRORS = {
    "bool_type",
    "bool_parsing",
    "int_type",
    "int_parsing",
    "int_from_float",
    "float_type",
    "float_parsing",
    "string_type",
    "list_type",
    "dict_type",
    "model_type",
    "model_attributes_type",
}


class Configuration:
    """Merged configuration tree with dotted-path access.

    The tree is copied in on construction and never modified afterwards, so
    one instance can be shared by any number of threads. Operations that
    change configuration return a new instance.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, resolver: PathResolver | None = None) -> None:
        self._data: Any = normalize(data if data is not None else {})
        self._resolver = resolver or _SHARED_RESOLVER

    @classmethod
    def from_sources(cls, sources: Iterable[MergeSource]) -> Configuration:
        """Merge ranked sources and wrap the result."""
        return cls._wrap(Merger().merge(sources))

    @classmethod
    def load(
        cls,
        *files: str | FilePath,
        env_prefix: str | None = None,
        overrides: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        optional_files: bool = False,
    ) -> Configuration:
        """Load files, environment variables and overrides in precedence order.

        Files rank by position (later files win), environment variables beat
        files and explicit overrides beat everything.
        """
        merge_sources: list[MergeSource] = []
        for position, file_path in enumerate(files):
            source = source_loaders.load_file(
                file_path, rank=source_loaders.FILE_RANK + position, required=not optional_files
            )
            if source is not None:
                merge_sources.append(source)
        if env_prefix is not None:
            merge_sources.append(source_loaders.load_environment(env_prefix, environ=environ))
        if overrides is not None:
            merge_sources.append(source_loaders.from_mapping(overrides))
        return cls.from_sources(merge_sources)

    @classmethod
    def _wrap(cls, tree: Any, resolver: PathResolver | None = None) -> Configuration:
        # tree is already normalized and exclusively owned
        instance = cls.__new__(cls)
        instance._data = tree
        instance._resolver = resolver or _SHARED_RESOLVER
        return instance

    # === Reads ===

    def get(self, path: str | Path, default: Any = None) -> Any:
        """Return the value at ``path``, or ``default`` when it is absent.

        Mappings and sequences are returned as copies.
        """
        value = self._resolver.resolve(self._data, path)
        if value is MISSING:
            return default
        return copy_value(value)

    def has(self, path: str | Path) -> bool:
        """True when ``path`` exists. An explicit null counts as present."""
        return self._resolver.resolve(self._data, path) is not MISSING

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self.has(path)

    def get_as(self, path: str | Path, target: type[T]) -> T | None:
        """Return the value at ``path`` converted to ``target``; None when absent.

        Raises:
            TypeCoercionError: If the stored value cannot be read as ``target``.
            PathSyntaxError: If ``path`` is malformed.
        """
        parsed = path if isinstance(path, Path) else self._resolver.parse(path)
        value = self._resolver.resolve(self._data, parsed)
        if value is MISSING:
            return None
        return coerce(value, target, str(parsed))

    def get_or_default(self, path: str | Path, default: T, target: type | None = None) -> T:
        """Best-effort read: ``default`` on absence or coercion failure.

        The target type is inferred from ``default`` unless given. A None
        default carries no type, so ``target`` is then required. Malformed
        paths still raise PathSyntaxError.

        Raises:
            TypeError: If ``default`` is None and no ``target`` is given, or
                the target type is unsupported.
        """
        if target is None and default is None:
            raise TypeError("get_or_default() needs an explicit target when default is None")
        wanted = target if target is not None else type(default)
        try:
            value = self.get_as(path, wanted)
        except TypeCoercionError:
            return default
        return default if value is None else value

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the whole tree."""
        return copy_value(self._data)

    # === Derived configurations ===

    def with_value(self, path: str | Path, value: Any) -> Configuration:
        """Return a new Configuration with ``value`` set at ``path``."""
        tree = copy_value(self._data)
        self._resolver.set(tree, path, value)
        return self._wrap(tree, self._resolver)

    def overlay(self, data: Mapping[str, Any]) -> Configuration:
        """Return a new Configuration with ``data`` merged on top of this one."""
        return self._wrap(merge_values(self._data, normalize(data)), self._resolver)

    # === Validation ===

    def validate(self, schema: SchemaNode, validator: SchemaValidator | None = None) -> ValidationResult:
        """Validate the tree against ``schema`` and report every issue."""
        return (validator or SchemaValidator()).validate(self._data, schema)

    def validated(self, schema: SchemaNode, validator: SchemaValidator | None = None) -> Configuration:
        """Return a Configuration over the effective tree, with defaults applied.

        Raises:
            ConfigValidationError: If validation finds any issue.
        """
        result = self.validate(schema, validator)
        if not result.valid:
            raise result.to_error()
        return self._wrap(result.effective_tree, self._resolver)

    def bind(self, model: type[M], path: str | Path | None = None) -> M:
        """Validate a section (or the whole tree) into a Pydantic model.

        Raises:
            ConfigValidationError: If the section is absent or does not fit the model.
        """
        prefix = ""
        section = self._data
        if path is not None:
            parsed = path if isinstance(path, Path) else self._resolver.parse(path)
            prefix = str(parsed)
            section = self._resolver.resolve(self._data, parsed)
            if section is MISSING:
                issue = ValidationIssue(
                    path=prefix,
                    kind=ValidationErrorKind.MISSING_FIELD,
                    message=f"Missing configuration section '{prefix}'",
                    expected=model.__name__,
                )
                raise ValidationResult(valid=False, errors=[issue]).to_error()

        try:
            return model.model_validate(copy_value(section))
        except PydanticValidationError as e:
            result = ValidationResult(valid=False, errors=_pydantic_error_to_issues(e, prefix))
            raise result.to_error() from e

    # === Dunder ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Configuration):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        keys = list(self._data) if isinstance(self._data, dict) else []
        return f"Configuration(keys={keys!r})"


def _pydantic_error_to_issues(error: PydanticValidationError, prefix: str) -> list[ValidationIssue]:
    """Convert Pydantic v2 errors into validation issues with dotted paths."""
    issues: list[ValidationIssue] = []
    for err in error.errors():
        rendered = prefix
        for segment in err.get("loc", ()):
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            else:
                rendered = f"{rendered}.{segment}" if rendered else str(segment)

        pydantic_type = err.get("type", "")
        if pydantic_type in _PYDANTIC_MISSING:
            kind = ValidationErrorKind.MISSING_FIELD
        elif pydantic_type in _PYDANTIC_TYPE_ERRORS:
            kind = ValidationErrorKind.TYPE_MISMATCH
        else:
            kind = ValidationErrorKind.CONSTRAINT

        ctx = err.get("ctx", {})
        issues.append(
            ValidationIssue(
                path=rendered,
                kind=kind,
                message=err.get("msg", ""),
                expected=ctx.get("expected", pydantic_type),
                actual=None if kind is ValidationErrorKind.MISSING_FIELD else err.get("input"),
            )
        )
    return issues
