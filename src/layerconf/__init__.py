"""layerconf - Layered configuration resolution and validation."""

from __future__ import annotations

# Values and paths
from layerconf.value import ValueKind, kind_of, normalize
from layerconf.path import MISSING, Index, Key, Path, PathResolver, assign, parse_path, resolve

# Reads
from layerconf.coerce import coerce

# Merging and sources
from layerconf.merge import MergeSource, Merger, merge_values
from layerconf.sources import (
    ENV_RANK,
    FILE_RANK,
    OVERRIDE_RANK,
    from_mapping,
    load_environment,
    load_file,
)

# Config
from layerconf.config import Configuration

# Schema
from layerconf.schema import (
    ArrayOf,
    ExpectedType,
    ObjectSchema,
    OptionalField,
    RequiredField,
    SchemaLoader,
    SchemaValidator,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)

# Errors
from layerconf.errors import (
    ConfigurationError,
    ConfigValidationError,
    ErrorCodes,
    PathSyntaxError,
    PathTypeConflictError,
    SchemaNotFoundError,
    SchemaParseError,
    SourceLoadError,
    SourceNotFoundError,
    TypeCoercionError,
    UnsupportedValueError,
)

__version__ = "0.1.0"

__all__ = [
    # Values and paths
    "ValueKind",
    "kind_of",
    "normalize",
    "MISSING",
    "Key",
    "Index",
    "Path",
    "PathResolver",
    "parse_path",
    "resolve",
    "assign",
    # Reads
    "coerce",
    # Merging and sources
    "MergeSource",
    "Merger",
    "merge_values",
    "FILE_RANK",
    "ENV_RANK",
    "OVERRIDE_RANK",
    "from_mapping",
    "load_file",
    "load_environment",
    # Config
    "Configuration",
    # Schema
    "ExpectedType",
    "RequiredField",
    "OptionalField",
    "ObjectSchema",
    "ArrayOf",
    "SchemaLoader",
    "SchemaValidator",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
    # Errors
    "ErrorCodes",
    "ConfigurationError",
    "PathSyntaxError",
    "PathTypeConflictError",
    "TypeCoercionError",
    "ConfigValidationError",
    "UnsupportedValueError",
    "SourceNotFoundError",
    "SourceLoadError",
    "SchemaNotFoundError",
    "SchemaParseError",
]
