"""Error hierarchy for the layerconf package."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
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
    "ErrorCodes",
]


class ConfigurationError(Exception):
    """Base error for all layerconf errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class PathSyntaxError(ConfigurationError):
    """Raised when a path expression is malformed."""

    def __init__(self, expression: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="PATH_SYNTAX_ERROR",
            message=f"Invalid path expression {expression!r}: {reason}",
            details={"expression": expression, "reason": reason},
            **kwargs,
        )

    @property
    def expression(self) -> str:
        """The offending path expression."""
        return self.details["expression"]

    @property
    def reason(self) -> str:
        return self.details["reason"]


class PathTypeConflictError(ConfigurationError):
    """Raised when an existing node cannot take the next step of a path."""

    def __init__(self, path: str, expected: str, found: str, **kwargs: Any) -> None:
        location = path or "<root>"
        super().__init__(
            code="PATH_TYPE_CONFLICT",
            message=f"Cannot descend into {location}: expected {expected}, found {found}",
            details={"path": path, "expected": expected, "found": found},
            **kwargs,
        )

    @property
    def path(self) -> str:
        """Rendered prefix of the path where the conflict was found."""
        return self.details["path"]

    @property
    def expected(self) -> str:
        return self.details["expected"]

    @property
    def found(self) -> str:
        return self.details["found"]


class TypeCoercionError(ConfigurationError):
    """Raised when a stored value cannot be read as the requested type."""

    def __init__(self, path: str, from_kind: str, to_type: str, **kwargs: Any) -> None:
        super().__init__(
            code="TYPE_COERCION_ERROR",
            message=f"Cannot read {path or '<root>'} as {to_type}: value is {from_kind}",
            details={"path": path, "from": from_kind, "to": to_type},
            **kwargs,
        )

    @property
    def path(self) -> str:
        return self.details["path"]

    @property
    def from_kind(self) -> str:
        """Kind of the stored value."""
        return self.details["from"]

    @property
    def to_type(self) -> str:
        """Name of the requested type."""
        return self.details["to"]


class ConfigValidationError(ConfigurationError):
    """Raised when a configuration tree fails validation.

    Carries every issue found, never only the first one.
    """

    def __init__(
        self,
        message: str = "Configuration validation failed",
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="CONFIG_VALIDATION_ERROR",
            message=message,
            details={"errors": errors or []},
            **kwargs,
        )

    @property
    def errors(self) -> list[dict[str, Any]]:
        return self.details["errors"]


class UnsupportedValueError(ConfigurationError):
    """Raised when a value cannot be represented as a configuration tree."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="UNSUPPORTED_VALUE", message=message, **kwargs)


class SourceNotFoundError(ConfigurationError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, source_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="SOURCE_NOT_FOUND",
            message=f"Configuration source not found: {source_path}",
            details={"source_path": source_path},
            **kwargs,
        )


class SourceLoadError(ConfigurationError):
    """Raised when a configuration source cannot be turned into a tree."""

    def __init__(self, source: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="SOURCE_INVALID",
            message=f"Invalid configuration source '{source}': {reason}",
            details={"source": source, "reason": reason},
            **kwargs,
        )


class SchemaNotFoundError(ConfigurationError):
    """Raised when a schema file cannot be found."""

    def __init__(self, schema_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="SCHEMA_NOT_FOUND",
            message=f"Schema not found: {schema_path}",
            details={"schema_path": schema_path},
            **kwargs,
        )


class SchemaParseError(ConfigurationError):
    """Raised when a schema document is malformed."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="SCHEMA_PARSE_ERROR", message=message, **kwargs)


class ErrorCodes:
    """All layerconf error codes as constants.

    Example:
        if error.code == ErrorCodes.TYPE_COERCION_ERROR:
            fall_back()
    """

    PATH_SYNTAX_ERROR = "PATH_SYNTAX_ERROR"
    PATH_TYPE_CONFLICT = "PATH_TYPE_CONFLICT"
    TYPE_COERCION_ERROR = "TYPE_COERCION_ERROR"
    CONFIG_VALIDATION_ERROR = "CONFIG_VALIDATION_ERROR"
    UNSUPPORTED_VALUE = "UNSUPPORTED_VALUE"
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SOURCE_INVALID = "SOURCE_INVALID"
    SCHEMA_NOT_FOUND = "SCHEMA_NOT_FOUND"
    SCHEMA_PARSE_ERROR = "SCHEMA_PARSE_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
