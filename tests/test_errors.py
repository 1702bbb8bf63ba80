"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

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


class TestConfigurationError:
    def test_str_format(self) -> None:
        error = ConfigurationError(code="X", message="boom")
        assert str(error) == "[X] boom"
        assert error.details == {}
        assert error.timestamp

    def test_cause_kept(self) -> None:
        cause = ValueError("inner")
        assert ConfigurationError(code="X", message="m", cause=cause).cause is cause


class TestSubclasses:
    @pytest.mark.parametrize(
        "error, code",
        [
            (PathSyntaxError("a..b", "empty segment"), ErrorCodes.PATH_SYNTAX_ERROR),
            (PathTypeConflictError("a", "mapping", "string"), ErrorCodes.PATH_TYPE_CONFLICT),
            (TypeCoercionError("a", "string", "bool"), ErrorCodes.TYPE_COERCION_ERROR),
            (ConfigValidationError(), ErrorCodes.CONFIG_VALIDATION_ERROR),
            (UnsupportedValueError("bad"), ErrorCodes.UNSUPPORTED_VALUE),
            (SourceNotFoundError("a.yaml"), ErrorCodes.SOURCE_NOT_FOUND),
            (SourceLoadError("a.yaml", "bad"), ErrorCodes.SOURCE_INVALID),
            (SchemaNotFoundError("s.yaml"), ErrorCodes.SCHEMA_NOT_FOUND),
            (SchemaParseError("bad"), ErrorCodes.SCHEMA_PARSE_ERROR),
        ],
    )
    def test_codes(self, error: ConfigurationError, code: str) -> None:
        assert isinstance(error, ConfigurationError)
        assert error.code == code

    def test_path_syntax_properties(self) -> None:
        error = PathSyntaxError("a[", "unmatched '['")
        assert error.expression == "a["
        assert error.reason == "unmatched '['"
        assert "a[" in error.message

    def test_conflict_at_root_message(self) -> None:
        assert "<root>" in PathTypeConflictError("", "mapping", "string").message

    def test_validation_error_defaults(self) -> None:
        assert ConfigValidationError().errors == []


class TestErrorCodes:
    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            ErrorCodes().PATH_SYNTAX_ERROR = "x"  # type: ignore[misc]
