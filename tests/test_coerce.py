"""Tests for read-time coercion."""

from __future__ import annotations

import sys

import pytest

from layerconf.coerce import coerce, is_numeric_literal
from layerconf.errors import TypeCoercionError


class TestToBool:
    def test_bool_passes(self) -> None:
        assert coerce(True, bool) is True

    @pytest.mark.parametrize("value", ["true", "false", 1, 0, None, [], {}])
    def test_everything_else_fails(self, value) -> None:
        with pytest.raises(TypeCoercionError):
            coerce(value, bool)


class TestToInt:
    @pytest.mark.parametrize("value, expected", [(3, 3), (3.0, 3), ("42", 42), ("-7", -7), ("1e3", 1000)])
    def test_integral_values(self, value, expected) -> None:
        result = coerce(value, int)
        assert result == expected
        assert type(result) is int

    @pytest.mark.parametrize("value", [2.5, "2.5", "abc", True, None, "1e999", " 1"])
    def test_rejected(self, value) -> None:
        with pytest.raises(TypeCoercionError):
            coerce(value, int)


class TestToFloat:
    @pytest.mark.parametrize("value, expected", [(1, 1.0), (2.5, 2.5), ("2.5", 2.5), (".5", 0.5), ("-1E-2", -0.01)])
    def test_numeric_values(self, value, expected) -> None:
        result = coerce(value, float)
        assert result == expected
        assert type(result) is float

    @pytest.mark.parametrize("value", ["nan", "inf", "1_000", "", False, None, ["1"], "1e999"])
    def test_rejected(self, value) -> None:
        with pytest.raises(TypeCoercionError):
            coerce(value, float)


class TestToStr:
    def test_string(self) -> None:
        assert coerce("x", str) == "x"

    def test_bool_exact(self) -> None:
        assert coerce(True, str) == "true"
        assert coerce(False, str) == "false"

    def test_numbers(self) -> None:
        assert coerce(5432, str) == "5432"
        assert coerce(0.5, str) == "0.5"

    @pytest.mark.parametrize("value", [None, [], {"a": 1}])
    def test_rejected(self, value) -> None:
        with pytest.raises(TypeCoercionError):
            coerce(value, str)


class TestCoercionError:
    def test_error_fields(self) -> None:
        with pytest.raises(TypeCoercionError) as exc_info:
            coerce("true", bool, "flags.enabled")
        error = exc_info.value
        assert error.path == "flags.enabled"
        assert error.from_kind == "string"
        assert error.to_type == "bool"
        assert error.code == "TYPE_COERCION_ERROR"

    def test_unsupported_target(self) -> None:
        with pytest.raises(TypeError, match="Unsupported target type"):
            coerce("x", list)


class TestNumericLiteral:
    @pytest.mark.parametrize("text", ["0", "+1", "-1.", "1.5", ".5", "1e10", "2E-3"])
    def test_valid(self, text: str) -> None:
        assert is_numeric_literal(text)

    @pytest.mark.parametrize("text", ["", ".", "e5", "1e", "0x10", "1,000", "nan", "Infinity", "1 "])
    def test_invalid(self, text: str) -> None:
        assert not is_numeric_literal(text)


class TestOversizedNumbers:
    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"), reason="interpreter has no int conversion limit"
    )
    def test_digit_string_beyond_conversion_limit(self) -> None:
        text = "1" * (sys.get_int_max_str_digits() + 1)
        with pytest.raises(TypeCoercionError) as exc_info:
            coerce(text, int, "n")
        assert exc_info.value.from_kind == "string"

    def test_integer_beyond_float_range(self) -> None:
        with pytest.raises(TypeCoercionError) as exc_info:
            coerce(10**400, float, "n")
        assert exc_info.value.to_type == "float"
