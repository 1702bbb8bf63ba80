"""Tests for the configuration value model."""

from __future__ import annotations

from collections import OrderedDict

import pytest

from layerconf.errors import UnsupportedValueError
from layerconf.value import ValueKind, copy_value, kind_of, normalize, type_name


class TestKindOf:
    @pytest.mark.parametrize(
        "value, kind",
        [
            (None, ValueKind.NULL),
            (True, ValueKind.BOOL),
            (0, ValueKind.NUMBER),
            (2.5, ValueKind.NUMBER),
            ("x", ValueKind.STRING),
            ([1], ValueKind.SEQUENCE),
            ((1,), ValueKind.SEQUENCE),
            ({"a": 1}, ValueKind.MAPPING),
        ],
    )
    def test_closed_set(self, value, kind) -> None:
        assert kind_of(value) is kind

    def test_bool_is_not_number(self) -> None:
        assert kind_of(False) is ValueKind.BOOL

    def test_unsupported_type(self) -> None:
        with pytest.raises(UnsupportedValueError):
            kind_of({1, 2})

    def test_type_name(self) -> None:
        assert type_name({}) == "mapping"
        assert type_name(None) == "null"


class TestNormalize:
    def test_returns_fresh_copy(self) -> None:
        original = {"a": {"b": [1, 2]}}
        result = normalize(original)
        assert result == original
        result["a"]["b"].append(3)
        assert original["a"]["b"] == [1, 2]

    def test_tuples_become_lists(self) -> None:
        assert normalize({"a": (1, (2, 3))}) == {"a": [1, [2, 3]]}

    def test_mappings_become_dicts_keeping_order(self) -> None:
        result = normalize(OrderedDict([("z", 1), ("a", 2)]))
        assert type(result) is dict
        assert list(result) == ["z", "a"]

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError, match="keys must be strings"):
            normalize({1: "x"})

    def test_non_finite_float_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError):
            normalize({"a": float("nan")})

    def test_cycle_rejected(self) -> None:
        tree: dict = {"a": {}}
        tree["a"]["back"] = tree
        with pytest.raises(UnsupportedValueError, match="cycle"):
            normalize(tree)

    def test_shared_subtree_is_copied_not_rejected(self) -> None:
        shared = {"x": 1}
        result = normalize({"a": shared, "b": shared})
        assert result == {"a": {"x": 1}, "b": {"x": 1}}
        assert result["a"] is not result["b"]

    def test_unsupported_leaf_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError):
            normalize({"when": object()})


class TestCopyValue:
    def test_deep_copy(self) -> None:
        tree = {"a": [{"b": 1}]}
        copied = copy_value(tree)
        copied["a"][0]["b"] = 2
        assert tree["a"][0]["b"] == 1


class TestNumberRange:
    def test_integer_beyond_float_range_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError, match="float64 range"):
            normalize({"n": 10**400})

    def test_negative_integer_beyond_float_range_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError):
            normalize([-(10**400)])

    def test_large_integer_within_range_kept(self) -> None:
        assert normalize({"n": 10**300}) == {"n": 10**300}
