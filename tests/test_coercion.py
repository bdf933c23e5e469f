"""Tests for the loose comparison policy."""

from __future__ import annotations

import math
import operator
from typing import Any

import pytest

from tree_data_provider.coercion import (
    UNDEFINED,
    is_falsy,
    loose_compare,
    loose_equals,
    loose_less_than,
    same_value_zero,
    to_number,
)


class TestUndefined:
    def test_singleton_and_falsy(self) -> None:
        assert type(UNDEFINED)() is UNDEFINED
        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"


class TestToNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30", 30.0),
            (" 4.5 ", 4.5),
            ("", 0.0),
            (None, 0.0),
            (True, 1.0),
            (False, 0.0),
            (7, 7.0),
            ("1e3", 1000.0),
            ("-Infinity", -math.inf),
        ],
    )
    def test_numeric_readings(self, value: Any, expected: float) -> None:
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", "12px", UNDEFINED, [1], {"a": 1}])
    def test_not_a_number(self, value: Any) -> None:
        assert math.isnan(to_number(value))


class TestLooseEquals:
    def test_number_and_numeric_string(self) -> None:
        assert loose_equals(30, "30")
        assert loose_equals("0", 0)
        assert not loose_equals("abc", 0)

    def test_empty_string_is_zero(self) -> None:
        assert loose_equals(0, "")

    def test_booleans_compare_as_numbers(self) -> None:
        assert loose_equals(True, 1)
        assert loose_equals(False, "0")
        assert not loose_equals(True, "true")

    def test_none_and_undefined(self) -> None:
        assert loose_equals(None, UNDEFINED)
        assert loose_equals(UNDEFINED, UNDEFINED)
        assert not loose_equals(None, 0)
        assert not loose_equals(UNDEFINED, "")

    def test_nan_never_equal(self) -> None:
        assert not loose_equals(math.nan, math.nan)

    def test_containers_by_value(self) -> None:
        assert loose_equals([1, 2], [1, 2])
        assert not loose_equals([1], "1")


class TestLooseCompare:
    def test_strings_are_lexicographic(self) -> None:
        assert loose_less_than("10", "9")

    def test_mixed_types_compare_numerically(self) -> None:
        assert loose_less_than("9", 10)
        assert loose_compare(25, "22", operator.ge)

    def test_nan_makes_every_relation_false(self) -> None:
        for op in (operator.lt, operator.gt, operator.le, operator.ge):
            assert not loose_compare("abc", 1, op)
            assert not loose_compare(UNDEFINED, 1, op)

    def test_none_is_zero(self) -> None:
        assert loose_less_than(None, 1)


class TestIsFalsy:
    @pytest.mark.parametrize("value", [None, UNDEFINED, False, 0, 0.0, "", math.nan])
    def test_falsy(self, value: Any) -> None:
        assert is_falsy(value)

    @pytest.mark.parametrize("value", ["0", 1, True, "x", [], {}])
    def test_truthy(self, value: Any) -> None:
        assert not is_falsy(value)


class TestSameValueZero:
    def test_strict_types(self) -> None:
        assert same_value_zero(1, 1.0)
        assert not same_value_zero(1, "1")
        assert not same_value_zero(1, True)
        assert not same_value_zero(None, UNDEFINED)

    def test_nan_matches_nan(self) -> None:
        assert same_value_zero(math.nan, math.nan)
