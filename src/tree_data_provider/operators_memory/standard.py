"""Standard comparison operators: eq, ne, lt, gt, lte, gte."""

from __future__ import annotations

import operator
from typing import Any

from ..coercion import loose_compare, loose_equals
from ..evaluator import MemoryOperator
from ..operators import FilterOperator


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return loose_equals(field_value, condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not loose_equals(field_value, condition_value)


class LessThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return loose_compare(field_value, condition_value, operator.lt)


class GreaterThanOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return loose_compare(field_value, condition_value, operator.gt)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return loose_compare(field_value, condition_value, operator.le)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return loose_compare(field_value, condition_value, operator.ge)
