"""Null check operators: null, nnull."""

from __future__ import annotations

from typing import Any

from ..coercion import is_falsy
from ..evaluator import MemoryOperator
from ..operators import FilterOperator


class IsNullOperator(MemoryOperator):
    """True for missing values, ``None``, ``False``, ``0``, ``NaN`` and ``""``."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return is_falsy(field_value)


class IsNotNullOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NNULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return not is_falsy(field_value)
