"""Set operators: in, nin."""

from __future__ import annotations

from typing import Any

from ..coercion import same_value_zero
from ..evaluator import MemoryOperator
from ..operators import FilterOperator


def _members(condition_value: Any) -> list[Any]:
    if isinstance(condition_value, list | tuple | set | frozenset):
        return list(condition_value)
    return [condition_value]


def _contains(condition_value: Any, field_value: Any) -> bool:
    return any(same_value_zero(field_value, m) for m in _members(condition_value))


class InOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _contains(condition_value, field_value)


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NIN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not _contains(condition_value, field_value)
