"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol and a registry that maps an operator
name (``"eq"``, ``"nnull"``, ...) to its evaluation function.

New operators are added by subclassing MemoryOperator and registering the
instance via ``register()``.  Operators the registry does not know about do
not filter anything: ``evaluate`` answers ``True`` for them so that newer
framework operators degrade to "no filtering" instead of failing the query.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .operators import FilterOperator

logger = logging.getLogger("tree_data_provider.evaluator")


def _key(name: FilterOperator | str) -> str:
    return str(getattr(name, "value", name)).lower()


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator | str:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(
        self,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The value resolved from the record, or ``UNDEFINED``.
            condition_value: The operand provided by the filter clause.

        Returns:
            True if the condition is satisfied.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by operator name.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        result = registry.evaluate(FilterOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[str, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[_key(operator.name)] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        """Register multiple operator strategy instances at once."""
        for op in operators:
            self.register(op)

    def unregister(self, name: FilterOperator | str) -> None:
        """Remove an operator from the registry."""
        self._operators.pop(_key(name), None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: FilterOperator | str) -> MemoryOperator | None:
        """Return the registered operator or ``None``."""
        return self._operators.get(_key(name))

    def has(self, name: FilterOperator | str) -> bool:
        return _key(name) in self._operators

    @property
    def supported_operators(self) -> set[str]:
        return set(self._operators.keys())

    # -- evaluation shortcut -------------------------------------------------

    def evaluate(
        self,
        name: FilterOperator | str,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Unregistered operators always match.
        """
        op = self.get(name)
        if op is None:
            logger.debug("No in-memory operator for %r; clause ignored", name)
            return True
        return op.evaluate(field_value, condition_value)
