"""
In-memory operator implementations.

Provides concrete MemoryOperator subclasses for each comparison
FilterOperator and a factory function to create registries.

Usage::

    from tree_data_provider.operators_memory import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(FilterOperator.EQ, actual, expected)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .null import IsNotNullOperator, IsNullOperator
from .set import InOperator, NotInOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Returns a fresh MemoryOperatorRegistry, so callers may register extra
    operators without affecting other providers.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(FilterOperator.EQ, 30, "30")
        True
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        # Comparison
        EqualOperator(),
        NotEqualOperator(),
        LessThanOperator(),
        GreaterThanOperator(),
        LessEqualOperator(),
        GreaterEqualOperator(),
        # Null
        IsNullOperator(),
        IsNotNullOperator(),
        # Set
        InOperator(),
        NotInOperator(),
    )
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
