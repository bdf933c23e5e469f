"""
Loose comparison policy used by the in-memory filter operators.

Records come out of the tree store as JSON-like values and framework operands
are frequently strings (``"30"`` for ``30``), so matching follows coercive
rules rather than Python's strict ``==``:

- ``UNDEFINED`` (a path that resolved to nothing) and ``None`` equal each
  other and nothing else.
- Booleans take part in comparisons as the numbers ``0`` and ``1``.
- A number compared with a string converts the string to a number
  (``""`` is ``0``, unparsable text is ``NaN``).
- Relational operators compare two strings lexicographically and everything
  else numerically. ``NaN`` on either side makes them ``False``.
- Null checks use falsiness: ``UNDEFINED``, ``None``, ``False``, ``0``,
  ``NaN`` and ``""``. Containers are never null.
- Set membership uses SameValueZero: strict, type-sensitive equality where
  ``NaN`` matches ``NaN``.
"""

from __future__ import annotations

import math
import operator
import re
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from collections.abc import Callable

_NUMERIC_RE = re.compile(
    r"^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity)$"
)


class _Undefined:
    """Marker for a field path that does not exist on a record."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Final = _Undefined()


def is_number(value: Any) -> bool:
    """True for ints and floats, excluding booleans."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _is_container(value: Any) -> bool:
    return isinstance(value, dict | list | tuple)


def _is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def to_number(value: Any) -> float:
    """Numeric reading of *value*; ``NaN`` when there is none."""
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if is_number(value):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if not _NUMERIC_RE.match(text):
            return math.nan
        return float(text.replace("Infinity", "inf"))
    return math.nan


def loose_equals(left: Any, right: Any) -> bool:
    """Coerced equality between a record value and a filter operand."""
    if _is_nullish(left) or _is_nullish(right):
        return _is_nullish(left) and _is_nullish(right)

    if isinstance(left, bool):
        left = int(left)
    if isinstance(right, bool):
        right = int(right)

    if is_number(left) and is_number(right):
        return bool(left == right)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if is_number(left) and isinstance(right, str):
        return left == to_number(right)
    if isinstance(left, str) and is_number(right):
        return to_number(left) == right

    if _is_container(left) or _is_container(right):
        return _is_container(left) and _is_container(right) and left == right
    return bool(left == right)


def loose_compare(
    left: Any,
    right: Any,
    op: Callable[[Any, Any], bool],
) -> bool:
    """
    Apply a relational *op* (``operator.lt`` and friends) with coercion.

    Two strings compare as strings, two numbers as numbers; any other pairing
    is compared numerically and fails when either side is ``NaN``.
    """
    if isinstance(left, str) and isinstance(right, str):
        return bool(op(left, right))
    if is_number(left) and is_number(right):
        if _is_nan(left) or _is_nan(right):
            return False
        return bool(op(left, right))
    x, y = to_number(left), to_number(right)
    if math.isnan(x) or math.isnan(y):
        return False
    return bool(op(x, y))


def loose_less_than(left: Any, right: Any) -> bool:
    return loose_compare(left, right, operator.lt)


def is_falsy(value: Any) -> bool:
    """Falsiness as seen by the ``null`` / ``nnull`` filter operators."""
    if _is_nullish(value):
        return True
    if isinstance(value, bool):
        return not value
    if is_number(value):
        return value == 0 or _is_nan(value)
    if isinstance(value, str):
        return value == ""
    return False


def same_value_zero(left: Any, right: Any) -> bool:
    """Strict equality used for set membership (``NaN`` equals ``NaN``)."""
    if is_number(left) and is_number(right):
        return bool(left == right) or (_is_nan(left) and _is_nan(right))
    if isinstance(left, bool) or isinstance(right, bool):
        return left is right
    if _is_nullish(left) or _is_nullish(right):
        return left is right
    if isinstance(left, str) != isinstance(right, str):
        return False
    if is_number(left) or is_number(right):
        return False
    return bool(left == right)
