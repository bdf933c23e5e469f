from enum import Enum


class FilterOperator(str, Enum):
    """Filter operators understood by the data-access framework."""

    # Comparison
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    GT = "gt"
    LTE = "lte"
    GTE = "gte"

    # Null checks
    NULL = "null"
    NNULL = "nnull"

    # Set membership
    IN = "in"
    NIN = "nin"

    # Logical
    OR = "or"


COMPARISON_OPERATORS: frozenset[str] = frozenset(
    m.value for m in FilterOperator if m is not FilterOperator.OR
)
