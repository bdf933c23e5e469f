"""
Client-side query engine.

The tree store can only hand back whole subtrees, so a ``getList`` call
pulls the resource's records and narrows them here:

1. filters   - top-level clauses ANDed in order; an OR clause evaluates each
               child against the current candidates and unions the results
2. sort      - first sort key only; ascending comparator, descending is the
               ascending order reversed
3. paginate  - 1-based page slice; ``total`` counts the filtered set

The engine is synchronous and free of I/O.  It never raises for empty
results or for field paths that do not exist.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any

from .coercion import UNDEFINED, loose_less_than
from .filters import CompositeFilter
from .query_options import ListQueryOptions, SortOrder

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .evaluator import MemoryOperatorRegistry
    from .filters import ComparisonFilter
    from .query_options import Pagination, SortKey

logger = logging.getLogger("tree_data_provider.engine")

Record = dict[str, Any]


def resolve_field(record: Any, path: str) -> Any:
    """
    Resolve a dot-separated field path on *record*.

    Mapping segments are looked up by key, digit segments index into lists.
    Anything that cannot be followed yields ``UNDEFINED``.
    """
    value = record
    for part in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(part, UNDEFINED)
        elif isinstance(value, list | tuple) and part.isdigit():
            index = int(part)
            value = value[index] if index < len(value) else UNDEFINED
        else:
            return UNDEFINED
    return value


@dataclass(frozen=True)
class QueryResult:
    """Page of matching records plus the number matched before paging."""

    data: list[Record] = field(default_factory=list)
    total: int = 0


class FilterEvaluator:
    """Answers whether one record satisfies one comparison clause."""

    def __init__(self, registry: MemoryOperatorRegistry) -> None:
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() from operators_memory to create one."
            )
        self._registry = registry

    def evaluate(self, record: Any, clause: ComparisonFilter) -> bool:
        if isinstance(clause, CompositeFilter):
            raise TypeError(
                "OR clauses are resolved over candidate sets by QueryEngine, "
                "not per record"
            )
        actual = resolve_field(record, clause.field)
        return self._registry.evaluate(clause.operator, actual, clause.value)

    def select(self, records: Iterable[Any], clause: ComparisonFilter) -> list[Any]:
        """Return the records satisfying *clause*, in input order."""
        return [record for record in records if self.evaluate(record, clause)]


class QueryEngine:
    """
    Emulates a relational list query over an in-memory record snapshot.

    OR unions are deduplicated by the record's ``id_field``; records without
    a usable id fall back to object identity.
    """

    def __init__(
        self,
        registry: MemoryOperatorRegistry,
        *,
        id_field: str = "id",
    ) -> None:
        self._evaluator = FilterEvaluator(registry)
        self._id_field = id_field

    @property
    def evaluator(self) -> FilterEvaluator:
        return self._evaluator

    def query(
        self,
        records: Iterable[Record],
        options: ListQueryOptions | None = None,
    ) -> QueryResult:
        options = options or ListQueryOptions()
        matched = self.apply_filters(records, options.filters)
        ordered = self.apply_sort(matched, options.sort)
        return QueryResult(
            data=self.paginate(ordered, options.pagination),
            total=len(ordered),
        )

    # -- filtering -------------------------------------------------------------

    def apply_filters(
        self,
        records: Iterable[Record],
        clauses: Sequence[ComparisonFilter | CompositeFilter],
    ) -> list[Record]:
        candidates = list(records)
        for clause in clauses:
            candidates = self.apply_filter(candidates, clause)
        return candidates

    def apply_filter(
        self,
        candidates: Sequence[Record],
        clause: ComparisonFilter | CompositeFilter,
    ) -> list[Record]:
        if isinstance(clause, CompositeFilter):
            return self._union(
                self.apply_filter(candidates, child) for child in clause.value
            )
        return self._evaluator.select(candidates, clause)

    def _union(self, subsets: Iterable[list[Record]]) -> list[Record]:
        seen: set[Hashable] = set()
        merged: list[Record] = []
        for subset in subsets:
            for record in subset:
                key = self._identity(record)
                if key in seen:
                    continue
                seen.add(key)
                merged.append(record)
        return merged

    def _identity(self, record: Any) -> Hashable:
        value = (
            record.get(self._id_field, UNDEFINED)
            if isinstance(record, Mapping)
            else UNDEFINED
        )
        if value is UNDEFINED or value is None or not isinstance(value, Hashable):
            return ("ref", id(record))
        return ("id", type(value).__name__, value)

    # -- ordering --------------------------------------------------------------

    def apply_sort(
        self,
        records: Iterable[Record],
        keys: Sequence[SortKey],
    ) -> list[Record]:
        if not keys:
            return list(records)
        if len(keys) > 1:
            logger.debug(
                "Only the first sort key is applied; ignoring %s",
                [k.field for k in keys[1:]],
            )
        key = keys[0]

        def compare(a: Record, b: Record) -> int:
            left = resolve_field(a, key.field)
            right = resolve_field(b, key.field)
            return -1 if loose_less_than(left, right) else 1

        ordered = sorted(records, key=cmp_to_key(compare))
        if key.order is SortOrder.DESC:
            ordered.reverse()
        return ordered

    # -- pagination ------------------------------------------------------------

    @staticmethod
    def paginate(records: Sequence[Record], pagination: Pagination) -> list[Record]:
        return list(records[pagination.start : pagination.end])
