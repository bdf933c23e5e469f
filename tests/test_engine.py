"""Tests for the client-side query engine."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import pytest

from tree_data_provider.coercion import UNDEFINED
from tree_data_provider.engine import FilterEvaluator, QueryEngine, resolve_field
from tree_data_provider.filters import ComparisonFilter, CompositeFilter
from tree_data_provider.query_options import (
    ListQueryOptions,
    Pagination,
    SortKey,
    SortOrder,
)

if TYPE_CHECKING:
    from tree_data_provider.evaluator import MemoryOperatorRegistry


def cmp(field: str, operator: str, value: Any = None) -> ComparisonFilter:
    return ComparisonFilter(field=field, operator=operator, value=value)


def any_of(*clauses: ComparisonFilter) -> CompositeFilter:
    return CompositeFilter(value=list(clauses))


def ids(records: list[dict[str, Any]]) -> list[Any]:
    return [r["id"] for r in records]


class TestResolveField:
    def test_dotted_path(self) -> None:
        assert resolve_field({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_missing_segments_are_undefined(self) -> None:
        assert resolve_field({"a": {}}, "a.b.c") is UNDEFINED
        assert resolve_field({"a": 5}, "a.b") is UNDEFINED

    def test_none_is_kept_distinct_from_missing(self) -> None:
        assert resolve_field({"a": None}, "a") is None

    def test_list_index(self) -> None:
        assert resolve_field({"tags": ["x", "y"]}, "tags.1") == "y"
        assert resolve_field({"tags": ["x"]}, "tags.4") is UNDEFINED


class TestFilterEvaluator:
    def test_requires_registry(self) -> None:
        with pytest.raises(ValueError, match="registry"):
            FilterEvaluator(None)  # type: ignore[arg-type]

    def test_eq_uses_loose_equality(self, registry: MemoryOperatorRegistry) -> None:
        evaluator = FilterEvaluator(registry)
        assert evaluator.evaluate({"age": 30}, cmp("age", "eq", "30"))
        assert not evaluator.evaluate({"age": 30}, cmp("age", "eq", 31))

    def test_missing_nested_path_is_not_null_false(
        self, registry: MemoryOperatorRegistry
    ) -> None:
        """A record without ``meta`` fails ``meta.flag nnull`` without raising."""
        evaluator = FilterEvaluator(registry)
        assert not evaluator.evaluate({"id": 3}, cmp("meta.flag", "nnull"))

    def test_unknown_operator_does_not_filter(
        self, registry: MemoryOperatorRegistry
    ) -> None:
        evaluator = FilterEvaluator(registry)
        assert evaluator.evaluate({"name": "x"}, cmp("name", "contains", "zzz"))

    def test_composite_is_rejected(self, registry: MemoryOperatorRegistry) -> None:
        evaluator = FilterEvaluator(registry)
        with pytest.raises(TypeError):
            evaluator.evaluate({}, any_of(cmp("a", "eq", 1)))  # type: ignore[arg-type]


class TestScenarios:
    def test_filter_sort_paginate(self, engine: QueryEngine) -> None:
        records = [{"id": 1, "age": 20}, {"id": 2, "age": 30}, {"id": 3, "age": 25}]
        options = ListQueryOptions(
            filters=[cmp("age", "gte", 22)],
            sort=[SortKey(field="age", order=SortOrder.ASC)],
            pagination=Pagination(current=1, page_size=10),
        )
        result = engine.query(records, options)
        assert result.data == [{"id": 3, "age": 25}, {"id": 2, "age": 30}]
        assert result.total == 2

    def test_or_clause(self, engine: QueryEngine) -> None:
        records = [{"id": 1, "age": 20}, {"id": 2, "age": 30}, {"id": 3, "age": 25}]
        options = ListQueryOptions(
            filters=[any_of(cmp("age", "lt", 21), cmp("age", "gt", 28))]
        )
        result = engine.query(records, options)
        assert ids(result.data) == [1, 2]
        assert result.total == 2

    def test_third_page_is_partial(self, engine: QueryEngine) -> None:
        records = [{"id": i} for i in range(25)]
        options = ListQueryOptions(pagination=Pagination(current=3, page_size=10))
        result = engine.query(records, options)
        assert ids(result.data) == list(range(20, 25))
        assert result.total == 25

    def test_missing_parent_with_nnull(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        result = engine.query(
            people, ListQueryOptions(filters=[cmp("meta.flag", "nnull")])
        )
        assert ids(result.data) == [1]


class TestFiltering:
    def test_no_filters_returns_everything(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        result = engine.query(people)
        assert result.data == people
        assert result.total == 3

    def test_top_level_clauses_are_anded_in_sequence(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        c1 = cmp("age", "gte", 21)
        c2 = cmp("name", "ne", "Bob")
        both = engine.apply_filters(people, [c1, c2])
        assert both == engine.apply_filter(engine.apply_filter(people, c1), c2)
        assert ids(both) == [3]

    def test_or_children_see_the_narrowed_set(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        clauses = [
            cmp("age", "gt", 21),
            any_of(cmp("name", "eq", "Ada"), cmp("name", "eq", "Cy")),
        ]
        assert ids(engine.apply_filters(people, clauses)) == [3]

    def test_or_equals_union_of_children(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        c1 = cmp("age", "lt", 26)
        c2 = cmp("age", "gt", 22)
        union = engine.apply_filter(people, any_of(c1, c2))
        assert ids(union) == [1, 3, 2]

    def test_or_deduplicates_by_id(self, engine: QueryEngine) -> None:
        first = {"id": 7, "v": 1}
        twin = {"id": 7, "v": 1}
        other = {"id": 8, "v": 1}
        union = engine.apply_filter(
            [first, twin, other], any_of(cmp("v", "eq", 1), cmp("id", "eq", 7))
        )
        assert union == [first, other]
        assert union[0] is first

    def test_or_without_ids_falls_back_to_reference(self, engine: QueryEngine) -> None:
        a = {"v": 1}
        b = {"v": 1}
        either = any_of(cmp("v", "eq", 1), cmp("v", "gt", 0))
        union = engine.apply_filter([a, b], either)
        assert len(union) == 2

    def test_id_field_is_configurable(self, registry: MemoryOperatorRegistry) -> None:
        engine = QueryEngine(registry, id_field="key")
        a = {"key": "x", "v": 1}
        b = {"key": "x", "v": 2}
        either = any_of(cmp("v", "eq", 1), cmp("v", "eq", 2))
        union = engine.apply_filter([a, b], either)
        assert union == [a]

    def test_nested_or(self, engine: QueryEngine, people: list[dict[str, Any]]) -> None:
        clause = any_of(
            cmp("id", "eq", 1),
            any_of(cmp("id", "eq", 2), cmp("id", "eq", 3)),
        )
        assert ids(engine.apply_filter(people, clause)) == [1, 2, 3]

    def test_empty_result_is_not_an_error(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        result = engine.query(people, ListQueryOptions(filters=[cmp("age", "gt", 99)]))
        assert result.data == []
        assert result.total == 0

    def test_in_and_nin(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        names = ["Ada", "Cy"]
        assert ids(engine.apply_filter(people, cmp("name", "in", names))) == [1, 3]
        assert ids(engine.apply_filter(people, cmp("name", "nin", names))) == [2]


class TestSorting:
    def test_ascending(self, engine: QueryEngine, people: list[dict[str, Any]]) -> None:
        ordered = engine.apply_sort(people, [SortKey(field="age")])
        assert ids(ordered) == [1, 3, 2]

    def test_descending_is_reversed_ascending(self, engine: QueryEngine) -> None:
        records = [{"id": 1, "age": 30}, {"id": 2, "age": 30}, {"id": 3, "age": 20}]
        ordered = engine.apply_sort(records, [SortKey(field="age", order="desc")])
        assert ids(ordered) == [2, 1, 3]

    def test_only_first_key_is_used(self, engine: QueryEngine) -> None:
        records = [
            {"id": 1, "group": "b", "rank": 1},
            {"id": 2, "group": "a", "rank": 2},
            {"id": 3, "group": "a", "rank": 1},
        ]
        ordered = engine.apply_sort(
            records, [SortKey(field="group"), SortKey(field="rank")]
        )
        assert ids(ordered) == [2, 3, 1]

    def test_sort_by_nested_field(self, engine: QueryEngine) -> None:
        records = [{"id": 1, "m": {"n": 2}}, {"id": 2, "m": {"n": 1}}]
        assert ids(engine.apply_sort(records, [SortKey(field="m.n")])) == [2, 1]

    def test_missing_sort_field_does_not_raise(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        ordered = engine.apply_sort(people, [SortKey(field="nope")])
        assert sorted(ids(ordered)) == [1, 2, 3]

    def test_input_is_not_mutated(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        before = list(people)
        engine.apply_sort(people, [SortKey(field="age", order="desc")])
        assert people == before


class TestPagination:
    @pytest.mark.parametrize("size", [0, 1, 9, 10, 11, 25])
    @pytest.mark.parametrize("page_size", [1, 3, 10])
    def test_page_sizes_and_reconstruction(
        self, engine: QueryEngine, size: int, page_size: int
    ) -> None:
        records = [{"id": i} for i in range(size)]
        pages = max(1, math.ceil(size / page_size))
        collected = []
        for current in range(1, pages + 2):
            page = engine.query(
                records,
                ListQueryOptions(
                    pagination=Pagination(current=current, page_size=page_size)
                ),
            )
            expected = max(0, min(page_size, size - (current - 1) * page_size))
            assert len(page.data) == expected
            assert page.total == size
            collected.extend(page.data)
        assert collected == records

    def test_defaults(self, engine: QueryEngine) -> None:
        records = [{"id": i} for i in range(15)]
        assert len(engine.query(records).data) == 10


class TestPurity:
    def test_query_is_idempotent(
        self, engine: QueryEngine, people: list[dict[str, Any]]
    ) -> None:
        options = ListQueryOptions(
            filters=[any_of(cmp("age", "lt", 21), cmp("age", "gt", 28))],
            sort=[SortKey(field="age", order="desc")],
        )
        assert engine.query(people, options) == engine.query(people, options)
