"""Shared fixtures for tree data provider tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio

from tree_data_provider.adapters import InMemoryTreeStore
from tree_data_provider.engine import QueryEngine
from tree_data_provider.operators_memory import build_default_registry
from tree_data_provider.provider import TreeDataProvider

if TYPE_CHECKING:
    from tree_data_provider.evaluator import MemoryOperatorRegistry


@pytest.fixture
def registry() -> MemoryOperatorRegistry:
    return build_default_registry()


@pytest.fixture
def engine(registry: MemoryOperatorRegistry) -> QueryEngine:
    return QueryEngine(registry)


@pytest.fixture
def people() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Ada", "age": 20, "meta": {"flag": True}},
        {"id": 2, "name": "Bob", "age": 30, "meta": {"flag": False}},
        {"id": 3, "name": "Cy", "age": 25},
    ]


@pytest.fixture
def posts() -> dict[str, Any]:
    return {
        "1": {"id": 1, "title": "Hello", "views": 10, "status": "draft"},
        "2": {"id": 2, "title": "World", "views": 50, "status": "published"},
        "3": {"id": 3, "title": "Again", "views": 30, "status": "published"},
    }


@pytest_asyncio.fixture
async def store(posts: dict[str, Any]) -> InMemoryTreeStore:
    return InMemoryTreeStore({"posts": posts})


@pytest_asyncio.fixture
async def provider(store: InMemoryTreeStore) -> TreeDataProvider:
    return TreeDataProvider(store)
