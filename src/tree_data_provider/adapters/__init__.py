"""Tree store adapters."""

from __future__ import annotations

from .memory import InMemoryTreeStore
from .redis_store import RedisTreeStore

__all__ = ["InMemoryTreeStore", "RedisTreeStore"]
