"""InMemoryTreeStore - nested-dict tree store for tests and single-process use."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any

from ..ports.store import ITreeStore, NodeSnapshot
from ..tree import (
    get_node,
    join_path,
    materialise,
    paths_overlap,
    set_node,
    split_path,
    update_node,
)
from ..utils import call_maybe_async

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..ports.store import ChangeCallback, Unsubscribe

logger = logging.getLogger("tree_data_provider.memory_store")


class InMemoryTreeStore(ITreeStore):
    """In-memory implementation of ``ITreeStore``.

    Listeners are awaited inline after each mutation, so a write returns only
    once every interested subscriber has been told.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._root: Any = set_node({}, [], dict(initial or {})) or {}
        self._listeners: dict[int, tuple[list[str], ChangeCallback]] = {}
        self._tokens = itertools.count(1)

    async def get(self, path: str) -> NodeSnapshot:
        segments = split_path(path)
        return NodeSnapshot(
            path=join_path(path),
            value=materialise(get_node(self._root, segments)),
        )

    async def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        self._root = set_node(self._root, segments, value) or {}
        await self._notify(segments)

    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        segments = split_path(path)
        self._root = update_node(self._root, segments, values) or {}
        await self._notify(segments)

    async def remove(self, path: str) -> None:
        await self.set(path, None)

    async def subscribe(self, path: str, on_change: ChangeCallback) -> Unsubscribe:
        token = next(self._tokens)
        self._listeners[token] = (split_path(path), on_change)
        logger.debug("Listener %d attached to %r", token, path)

        async def unsubscribe() -> None:
            if self._listeners.pop(token, None) is not None:
                logger.debug("Listener %d detached from %r", token, path)

        return unsubscribe

    async def _notify(self, changed: list[str]) -> None:
        """Call every listener watching an overlapping path.

        A failing listener is logged and does not stop the others; the write
        it reacts to has already been applied.
        """
        for watched, callback in list(self._listeners.values()):
            if not paths_overlap(watched, changed):
                continue
            try:
                await call_maybe_async(callback)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Change listener for %r failed", "/".join(watched)
                )

    # ── Test helpers ─────────────────────────────────────────────

    def dump(self) -> Any:
        """Return a deep copy of the whole stored tree."""
        return materialise(self._root)

    def clear(self) -> None:
        self._root = {}

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
