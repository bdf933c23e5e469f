"""Redis implementation of the tree store."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from ..exceptions import StoreUnavailableError
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
    from collections.abc import Awaitable, Callable, Mapping

    from redis.asyncio import Redis
    from redis.asyncio.client import PubSub

    from ..ports.store import ChangeCallback, Unsubscribe

logger = logging.getLogger("tree_data_provider.redis_store")


class RedisTreeStore(ITreeStore):
    """
    Tree store backed by Redis.

    Each top-level segment (``posts`` in ``posts/3/title``) is one JSON
    document stored at ``{prefix}:{segment}``.  Writes below the top level
    read, modify and write back that document; concurrent writers in this
    process are serialized per document, writers in other processes are not.

    Every mutation publishes the changed path on ``{prefix}:changes:{segment}``
    so subscribers in any process are notified.
    """

    def __init__(self, redis_client: Redis[bytes], *, prefix: str = "tree") -> None:
        """
        Initialize RedisTreeStore.

        Args:
            redis_client: An initialized redis.asyncio.Redis client.
            prefix: Key prefix for documents and change channels.
        """
        self._redis = redis_client
        self._prefix = prefix
        self._locks: dict[str, asyncio.Lock] = {}

    def _doc_key(self, root: str) -> str:
        return f"{self._prefix}:{root}"

    def _channel(self, root: str) -> str:
        return f"{self._prefix}:changes:{root}"

    def _lock_for(self, root: str) -> asyncio.Lock:
        return self._locks.setdefault(root, asyncio.Lock())

    @staticmethod
    def _root_of(path: str) -> tuple[str, list[str]]:
        segments = split_path(path)
        if not segments:
            raise ValueError("A path below the store root is required")
        return segments[0], segments

    async def _call(self, action: str, coro: Awaitable[Any]) -> Any:
        try:
            return await coro
        except RedisError as e:
            logger.warning("Redis %s failed: %s", action, e)
            raise StoreUnavailableError(f"Redis {action} failed: {e}") from e

    async def _load(self, root: str) -> Any:
        raw = await self._call("get", self._redis.get(self._doc_key(root)))
        if not raw:
            return None
        return json.loads(raw)

    # -- reads -----------------------------------------------------------------

    async def get(self, path: str) -> NodeSnapshot:
        root, segments = self._root_of(path)
        document = await self._load(root)
        node = get_node({root: document} if document is not None else {}, segments)
        return NodeSnapshot(path=join_path(path), value=materialise(node))

    # -- writes ----------------------------------------------------------------

    async def set(self, path: str, value: Any) -> None:
        await self._mutate(path, lambda tree, segments: set_node(tree, segments, value))

    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        await self._mutate(
            path, lambda tree, segments: update_node(tree, segments, values)
        )

    async def remove(self, path: str) -> None:
        await self.set(path, None)

    async def _mutate(
        self,
        path: str,
        change: Callable[[Any, list[str]], Any],
    ) -> None:
        root, segments = self._root_of(path)
        key = self._doc_key(root)
        async with self._lock_for(root):
            document = await self._load(root)
            tree = change({root: document} if document is not None else {}, segments)
            updated = tree.get(root) if isinstance(tree, dict) else None
            if updated is None:
                await self._call("delete", self._redis.delete(key))
            else:
                await self._call("set", self._redis.set(key, json.dumps(updated)))
        await self._call(
            "publish", self._redis.publish(self._channel(root), join_path(path))
        )

    # -- subscriptions ---------------------------------------------------------

    async def subscribe(self, path: str, on_change: ChangeCallback) -> Unsubscribe:
        root, segments = self._root_of(path)
        channel = self._channel(root)
        pubsub = self._redis.pubsub()
        await self._call("subscribe", pubsub.subscribe(channel))
        task = asyncio.create_task(self._listen(pubsub, segments, on_change))
        logger.debug("Listening on %s for %r", channel, path)

        closed = False

        async def unsubscribe() -> None:
            nonlocal closed
            if closed:
                return
            closed = True
            task.cancel()
            try:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            finally:
                try:
                    await pubsub.unsubscribe(channel)
                except RedisError as e:
                    logger.warning("Redis unsubscribe from %s failed: %s", channel, e)
                finally:
                    await pubsub.aclose()
            logger.debug("Stopped listening on %s for %r", channel, path)

        return unsubscribe

    async def _listen(
        self,
        pubsub: PubSub,
        watched: list[str],
        on_change: ChangeCallback,
    ) -> None:
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                data = message.get("data")
                changed = data.decode() if isinstance(data, bytes) else str(data)
                if not paths_overlap(watched, split_path(changed)):
                    continue
                try:
                    await call_maybe_async(on_change)
                except Exception:  # noqa: BLE001
                    logger.exception(
                        "Change listener for %r failed", "/".join(watched)
                    )
        except RedisError as e:
            logger.error("Change feed for %r lost: %s", "/".join(watched), e)
