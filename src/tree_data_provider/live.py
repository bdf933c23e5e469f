"""
Live updates for resources kept in a tree store.

Any write under ``<resource>`` is reported to subscribers of
``resources/<resource>`` as a generic ``"*"`` event.  The event does not say
what changed; clients are expected to refetch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .tree import join_path, split_path
from .utils import call_maybe_async

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .ports.store import ITreeStore, Unsubscribe

logger = logging.getLogger("tree_data_provider.live")

RESOURCE_CHANNEL_PREFIX = "resources"


@dataclass(frozen=True)
class LiveEvent:
    """Notification delivered to live subscribers."""

    channel: str
    type: str = "*"
    payload: dict[str, Any] = field(default_factory=dict)
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class LiveSubscription:
    """Handle returned by :meth:`TreeLiveProvider.subscribe`."""

    def __init__(
        self,
        channel: str,
        path: str,
        types: Sequence[str],
        params: Mapping[str, Any] | None,
        detach: Unsubscribe,
    ) -> None:
        self.channel = channel
        self.path = path
        self.types = tuple(types)
        self.params = dict(params or {})
        self._detach: Unsubscribe | None = detach

    @property
    def active(self) -> bool:
        return self._detach is not None

    async def close(self) -> None:
        """Detach from the store. Calling it again does nothing."""
        detach, self._detach = self._detach, None
        if detach is not None:
            await detach()
            logger.debug("Live subscription on %s closed", self.channel)


def resource_path(channel: str) -> str:
    """``"resources/posts"`` and ``"posts"`` both watch ``posts``."""
    segments = split_path(channel)
    if segments and segments[0] == RESOURCE_CHANNEL_PREFIX:
        segments = segments[1:]
    if not segments:
        raise ValueError(f"Channel {channel!r} does not name a resource")
    return join_path(*segments)


class TreeLiveProvider:
    """
    Subscribe framework callbacks to store changes.

    Every event is delivered with type ``"*"`` whatever *types* the caller
    asked for; the store does not report the kind of change.
    """

    def __init__(self, store: ITreeStore) -> None:
        self._store = store

    async def subscribe(
        self,
        channel: str,
        callback: Callable[[LiveEvent], Any],
        *,
        types: Sequence[str] = ("*",),
        params: Mapping[str, Any] | None = None,
    ) -> LiveSubscription:
        path = resource_path(channel)

        async def on_change() -> None:
            await call_maybe_async(callback, LiveEvent(channel=channel))

        detach = await self._store.subscribe(path, on_change)
        logger.debug("Live subscription on %s watching %r", channel, path)
        return LiveSubscription(channel, path, types, params, detach)

    async def unsubscribe(self, subscription: LiveSubscription) -> None:
        await subscription.close()
