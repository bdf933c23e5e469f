"""ITreeStore - protocol for hierarchical key-value stores."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

ChangeCallback = Callable[[], Optional[Awaitable[None]]]
Unsubscribe = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class NodeSnapshot:
    """Value read at a path. ``value`` is ``None`` when the node is absent."""

    path: str
    value: Any = None

    @property
    def exists(self) -> bool:
        return self.value is not None

    @property
    def key(self) -> str | None:
        return self.path.rsplit("/", 1)[-1] if self.path else None


@runtime_checkable
class ITreeStore(Protocol):
    """
    Slash-separated path store with change notification.

    Writing ``None`` removes a node.  ``subscribe`` calls *on_change* after
    any mutation at, below or above the watched path and returns an async
    callable that detaches the listener.
    """

    async def get(self, path: str) -> NodeSnapshot: ...

    async def set(self, path: str, value: Any) -> None: ...

    async def update(self, path: str, values: Mapping[str, Any]) -> None: ...

    async def remove(self, path: str) -> None: ...

    async def subscribe(self, path: str, on_change: ChangeCallback) -> Unsubscribe: ...
