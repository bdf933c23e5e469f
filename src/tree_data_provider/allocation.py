"""
Id allocation for newly created records.

The default strategy scans the resource for the largest numeric id and adds
one.  It is only collision-free while a single writer creates records, which
is why the provider holds a per-resource lock around allocate-and-write.
"""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Any, Protocol

from .coercion import UNDEFINED, to_number
from .config import IdStrategy, ProviderOptions
from .exceptions import IdAllocationError, StoreError
from .tree import child_values
from .utils import call_maybe_async

if TYPE_CHECKING:
    from collections.abc import Callable

    from .ports.store import ITreeStore

logger = logging.getLogger("tree_data_provider.allocation")

_INT_RE = re.compile(r"^[+-]?\d+$")


class IIdAllocator(Protocol):
    """Protocol for id allocation strategies."""

    async def allocate(self, resource: str) -> Any:
        """Return the id for the next record of *resource*."""
        ...


class MaxPlusOneAllocator(IIdAllocator):
    """
    ``max(existing numeric ids) + 1``; ``1`` for an absent or empty resource.

    Ids that do not read as numbers are ignored.
    """

    def __init__(self, store: ITreeStore, *, id_field: str = "id") -> None:
        self._store = store
        self._id_field = id_field

    async def allocate(self, resource: str) -> int:
        snapshot = await self._store.get(resource)
        biggest = 0
        for record in child_values(snapshot.value):
            if not isinstance(record, dict):
                continue
            value = _integral_id(record.get(self._id_field, UNDEFINED))
            if value is not None and value > biggest:
                biggest = value
        return biggest + 1


def _integral_id(value: Any) -> int | None:
    """Exact integer reading of an id; floats and numeric text are floored."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        return int(value.strip())
    number = to_number(value)
    if not math.isfinite(number):
        return None
    return math.floor(number)


class CallableIdAllocator(IIdAllocator):
    """Delegates to a user function ``(store, resource) -> id``."""

    def __init__(self, store: ITreeStore, func: Callable[..., Any]) -> None:
        self._store = store
        self._func = func

    async def allocate(self, resource: str) -> Any:
        try:
            new_id = await call_maybe_async(self._func, self._store, resource)
        except StoreError:
            raise
        except Exception as e:
            raise IdAllocationError(resource, str(e)) from e
        if new_id is None:
            raise IdAllocationError(resource, "id function returned None")
        return new_id


def build_allocator(options: ProviderOptions, store: ITreeStore) -> IIdAllocator:
    """Create the allocator configured by *options*."""
    strategy = options.id_strategy
    if strategy is IdStrategy.MAX_PLUS_ONE:
        return MaxPlusOneAllocator(store, id_field=options.id_field)
    if callable(strategy):
        logger.debug("Using custom id function %r", strategy)
        return CallableIdAllocator(store, strategy)
    raise ValueError(f"Unsupported id strategy: {strategy!r}")
