"""Small helpers shared by the store adapters and the live provider."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args)
    if inspect.isawaitable(result):
        return await result
    return result
