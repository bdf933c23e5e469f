"""Provider configuration."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .query_options import DEFAULT_PAGE_SIZE


class IdStrategy(str, Enum):
    """Built-in id allocation strategies."""

    MAX_PLUS_ONE = "max-plus-one"


class ProviderOptions(BaseModel):
    """
    Settings for :class:`~tree_data_provider.provider.TreeDataProvider`.

    Attributes:
        id_field: Record attribute holding the identifier.
        id_strategy: A built-in strategy, or a callable ``(store, resource)``
            returning the next id (plain or awaitable).
        default_page_size: Page size used when a list call gives none.
        api_url: Value returned by ``get_api_url()``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id_field: str = "id"
    id_strategy: IdStrategy | Callable[..., Any] = IdStrategy.MAX_PLUS_ONE
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    api_url: str = ""
