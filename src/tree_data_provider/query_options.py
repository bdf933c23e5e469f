"""
Query options for filtering, ordering and pagination.

``ListQueryOptions`` bundles everything a ``getList`` call asks for.  The
filters define *what* to keep; sort and pagination define *how* the result
is shaped.  Options are consumed by :class:`~tree_data_provider.engine.QueryEngine`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidQueryError
from .filters import ComparisonFilter, CompositeFilter, FilterFactory

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_PAGE_SIZE = 10


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortKey(BaseModel):
    """One ordering instruction: field path plus direction."""

    model_config = ConfigDict(frozen=True)

    field: str
    order: SortOrder = SortOrder.ASC

    @field_validator("order", mode="before")
    @classmethod
    def _normalise_order(cls, v: Any) -> Any:
        if v is None:
            return SortOrder.ASC
        return v.lower() if isinstance(v, str) else v

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "order": self.order.value}


class Pagination(BaseModel):
    """
    1-based page number and page size.

    Missing or zero values fall back to the defaults, matching the framework's
    ``current || 1`` handling.  Negative values are rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, alias="pageSize")

    @field_validator("current", mode="before")
    @classmethod
    def _default_current(cls, v: Any) -> Any:
        return v or 1

    @field_validator("page_size", mode="before")
    @classmethod
    def _default_page_size(cls, v: Any) -> Any:
        return v or DEFAULT_PAGE_SIZE

    @property
    def start(self) -> int:
        return (self.current - 1) * self.page_size

    @property
    def end(self) -> int:
        return self.current * self.page_size

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current, "pageSize": self.page_size}


@dataclass(frozen=True)
class ListQueryOptions:
    """
    Immutable container for a list query.

    Attributes:
        filters: Top-level clauses, ANDed in order.
        sort: Ordering instructions. Only the first one is applied.
        pagination: Page to return.
    """

    filters: list[ComparisonFilter | CompositeFilter] = field(default_factory=list)
    sort: list[SortKey] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_params(
        cls,
        *,
        pagination: Pagination | Mapping[str, Any] | None = None,
        sort: Iterable[SortKey | Mapping[str, Any]] | None = None,
        filters: Iterable[Any] | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ListQueryOptions:
        """Build options from raw framework arguments."""
        return cls(
            filters=FilterFactory.from_list(filters),
            sort=_parse_sort(sort),
            pagination=_parse_pagination(pagination, default_page_size),
        )

    def with_filters(
        self, *filters: ComparisonFilter | CompositeFilter
    ) -> ListQueryOptions:
        """Return a copy with the filters replaced."""
        return ListQueryOptions(
            filters=list(filters),
            sort=list(self.sort),
            pagination=self.pagination,
        )

    def with_sort(self, *keys: SortKey) -> ListQueryOptions:
        """Return a copy with updated ordering."""
        return ListQueryOptions(
            filters=list(self.filters),
            sort=list(keys),
            pagination=self.pagination,
        )

    def with_pagination(
        self,
        current: int | None = None,
        page_size: int | None = None,
    ) -> ListQueryOptions:
        """Return a copy with updated pagination parameters."""
        return ListQueryOptions(
            filters=list(self.filters),
            sort=list(self.sort),
            pagination=Pagination(
                current=current if current is not None else self.pagination.current,
                page_size=(
                    page_size if page_size is not None else self.pagination.page_size
                ),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the framework's JSON shape."""
        result: dict[str, Any] = {"pagination": self.pagination.to_dict()}
        if self.filters:
            result["filters"] = [f.to_dict() for f in self.filters]
        if self.sort:
            result["sort"] = [s.to_dict() for s in self.sort]
        return result


def _parse_sort(
    raw: Iterable[SortKey | Mapping[str, Any]] | None,
) -> list[SortKey]:
    if not raw:
        return []
    keys: list[SortKey] = []
    for idx, item in enumerate(raw):
        if isinstance(item, SortKey):
            keys.append(item)
            continue
        try:
            keys.append(SortKey.model_validate(item))
        except PydanticValidationError as exc:
            raise InvalidQueryError(
                f"Invalid sort: {exc.errors()[0]['msg']}", path=f"sort[{idx}]"
            ) from exc
    return keys


def _parse_pagination(
    raw: Pagination | Mapping[str, Any] | None,
    default_page_size: int,
) -> Pagination:
    if isinstance(raw, Pagination):
        return raw
    data: dict[str, Any] = dict(raw or {})
    if not data.get("pageSize") and not data.get("page_size"):
        data.pop("page_size", None)
        data["pageSize"] = default_page_size
    try:
        return Pagination.model_validate(data)
    except PydanticValidationError as exc:
        raise InvalidQueryError(
            f"Invalid pagination: {exc.errors()[0]['msg']}", path="pagination"
        ) from exc
