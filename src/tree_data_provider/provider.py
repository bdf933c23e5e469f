"""
Data provider over a tree store.

Records of resource ``posts`` live at ``posts/<id>``.  The store offers no
querying, so list calls read the whole resource and hand it to the
:class:`~tree_data_provider.engine.QueryEngine`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from .allocation import build_allocator
from .config import ProviderOptions
from .engine import QueryEngine, Record
from .exceptions import (
    NotFoundError,
    RecordNotFoundError,
    ResourceNotFoundError,
    UnsupportedOperationError,
)
from .operators_memory import build_default_registry
from .query_options import ListQueryOptions
from .responses import (
    CreateManyResponse,
    CreateResponse,
    DeleteManyResponse,
    DeleteOneResponse,
    GetListResponse,
    GetManyResponse,
    GetOneResponse,
    UpdateManyResponse,
    UpdateResponse,
)
from .tree import child_values, join_path

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable, Mapping

    from .allocation import IIdAllocator
    from .evaluator import MemoryOperatorRegistry
    from .ports.store import ITreeStore

logger = logging.getLogger("tree_data_provider.provider")


class TreeDataProvider:
    """
    CRUD and list queries for resources kept in an ``ITreeStore``.

    Usage::

        provider = TreeDataProvider(InMemoryTreeStore())
        created = await provider.create("posts", {"title": "Hello"})
        page = await provider.get_list(
            "posts",
            filters=[{"field": "title", "operator": "eq", "value": "Hello"}],
        )
    """

    def __init__(
        self,
        store: ITreeStore,
        options: ProviderOptions | None = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
        engine: QueryEngine | None = None,
        allocator: IIdAllocator | None = None,
    ) -> None:
        self._store = store
        self._options = options or ProviderOptions()
        self._engine = engine or QueryEngine(
            registry or build_default_registry(),
            id_field=self._options.id_field,
        )
        self._allocator = allocator or build_allocator(self._options, store)
        self._create_locks: dict[str, asyncio.Lock] = {}

    @property
    def store(self) -> ITreeStore:
        return self._store

    @property
    def options(self) -> ProviderOptions:
        return self._options

    # -- reads -----------------------------------------------------------------

    async def get_list(
        self,
        resource: str,
        pagination: Any = None,
        sort: Any = None,
        filters: Any = None,
        meta: Mapping[str, Any] | None = None,
    ) -> GetListResponse[Record]:
        """
        Filter, sort and paginate the records of *resource*.

        *pagination*, *sort* and *filters* accept the framework's raw dicts
        or the parsed models.  *meta* is accepted for signature compatibility
        and not used.

        Raises:
            ResourceNotFoundError: Nothing is stored under *resource*.
            InvalidQueryError: The query arguments cannot be parsed.
        """
        options = ListQueryOptions.from_params(
            pagination=pagination,
            sort=sort,
            filters=filters,
            default_page_size=self._options.default_page_size,
        )
        async with self._logged("getList", resource):
            records = await self._read_resource(resource)
            result = self._engine.query(records, options)
        logger.debug(
            "getList %s matched %d of %d records", resource, result.total, len(records)
        )
        return GetListResponse(data=result.data, total=result.total)

    async def get_one(self, resource: str, id: Any) -> GetOneResponse[Record]:
        async with self._logged("getOne", resource):
            snapshot = await self._store.get(join_path(resource, id))
            if not snapshot.exists:
                raise RecordNotFoundError(resource, id)
        return GetOneResponse(data=snapshot.value)

    async def get_many(
        self, resource: str, ids: Iterable[Any]
    ) -> GetManyResponse[Record]:
        """Records whose id matches one of *ids*; ids compare as strings."""
        wanted = {str(i) for i in ids}
        id_field = self._options.id_field
        async with self._logged("getMany", resource):
            records = await self._read_resource(resource)
        return GetManyResponse(
            data=[
                record
                for record in records
                if isinstance(record, dict)
                and record.get(id_field) is not None
                and str(record[id_field]) in wanted
            ]
        )

    # -- writes ----------------------------------------------------------------

    async def create(
        self, resource: str, variables: Mapping[str, Any]
    ) -> CreateResponse[Record]:
        """
        Store a new record under a freshly allocated id.

        Allocation and write happen under a per-resource lock, so concurrent
        creates in this process never receive the same id.
        """
        lock = self._create_locks.setdefault(resource, asyncio.Lock())
        async with self._logged("create", resource), lock:
            new_id = await self._allocator.allocate(resource)
            payload = {**variables, self._options.id_field: new_id}
            await self._store.set(join_path(resource, new_id), payload)
        logger.info("Created %s/%s", resource, new_id)
        return CreateResponse(data=payload)

    async def create_many(
        self, resource: str, variables: Iterable[Mapping[str, Any]]
    ) -> CreateManyResponse[Record]:
        """Create records one after another, in input order."""
        created: list[Record] = []
        for item in variables:
            response = await self.create(resource, item)
            created.append(response.data)
        return CreateManyResponse(data=created)

    async def update(
        self, resource: str, id: Any, variables: Mapping[str, Any]
    ) -> UpdateResponse[Record]:
        """Merge *variables* into the record and return the stored result."""
        path = join_path(resource, id)
        async with self._logged("update", resource):
            await self._store.update(path, variables)
            snapshot = await self._store.get(path)
        logger.info("Updated %s", path)
        return UpdateResponse(data=snapshot.value)

    async def update_many(
        self, resource: str, ids: Iterable[Any], variables: Mapping[str, Any]
    ) -> UpdateManyResponse[Record]:
        responses = await asyncio.gather(
            *(self.update(resource, id_, variables) for id_ in ids)
        )
        return UpdateManyResponse(data=[r.data for r in responses])

    async def delete_one(self, resource: str, id: Any) -> DeleteOneResponse[Record]:
        """Remove the record; the previous value is returned if there was one."""
        path = join_path(resource, id)
        async with self._logged("deleteOne", resource):
            previous = await self._store.get(path)
            await self._store.remove(path)
        logger.info("Deleted %s", path)
        return DeleteOneResponse(data=previous.value)

    async def delete_many(
        self, resource: str, ids: Iterable[Any]
    ) -> DeleteManyResponse[Record]:
        responses = await asyncio.gather(
            *(self.delete_one(resource, id_) for id_ in ids)
        )
        return DeleteManyResponse(data=[r.data for r in responses])

    # -- misc ------------------------------------------------------------------

    async def custom(self, *args: Any, **kwargs: Any) -> Any:
        raise UnsupportedOperationError(
            "TreeDataProvider does not implement custom requests"
        )

    def get_api_url(self) -> str:
        return self._options.api_url

    def as_data_provider(self) -> dict[str, Callable[..., Any]]:
        """Bound methods under the framework's data-provider method names."""
        return {
            "getList": self.get_list,
            "getOne": self.get_one,
            "getMany": self.get_many,
            "create": self.create,
            "createMany": self.create_many,
            "update": self.update,
            "updateMany": self.update_many,
            "deleteOne": self.delete_one,
            "deleteMany": self.delete_many,
            "custom": self.custom,
            "getApiUrl": self.get_api_url,
        }

    # -- internal --------------------------------------------------------------

    async def _read_resource(self, resource: str) -> list[Record]:
        snapshot = await self._store.get(join_path(resource))
        if not snapshot.exists:
            raise ResourceNotFoundError(resource)
        return child_values(snapshot.value)

    @contextlib.asynccontextmanager
    async def _logged(self, action: str, resource: str) -> AsyncIterator[None]:
        try:
            yield
        except NotFoundError as e:
            logger.debug("%s on %r: %s", action, resource, e)
            raise
        except Exception:
            logger.exception("%s on %r failed", action, resource)
            raise
