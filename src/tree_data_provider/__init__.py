from .adapters import InMemoryTreeStore, RedisTreeStore
from .allocation import (
    CallableIdAllocator,
    IIdAllocator,
    MaxPlusOneAllocator,
    build_allocator,
)
from .coercion import UNDEFINED
from .config import IdStrategy, ProviderOptions
from .engine import FilterEvaluator, QueryEngine, QueryResult, resolve_field
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    IdAllocationError,
    InvalidQueryError,
    NotFoundError,
    OperatorNotFoundError,
    RecordNotFoundError,
    ResourceNotFoundError,
    StoreError,
    StoreUnavailableError,
    TreeProviderError,
    UnsupportedOperationError,
)
from .filters import ComparisonFilter, CompositeFilter, FilterFactory
from .live import LiveEvent, LiveSubscription, TreeLiveProvider
from .operators import FilterOperator
from .operators_memory import build_default_registry
from .ports import ITreeStore, NodeSnapshot
from .provider import TreeDataProvider
from .query_options import ListQueryOptions, Pagination, SortKey, SortOrder
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

__all__ = [
    # Provider
    "TreeDataProvider",
    "TreeLiveProvider",
    "LiveEvent",
    "LiveSubscription",
    "ProviderOptions",
    "IdStrategy",
    # Query engine
    "QueryEngine",
    "QueryResult",
    "FilterEvaluator",
    "resolve_field",
    "UNDEFINED",
    # Query input
    "FilterOperator",
    "ComparisonFilter",
    "CompositeFilter",
    "FilterFactory",
    "ListQueryOptions",
    "Pagination",
    "SortKey",
    "SortOrder",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Id allocation
    "IIdAllocator",
    "MaxPlusOneAllocator",
    "CallableIdAllocator",
    "build_allocator",
    # Store
    "ITreeStore",
    "NodeSnapshot",
    "InMemoryTreeStore",
    "RedisTreeStore",
    # Responses
    "GetListResponse",
    "GetOneResponse",
    "GetManyResponse",
    "CreateResponse",
    "CreateManyResponse",
    "UpdateResponse",
    "UpdateManyResponse",
    "DeleteOneResponse",
    "DeleteManyResponse",
    # Exceptions
    "TreeProviderError",
    "NotFoundError",
    "ResourceNotFoundError",
    "RecordNotFoundError",
    "InvalidQueryError",
    "OperatorNotFoundError",
    "StoreError",
    "StoreUnavailableError",
    "IdAllocationError",
    "UnsupportedOperationError",
]
