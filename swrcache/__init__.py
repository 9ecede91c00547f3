from swrcache._core._headers import (
    CacheDirectiveSet as CacheDirectiveSet,
    Directive as Directive,
    Headers as Headers,
    parse_cache_control as parse_cache_control,
    parse_vary as parse_vary,
    serialize_cache_control as serialize_cache_control,
)
from swrcache._core._keygen import CacheKey as CacheKey, CacheKeyResolver as CacheKeyResolver
from swrcache._core._merge import (
    apply_cache_headers as apply_cache_headers,
    compute_stale_at as compute_stale_at,
    merge_cache_control as merge_cache_control,
    merge_vary as merge_vary,
)
from swrcache._core._spec import (
    AnyState as AnyState,
    CacheMiss as CacheMiss,
    CouldNotBeStored as CouldNotBeStored,
    FromCache as FromCache,
    IdleClient as IdleClient,
    Revalidating as Revalidating,
    State as State,
    StoreAndUse as StoreAndUse,
    SWROptions as SWROptions,
    parse_stale_at as parse_stale_at,
)
from swrcache._core._storages._base import AsyncBaseCacheStore as AsyncBaseCacheStore, AsyncCacheHandle as AsyncCacheHandle
from swrcache._core._storages._in_memory import AsyncInMemoryCacheStore as AsyncInMemoryCacheStore
from swrcache._core._storages._sqlite import AsyncSqliteCacheStore as AsyncSqliteCacheStore
from swrcache._core.models import (
    CacheStatus as CacheStatus,
    Request as Request,
    Response as Response,
    ResponseMetadata as ResponseMetadata,
)
from swrcache._async_cache import AsyncSWRCacheProxy as AsyncSWRCacheProxy
from swrcache._exceptions import ConfigurationError as ConfigurationError, SWRCacheError as SWRCacheError
from swrcache._lfu_cache import LFUCache as LFUCache
from swrcache._policies import SWRCachePolicy as SWRCachePolicy

__all__ = (
    ## States
    "AnyState",
    "IdleClient",
    "CacheMiss",
    "FromCache",
    "Revalidating",
    "StoreAndUse",
    "CouldNotBeStored",
    "State",
    ## Models
    "CacheStatus",
    "Request",
    "Response",
    "ResponseMetadata",
    ## Headers
    "Headers",
    "Directive",
    "CacheDirectiveSet",
    "parse_cache_control",
    "serialize_cache_control",
    "parse_vary",
    "merge_cache_control",
    "merge_vary",
    "compute_stale_at",
    "apply_cache_headers",
    "parse_stale_at",
    ## Keys
    "CacheKey",
    "CacheKeyResolver",
    ## Stores
    "AsyncBaseCacheStore",
    "AsyncCacheHandle",
    "AsyncInMemoryCacheStore",
    "AsyncSqliteCacheStore",
    "LFUCache",
    # Proxy
    "AsyncSWRCacheProxy",
    # Configuration
    "SWROptions",
    "SWRCachePolicy",
    "SWRCacheError",
    "ConfigurationError",
)
