from __future__ import annotations

import logging
from typing import Dict, Optional

import anyio

from swrcache._core._storages._base import AsyncBaseCacheStore, AsyncCacheHandle
from swrcache._core.models import Response
from swrcache._lfu_cache import LFUCache

logger = logging.getLogger(__name__)


class AsyncInMemoryCacheHandle(AsyncCacheHandle):
    def __init__(self, namespace: str, capacity: int) -> None:
        self.namespace = namespace
        self._cache: LFUCache[str, Response] = LFUCache(capacity=capacity)
        self._lock = anyio.Lock()

    async def get(self, key: str) -> Optional[Response]:
        async with self._lock:
            try:
                stored = self._cache.get(key)
            except KeyError:
                return None
        return stored.copy()

    async def put(self, key: str, response: Response) -> None:
        async with self._lock:
            self._cache.put(key, response.copy())
        logger.debug("Stored response in memory: namespace=%s key=%s", self.namespace, key)


class AsyncInMemoryCacheStore(AsyncBaseCacheStore):
    """
    Process-local cache store.

    Each namespace keeps at most ``capacity`` entries and evicts the least
    frequently used one when full. Namespaces themselves are never evicted,
    so a ``cache_name`` computed from the request (such as its path) grows
    the store by one namespace per distinct value.
    """

    def __init__(self, capacity: int = 128) -> None:
        self.capacity = capacity
        self._handles: Dict[str, AsyncInMemoryCacheHandle] = {}

    async def open(self, namespace: str) -> AsyncInMemoryCacheHandle:
        if namespace not in self._handles:
            logger.debug("Opening in-memory cache namespace: %s", namespace)
            self._handles[namespace] = AsyncInMemoryCacheHandle(namespace, self.capacity)
        return self._handles[namespace]
