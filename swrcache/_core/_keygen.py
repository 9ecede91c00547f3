from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from swrcache._core.models import Request
from swrcache._utils import maybe_await

logger = logging.getLogger("swrcache.core.keygen")

CacheNameFactory = Callable[[Request], Union[str, Awaitable[str]]]
KeyGenerator = Callable[[Request], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class CacheKey:
    """Store namespace and key resolved for one request, shared by its read and write."""

    namespace: str
    key: str


class CacheKeyResolver:
    """
    Derives the cache namespace and key for a request.

    Args:
        cache_name: A literal namespace, or a function of the request returning one.
            The function may be a coroutine function.
        key_generator: Function of the request returning the store key. Defaults to
            the full request URL. May be a coroutine function.
    """

    def __init__(
        self,
        cache_name: Union[str, CacheNameFactory],
        key_generator: Optional[KeyGenerator] = None,
    ) -> None:
        self.cache_name = cache_name
        self.key_generator = key_generator

    async def resolve_namespace(self, request: Request) -> str:
        if isinstance(self.cache_name, str):
            return self.cache_name
        return await maybe_await(self.cache_name(request))

    async def resolve_key(self, request: Request) -> str:
        if self.key_generator is None:
            return request.url
        return await maybe_await(self.key_generator(request))

    async def resolve(self, request: Request) -> CacheKey:
        cache_key = CacheKey(
            namespace=await self.resolve_namespace(request),
            key=await self.resolve_key(request),
        )
        logger.debug("Resolved cache key: namespace=%s key=%s", cache_key.namespace, cache_key.key)
        return cache_key
