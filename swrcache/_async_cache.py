from __future__ import annotations

import logging
from functools import partial
from typing import Awaitable, Callable, Optional

from typing_extensions import assert_never

from swrcache._core._headers import parse_cache_control
from swrcache._core._keygen import CacheKeyResolver
from swrcache._core._merge import apply_cache_headers
from swrcache._core._spec import (
    AnyState,
    CacheMiss,
    CouldNotBeStored,
    FromCache,
    IdleClient,
    Revalidating,
    StoreAndUse,
)
from swrcache._core._storages._base import AsyncBaseCacheStore, AsyncCacheHandle
from swrcache._core.models import CacheStatus, Request, Response
from swrcache._policies import SWRCachePolicy
from swrcache._utils import now_ms

logger = logging.getLogger("swrcache.integrations.proxy")

RequestSender = Callable[[Request], Awaitable[Response]]
DetachedWork = Callable[[], Awaitable[None]]
WaitUntil = Callable[[DetachedWork], None]


class AsyncSWRCacheProxy:
    """
    Stale-while-revalidate cache in front of a request handler.

    This class is independent of any web framework and works only with internal models.
    The handler is a user-provided callable, detached work is handed to a user-provided
    ``wait_until`` callable that must run it to completion even after the response is sent.

    Args:
        store: Cache store to read from and write to. None disables caching: every
            request goes straight to the handler.
        policy: Cache configuration.
    """

    def __init__(self, store: Optional[AsyncBaseCacheStore], policy: SWRCachePolicy) -> None:
        self.store = store
        self.policy = policy
        self.resolver = CacheKeyResolver(policy.cache_name, policy.key_generator)

        if store is None:
            logger.error("SWR cache requires a cache store to be available; caching is disabled")

    async def handle_request(
        self,
        request: Request,
        send_request: RequestSender,
        wait_until: Optional[WaitUntil] = None,
    ) -> Response:
        if self.store is None:
            return await send_request(request)

        if not self.policy.is_cacheable_method(request.method):
            logger.debug("Bypassing cache for method %s", request.method)
            return await send_request(request)

        # Resolved once, used for both the read and the write of this request.
        cache_key = await self.resolver.resolve(request)
        handle = await self.store.open(cache_key.namespace)

        state: AnyState = IdleClient(options=self.policy.swr)

        while state:
            logger.debug(f"Handling state: {state.__class__.__name__}")
            if isinstance(state, IdleClient):
                entry = await handle.get(cache_key.key)
                state = state.next(request, entry, now_ms())
            elif isinstance(state, CacheMiss):
                state = state.next(await send_request(state.request))
            elif isinstance(state, StoreAndUse):
                return await self._handle_store_and_use(state, handle, cache_key.key, wait_until)
            elif isinstance(state, CouldNotBeStored):
                return state.response
            elif isinstance(state, FromCache):
                return self._prepare_for_client(state.entry, state.status)
            elif isinstance(state, Revalidating):
                await self._schedule(
                    partial(self._revalidate, state, handle, cache_key.key, send_request),
                    wait_until,
                )
                return self._prepare_for_client(state.entry, state.status)
            else:
                assert_never(state)

        raise RuntimeError("Unreachable")

    async def _handle_store_and_use(
        self,
        state: StoreAndUse,
        handle: AsyncCacheHandle,
        key: str,
        wait_until: Optional[WaitUntil],
    ) -> Response:
        self._merge_headers(state.response)
        await self._schedule(partial(handle.put, key, state.response.copy()), wait_until)
        return self._prepare_for_client(state.response, "MISS")

    async def _revalidate(
        self,
        state: Revalidating,
        handle: AsyncCacheHandle,
        key: str,
        send_request: RequestSender,
    ) -> None:
        next_state = state.next(await send_request(state.request))
        logger.debug(f"Handling state: {next_state.__class__.__name__}")

        if isinstance(next_state, StoreAndUse):
            self._merge_headers(next_state.response)
            await handle.put(key, next_state.response.copy())
            state.entry.metadata["swrcache_stored"] = True  # type: ignore[index]
            logger.info("Revalidated cache entry: key=%s", key)

    async def _schedule(self, work: DetachedWork, wait_until: Optional[WaitUntil]) -> None:
        if self.policy.wait:
            await work()
        elif wait_until is None:
            logger.debug("No detached task facility available, running cache work inline")
            await work()
        else:
            wait_until(work)

    def _merge_headers(self, response: Response) -> None:
        swr = self.policy.swr
        origin_directives = parse_cache_control(response.headers.get(swr.origin_cache_control_header_name))
        apply_cache_headers(
            response.headers,
            cache_control=origin_directives + self.policy.directives,
            vary=self.policy.vary_set,
            stale_at_header_name=swr.stale_at_header_name,
            now_ms=now_ms(),
        )

    def _prepare_for_client(self, response: Response, status: CacheStatus) -> Response:
        swr = self.policy.swr
        response.headers[swr.status_header_name] = status
        response.metadata["swrcache_status"] = status  # type: ignore[index]

        client_cache_control = response.headers.get(swr.client_cache_control_header_name)
        if client_cache_control is not None:
            response.headers["cache-control"] = client_cache_control
            del response.headers[swr.client_cache_control_header_name]
        return response
