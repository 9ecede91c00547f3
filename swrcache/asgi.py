from __future__ import annotations

import logging
import typing as t

import anyio

from swrcache._async_cache import AsyncSWRCacheProxy, DetachedWork
from swrcache._core._headers import Headers
from swrcache._core._storages._base import AsyncBaseCacheStore
from swrcache._core.models import Request, Response
from swrcache._policies import SWRCachePolicy
from swrcache._utils import filter_mapping

# Configure logger for this module
logger = logging.getLogger(__name__)


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


async def _run_detached(work: DetachedWork) -> None:
    try:
        await work()
    except Exception:
        logger.error("Detached cache write failed", exc_info=True)


class SWRCacheMiddleware:
    """
    ASGI middleware that serves responses through a stale-while-revalidate cache.

    Detached cache work (store writes and background refreshes) is collected
    while the request is handled and started in a task group once the
    response has been sent. The ASGI call only returns after that work has
    finished, and its failures are logged, never raised.

    Args:
        app: The ASGI application to wrap.
        store: The cache store. None turns the middleware into a pass-through.
        policy: Cache configuration. Validated when the policy is created.

    Example:
        ```python
        from swrcache import AsyncInMemoryCacheStore, SWRCachePolicy
        from swrcache.asgi import SWRCacheMiddleware

        app = SWRCacheMiddleware(
            app=my_asgi_app,
            store=AsyncInMemoryCacheStore(),
            policy=SWRCachePolicy(
                cache_name="pages",
                cache_control="public, max-age=60, stale-while-revalidate=30",
            ),
        )
        ```
    """

    def __init__(
        self,
        app: _ASGIApp,
        store: AsyncBaseCacheStore | None,
        policy: SWRCachePolicy,
    ) -> None:
        self.app = app
        self.store = store
        self.policy = policy
        self._proxy = AsyncSWRCacheProxy(store=store, policy=policy)

        logger.info(
            "Initialized SWRCacheMiddleware with store=%s, wait=%s",
            type(store).__name__ if store else "None",
            policy.wait,
        )

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        # Only handle HTTP requests, and only when there is somewhere to cache them
        if scope["type"] != "http" or self.store is None:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "/")

        logger.debug("Incoming HTTP request: method=%s path=%s", method, path)

        request = await self._asgi_to_internal_request(scope, receive)

        async def send_request_to_app(request: Request) -> Response:
            """
            Run the wrapped application and collect its response.

            May be called after the client response was sent, when a stale
            entry is refreshed, so it never touches the outer ``send``.
            """
            body_sent = False

            async def inner_receive() -> dict[str, t.Any]:
                nonlocal body_sent
                if body_sent:
                    return {"type": "http.disconnect"}
                body_sent = True
                return {"type": "http.request", "body": request.content, "more_body": False}

            status_code = 200
            response_headers: list[tuple[bytes, bytes]] = []
            response_body_chunks: list[bytes] = []

            async def inner_send(message: dict[str, t.Any]) -> None:
                nonlocal status_code, response_headers
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    response_headers = message.get("headers", [])
                elif message["type"] == "http.response.body":
                    body_chunk = message.get("body", b"")
                    if body_chunk:
                        response_body_chunks.append(body_chunk)

            logger.debug("Sending request to wrapped application: url=%s", request.url)
            await self.app(scope, inner_receive, inner_send)

            content = b"".join(response_body_chunks)
            logger.debug("Application response complete: status=%d total_bytes=%d", status_code, len(content))

            headers = Headers.from_raw(
                (key.decode("latin1"), value.decode("latin1")) for key, value in response_headers
            )
            return Response(
                status_code=status_code,
                headers=Headers(filter_mapping(headers._headers, ["Transfer-Encoding", "Content-Length"])),
                content=content,
                metadata={},
            )

        detached: list[DetachedWork] = []

        response = await self._proxy.handle_request(request, send_request_to_app, detached.append)
        logger.info(
            "Request processed: method=%s path=%s status=%d cache=%s",
            method,
            path,
            response.status_code,
            response.metadata.get("swrcache_status", "-"),
        )
        await self._send_internal_response(response, send)

        # Detached work starts once the client has the full response.
        if detached:
            logger.debug("Running %d detached cache task(s)", len(detached))
            async with anyio.create_task_group() as task_group:
                for work in detached:
                    task_group.start_soon(_run_detached, work)

    async def _asgi_to_internal_request(self, scope: _Scope, receive: _Receive) -> Request:
        """
        Convert an ASGI HTTP scope to an internal Request object.

        The body is read up front because the wrapped application may have to
        be called again after the client response was sent.
        """
        scheme = scope.get("scheme", "http")
        server = scope.get("server")

        if server is None:
            server = ("localhost", 80)

        host = server[0]
        port = server[1] if server[1] is not None else (443 if scheme == "https" else 80)

        # Add port to host if non-standard
        if (scheme == "http" and port != 80) or (scheme == "https" and port != 443):
            host = f"{host}:{port}"

        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"")
        if query_string:
            path = f"{path}?{query_string.decode('latin1')}"

        chunks: list[bytes] = []
        while True:
            message = await receive()
            if message["type"] == "http.request":
                chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    break
            elif message["type"] == "http.disconnect":
                break

        return Request(
            method=scope.get("method", "GET"),
            url=f"{scheme}://{host}{path}",
            headers=Headers.from_raw(
                (key.decode("latin1"), value.decode("latin1")) for key, value in scope.get("headers", [])
            ),
            content=b"".join(chunks),
            extensions={"scope": scope},
        )

    async def _send_internal_response(self, response: Response, send: _Send) -> None:
        headers = [(key.encode("latin1"), value.encode("latin1")) for key, value in response.headers.raw()]
        headers.append((b"content-length", str(len(response.content)).encode("latin1")))

        await send(
            {
                "type": "http.response.start",
                "status": response.status_code,
                "headers": headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": response.content,
                "more_body": False,
            }
        )
        logger.debug("Response sent: status=%d total_bytes=%d", response.status_code, len(response.content))

    async def aclose(self) -> None:
        """Close the cache store and release resources."""
        logger.info("Closing SWRCacheMiddleware and cache store")
        if self.store:
            await self.store.close()
