# /// script
# requires-python = ">=3.10"
# dependencies = [
#     "swrcache",
#     "httpx",
# ]
#
# [tool.uv.sources]
# swrcache = { path = "../", editable = true }
# ///


import asyncio
import time

import httpx

from swrcache import AsyncInMemoryCacheStore, SWRCachePolicy
from swrcache.asgi import SWRCacheMiddleware

processed_requests = 0


async def app(scope, receive, send):
    global processed_requests
    processed_requests += 1
    body = f"created_at={time.time():.2f} processed_requests={processed_requests}".encode()
    await send({"type": "http.response.start", "status": 200, "headers": [(b"content-type", b"text/plain")]})
    await send({"type": "http.response.body", "body": body})


cached_app = SWRCacheMiddleware(
    app=app,
    store=AsyncInMemoryCacheStore(),
    policy=SWRCachePolicy(
        cache_name="example",
        cache_control="public, max-age=5, stale-while-revalidate=5",
    ),
)


async def main():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=cached_app)) as client:
        while True:
            response = await client.get("http://testserver/items/")
            print(f"{response.headers['x-edge-cache-status']:>12}: {response.text}")
            await asyncio.sleep(2)


if __name__ == "__main__":
    asyncio.run(main())
