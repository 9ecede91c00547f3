from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

import pytest

from swrcache import AsyncBaseCacheStore, AsyncCacheHandle, Headers, Request, Response

# 2024-01-01T00:00:00Z, the instant most tests travel to.
NOW_MS = 1704067200000


class RecordingCacheHandle(AsyncCacheHandle):
    """Dictionary backed handle that remembers every get and put."""

    def __init__(self, entries: Optional[Dict[str, Response]] = None) -> None:
        self.entries: Dict[str, Response] = dict(entries or {})
        self.gets: List[str] = []
        self.puts: List[Tuple[str, Response]] = []

    async def get(self, key: str) -> Optional[Response]:
        self.gets.append(key)
        stored = self.entries.get(key)
        return stored.copy() if stored is not None else None

    async def put(self, key: str, response: Response) -> None:
        self.puts.append((key, response))
        self.entries[key] = response


class RecordingCacheStore(AsyncBaseCacheStore):
    def __init__(self, entries: Optional[Dict[str, Response]] = None) -> None:
        self.handle = RecordingCacheHandle(entries)
        self.opened: List[str] = []

    async def open(self, namespace: str) -> RecordingCacheHandle:
        self.opened.append(namespace)
        return self.handle


def create_request(
    method: str = "GET",
    url: str = "http://localhost/resource",
    headers: Optional[Dict[str, str]] = None,
) -> Request:
    """Helper to create a request."""
    return Request(method=method, url=url, headers=Headers(headers or {}))


def create_response(
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
    content: bytes = b"",
) -> Response:
    """Helper to create a response."""
    return Response(status_code=status_code, headers=Headers(headers or {}), content=content, metadata={})


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def use_temp_dir(tmpdir):
    cur_dir = os.getcwd()
    os.chdir(tmpdir)
    yield
    os.chdir(cur_dir)
