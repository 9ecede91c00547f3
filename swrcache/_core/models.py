from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal, Mapping, TypedDict
from urllib.parse import urlsplit

from swrcache._core._headers import Headers
from swrcache._utils import is_success

CacheStatus = Literal["HIT", "MISS", "REVALIDATING"]


@dataclass
class Request:
    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""
    extensions: Mapping[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"


class ResponseMetadata(TypedDict, total=False):
    # All the names here should be prefixed with "swrcache_" to avoid collisions with user data
    swrcache_status: CacheStatus
    """HIT, MISS or REVALIDATING, mirrored in the status header."""

    swrcache_from_cache: bool
    """Indicates whether the response was served from cache."""

    swrcache_stored: bool
    """Indicates whether a store write was completed or scheduled for this request."""


@dataclass
class Response:
    """
    A response produced by the wrapped handler or read back from a cache store.

    A stored response is the cache entry itself: stores keep status, headers
    and body and hand back independent copies on every read.
    """

    status_code: int
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""
    metadata: ResponseMetadata | Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return is_success(self.status_code)

    def copy(self) -> "Response":
        return replace(self, headers=self.headers.copy(), metadata=dict(self.metadata))
