from __future__ import annotations

import abc
import typing as tp
from abc import ABC

from swrcache._core.models import Response


class AsyncCacheHandle(ABC):
    """A single opened cache namespace."""

    @abc.abstractmethod
    async def get(self, key: str) -> tp.Optional[Response]:
        """
        Retrieve the response stored under the given key.

        Args:
            key: The store key resolved for the request.

        Returns:
            An independent copy of the stored response, or None if nothing is stored.
        """
        raise NotImplementedError()

    @abc.abstractmethod
    async def put(self, key: str, response: Response) -> None:
        """
        Store a response under the given key, replacing any previous entry wholesale.

        Args:
            key: The store key resolved for the request.
            response: The response to store. Callers pass a copy they no longer touch.

        Raises:
            NotImplementedError: Must be implemented in subclasses.
        """
        raise NotImplementedError()


class AsyncBaseCacheStore(ABC):
    @abc.abstractmethod
    async def open(self, namespace: str) -> AsyncCacheHandle:
        """
        Open (creating if needed) the cache namespace with the given name.
        """
        raise NotImplementedError()

    async def close(self) -> None:  # noqa: B027
        """Release resources held by the store."""
