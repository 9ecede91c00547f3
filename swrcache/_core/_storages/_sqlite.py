from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Union

import anysqlite

from swrcache._core._storages._base import AsyncBaseCacheStore, AsyncCacheHandle
from swrcache._core._storages._packing import pack, unpack
from swrcache._core.models import Response
from swrcache._utils import ensure_cache_dict

logger = logging.getLogger(__name__)


class AsyncSqliteCacheHandle(AsyncCacheHandle):
    def __init__(self, store: "AsyncSqliteCacheStore", namespace: str) -> None:
        self.store = store
        self.namespace = namespace

    async def get(self, key: str) -> Optional[Response]:
        connection = await self.store._ensure_connection()
        cursor = await connection.cursor()
        await cursor.execute(
            "SELECT data FROM entries WHERE namespace = ? AND key = ?",
            (self.namespace, key),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return unpack(row[0])

    async def put(self, key: str, response: Response) -> None:
        connection = await self.store._ensure_connection()
        cursor = await connection.cursor()
        await cursor.execute(
            "INSERT OR REPLACE INTO entries (namespace, key, data, created_at) VALUES (?, ?, ?, ?)",
            (self.namespace, key, pack(response), time.time()),
        )
        await connection.commit()
        logger.debug("Stored response in sqlite: namespace=%s key=%s", self.namespace, key)


class AsyncSqliteCacheStore(AsyncBaseCacheStore):
    """
    SQLite backed cache store.

    Args:
        connection: An already opened ``anysqlite`` connection. When omitted, a
            database file is created under ``.cache/swrcache`` on first use.
        database_path: File name (or path) of the database to open.
    """

    def __init__(
        self,
        *,
        connection: Optional[anysqlite.Connection] = None,
        database_path: Union[str, Path] = "swrcache.db",
    ) -> None:
        self.connection = connection
        self.database_path: Path = database_path if isinstance(database_path, Path) else Path(database_path)
        self._initialized = False

    async def _ensure_connection(self) -> anysqlite.Connection:
        """Ensure connection is established and database is initialized."""
        if self.connection is None:
            parent = self.database_path.parent if self.database_path.parent != Path(".") else None
            full_path = ensure_cache_dict(parent) / self.database_path.name
            self.connection = await anysqlite.connect(str(full_path))
        if not self._initialized:
            await self._initialize_database()
            self._initialized = True
        return self.connection

    async def _initialize_database(self) -> None:
        assert self.connection is not None
        cursor = await self.connection.cursor()
        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                data BLOB NOT NULL,
                created_at REAL NOT NULL,
                PRIMARY KEY (namespace, key)
            )
        """)
        await self.connection.commit()

    async def open(self, namespace: str) -> AsyncSqliteCacheHandle:
        await self._ensure_connection()
        return AsyncSqliteCacheHandle(self, namespace)

    async def close(self) -> None:
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
            self._initialized = False
