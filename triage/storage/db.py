"""Async SQLite key-value store (WAL mode)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import aiosqlite

from triage.storage.migrations import KV_TABLE_SQL, apply_migrations

logger = logging.getLogger(__name__)


class KVStore:
    """String key → string value store on a single aiosqlite connection.

    Usage:
        store = KVStore("data/feedback.db")
        await store.initialize()
        # ... use store ...
        await store.close()
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create database, apply migrations, and configure pragmas."""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            apply_migrations(self.db_path)

        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA synchronous=NORMAL")
        if self.db_path == ":memory:":
            # Migrations run on their own connection; an in-memory DB is per-connection.
            await self._conn.executescript(KV_TABLE_SQL)
            await self._conn.commit()

        logger.info("KV store initialized: %s", self.db_path)

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def get(self, key: str) -> Optional[str]:
        assert self._conn is not None, "Store not initialized"
        cursor = await self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = await cursor.fetchone()
        return row["value"] if row else None

    async def put(self, key: str, value: str) -> None:
        """Insert or overwrite ``key``. Last write wins."""
        assert self._conn is not None, "Store not initialized"
        async with self._write_lock:
            await self._conn.execute(
                """INSERT INTO kv (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value=excluded.value,
                       updated_at=CURRENT_TIMESTAMP""",
                (key, value),
            )
            await self._conn.commit()

    async def delete(self, key: str) -> bool:
        assert self._conn is not None, "Store not initialized"
        async with self._write_lock:
            cursor = await self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            await self._conn.commit()
            return cursor.rowcount > 0

    async def keys(self) -> List[str]:
        assert self._conn is not None, "Store not initialized"
        cursor = await self._conn.execute("SELECT key FROM kv ORDER BY key")
        return [r["key"] for r in await cursor.fetchall()]
