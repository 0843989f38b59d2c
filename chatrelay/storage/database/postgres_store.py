"""
PostgreSQL-backed message store.

Rows live in a single ``messages`` table. ``created_at`` is assigned by the
database with ``clock_timestamp()`` so two inserts in one transaction still
get distinct times; the serial ``id`` breaks any remaining tie.
"""

import logging
from typing import List, Optional

import asyncpg

from ...utils.logging import log_event, track
from ..message_store import MessageRow, MessageStore, MessageStoreError, validate_role
from .utils import build_insert_query, record_to_row, records_to_rows

MESSAGES_SCHEMA = """
    CREATE TABLE IF NOT EXISTS messages (
        id BIGSERIAL PRIMARY KEY,
        uid TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('system', 'user', 'assistant')),
        content TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
    );
    CREATE INDEX IF NOT EXISTS messages_uid_created_at_idx
        ON messages (uid, created_at);
"""

ROW_COLUMNS = "id, uid, role, content, created_at"


class PostgresMessageStore(MessageStore):
    """
    Message store on an asyncpg connection pool.

    Every operation is a standalone statement; no transaction spans two
    calls.
    """

    backend = "postgres"

    def __init__(
        self,
        dsn: Optional[str] = None,
        db_pool: Optional[asyncpg.Pool] = None,
        auto_migrate: bool = True,
        min_pool_size: int = 1,
        max_pool_size: int = 10,
    ):
        """
        Args:
            dsn: PostgreSQL connection string (ignored when a pool is given)
            db_pool: Existing connection pool
            auto_migrate: Create the messages table on initialize()
            min_pool_size: Minimum pooled connections
            max_pool_size: Maximum pooled connections
        """
        if dsn is None and db_pool is None:
            raise ValueError("Either dsn or db_pool is required")

        self.dsn = dsn
        self.db_pool = db_pool
        self.auto_migrate = auto_migrate
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self._owns_pool = db_pool is None

    async def initialize(self) -> None:
        if self.db_pool is None:
            try:
                self.db_pool = await asyncpg.create_pool(
                    dsn=self.dsn,
                    min_size=self.min_pool_size,
                    max_size=self.max_pool_size,
                )
            except (asyncpg.PostgresError, OSError) as e:
                raise MessageStoreError(
                    f"Failed to connect to PostgreSQL: {e}", backend=self.backend
                ) from e

        if self.auto_migrate:
            async with self.db_pool.acquire() as conn:
                await conn.execute(MESSAGES_SCHEMA)

        log_event("service_ready", {"service": "postgres message store"})

    async def cleanup(self) -> None:
        if self.db_pool is not None and self._owns_pool:
            await self.db_pool.close()
            self.db_pool = None

    def _ensure_pool(self) -> asyncpg.Pool:
        if self.db_pool is None:
            raise MessageStoreError(
                "Database pool not initialized. Call initialize() first.",
                backend=self.backend,
            )
        return self.db_pool

    def _wrap_error(self, operation: str, owner: str, error: Exception) -> MessageStoreError:
        log_event(
            "message_store_error",
            {"operation": operation, "owner": owner, "error": str(error)},
            level=logging.ERROR,
        )
        return MessageStoreError(str(error), backend=self.backend)

    @track(
        operation="store_insert",
        include_args=["owner", "role"],
        track_performance=True,
        frequency="high_frequency",
    )
    async def insert(self, owner: str, role: str, content: str) -> MessageRow:
        validate_role(role)
        pool = self._ensure_pool()
        query, values = build_insert_query(
            "messages",
            {"uid": owner, "role": role, "content": content},
            returning=ROW_COLUMNS,
        )

        try:
            async with pool.acquire() as conn:
                record = await conn.fetchrow(query, *values)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise self._wrap_error("insert", owner, e) from e

        if not record:
            raise MessageStoreError("Failed to insert message", backend=self.backend)

        return record_to_row(record)

    @track(
        operation="store_select",
        include_args=["owner", "limit"],
        track_performance=True,
        frequency="high_frequency",
    )
    async def select(self, owner: str, limit: int) -> List[MessageRow]:
        if limit <= 0:
            return []

        pool = self._ensure_pool()
        query = f"""
            SELECT {ROW_COLUMNS} FROM (
                SELECT {ROW_COLUMNS} FROM messages
                WHERE uid = $1
                ORDER BY created_at DESC, id DESC
                LIMIT $2
            ) AS recent
            ORDER BY created_at ASC, id ASC
        """

        try:
            async with pool.acquire() as conn:
                records = await conn.fetch(query, owner, limit)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise self._wrap_error("select", owner, e) from e

        return records_to_rows(records)

    @track(
        operation="store_delete",
        include_args=["owner"],
        track_performance=True,
        frequency="low_frequency",
    )
    async def delete_all(self, owner: str) -> None:
        pool = self._ensure_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute("DELETE FROM messages WHERE uid = $1", owner)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise self._wrap_error("delete_all", owner, e) from e
