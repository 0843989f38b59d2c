from datetime import datetime, timedelta, timezone

import asyncpg
import pytest

from chatrelay.storage import MessageStoreError, PostgresMessageStore
from chatrelay.storage.database.postgres_store import MESSAGES_SCHEMA
from chatrelay.storage.database.utils import build_insert_query
from tests.mocks import MockPool, make_record

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def pool() -> MockPool:
    return MockPool()


@pytest.fixture
def pg_store(pool) -> PostgresMessageStore:
    return PostgresMessageStore(db_pool=pool, auto_migrate=False)


class TestBuildInsertQuery:
    def test_placeholders_follow_columns(self):
        query, values = build_insert_query(
            "messages", {"uid": "u1", "role": "user", "content": "hi"}
        )

        assert "INSERT INTO messages (uid, role, content)" in query
        assert "VALUES ($1, $2, $3)" in query
        assert "RETURNING *" in query
        assert values == ["u1", "user", "hi"]

    def test_empty_data_rejected(self):
        with pytest.raises(ValueError):
            build_insert_query("messages", {})


class TestPostgresMessageStore:
    def test_requires_dsn_or_pool(self):
        with pytest.raises(ValueError):
            PostgresMessageStore()

    @pytest.mark.asyncio
    async def test_initialize_runs_schema(self, pool):
        store = PostgresMessageStore(db_pool=pool, auto_migrate=True)

        await store.initialize()

        pool.connection.execute.assert_awaited_once_with(MESSAGES_SCHEMA)

    @pytest.mark.asyncio
    async def test_initialize_skips_schema_when_disabled(self, pg_store, pool):
        await pg_store.initialize()

        pool.connection.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cleanup_leaves_borrowed_pool_open(self, pg_store, pool):
        await pg_store.cleanup()

        pool.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_maps_record(self, pg_store, pool):
        pool.connection.fetchrow.return_value = make_record(
            "u1", "user", "hello", NOW, id=7
        )

        row = await pg_store.insert("u1", "user", "hello")

        assert row.id == 7
        assert row.owner == "u1"
        assert row.created_at == NOW
        args = pool.connection.fetchrow.await_args.args
        assert "INSERT INTO messages" in args[0]
        assert args[1:] == ("u1", "user", "hello")

    @pytest.mark.asyncio
    async def test_insert_without_returned_record(self, pg_store, pool):
        pool.connection.fetchrow.return_value = None

        with pytest.raises(MessageStoreError):
            await pg_store.insert("u1", "user", "hello")

    @pytest.mark.asyncio
    async def test_select_orders_newest_then_ascending(self, pg_store, pool):
        pool.connection.fetch.return_value = [
            make_record("u1", "user", "a", NOW, id=1),
            make_record("u1", "assistant", "b", NOW + timedelta(seconds=1), id=2),
        ]

        rows = await pg_store.select("u1", limit=60)

        assert [row.content for row in rows] == ["a", "b"]
        query, owner, limit = pool.connection.fetch.await_args.args
        assert "ORDER BY created_at DESC, id DESC" in query
        assert "ORDER BY created_at ASC, id ASC" in query
        assert (owner, limit) == ("u1", 60)

    @pytest.mark.asyncio
    async def test_select_zero_limit_skips_query(self, pg_store, pool):
        assert await pg_store.select("u1", limit=0) == []
        pool.connection.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_all(self, pg_store, pool):
        await pg_store.delete_all("u1")

        pool.connection.execute.assert_awaited_once_with(
            "DELETE FROM messages WHERE uid = $1", "u1"
        )

    @pytest.mark.asyncio
    async def test_driver_error_becomes_store_error(self, pg_store, pool):
        pool.connection.fetch.side_effect = asyncpg.InterfaceError("relation missing")

        with pytest.raises(MessageStoreError) as exc_info:
            await pg_store.select("u1", limit=10)

        assert "relation missing" in str(exc_info.value)
        assert exc_info.value.backend == "postgres"

    @pytest.mark.asyncio
    async def test_connection_error_becomes_store_error(self, pg_store, pool):
        pool.connection.execute.side_effect = OSError("connection refused")

        with pytest.raises(MessageStoreError):
            await pg_store.delete_all("u1")

    @pytest.mark.asyncio
    async def test_uninitialized_store(self):
        store = PostgresMessageStore(dsn="postgresql://localhost/test")

        with pytest.raises(MessageStoreError):
            await store.select("u1", limit=10)
