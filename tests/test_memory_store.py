import pytest

from chatrelay.storage import InMemoryMessageStore


class TestInMemoryMessageStore:
    @pytest.mark.asyncio
    async def test_insert_returns_row(self):
        store = InMemoryMessageStore()

        row = await store.insert("u1", "user", "hello")

        assert row.owner == "u1"
        assert row.role == "user"
        assert row.content == "hello"
        assert row.created_at is not None
        assert row.id == 1

    @pytest.mark.asyncio
    async def test_insert_rejects_unknown_role(self):
        store = InMemoryMessageStore()

        with pytest.raises(ValueError):
            await store.insert("u1", "tool", "hello")

    @pytest.mark.asyncio
    async def test_created_at_strictly_increases(self):
        store = InMemoryMessageStore()

        rows = [await store.insert("u1", "user", str(i)) for i in range(50)]

        for earlier, later in zip(rows, rows[1:]):
            assert later.created_at > earlier.created_at

    @pytest.mark.asyncio
    async def test_select_returns_most_recent_ascending(self):
        store = InMemoryMessageStore()
        for i in range(10):
            await store.insert("u1", "user", str(i))

        rows = await store.select("u1", limit=3)

        assert [row.content for row in rows] == ["7", "8", "9"]

    @pytest.mark.asyncio
    async def test_select_non_positive_limit(self):
        store = InMemoryMessageStore()
        await store.insert("u1", "user", "hello")

        assert await store.select("u1", limit=0) == []

    @pytest.mark.asyncio
    async def test_select_unknown_owner(self):
        store = InMemoryMessageStore()

        assert await store.select("ghost", limit=10) == []

    @pytest.mark.asyncio
    async def test_delete_all_is_owner_scoped_and_idempotent(self):
        store = InMemoryMessageStore()
        await store.insert("u1", "user", "a")
        await store.insert("u2", "user", "b")

        await store.delete_all("u1")
        await store.delete_all("u1")

        assert store.count("u1") == 0
        assert store.count("u2") == 1

    @pytest.mark.asyncio
    async def test_row_to_dict_uses_uid(self):
        store = InMemoryMessageStore()
        row = await store.insert("u1", "assistant", "hi")

        data = row.to_dict()

        assert data["uid"] == "u1"
        assert data["role"] == "assistant"
        assert data["content"] == "hi"
        assert data["id"] == 1
        assert "created_at" in data
