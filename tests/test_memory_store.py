"""Tests for InMemoryQueueStore."""

import pytest

KEY = "music.1.next"
DEST = "music.1.current"


async def _list(store, *values):
    await store.rpush(KEY, *values)


class TestScalars:
    """Tests for get/set/getset/delete/exists."""

    @pytest.mark.asyncio
    async def test_getset_returns_previous(self, store):
        assert await store.getset("k", "1") is None
        assert await store.getset("k", "2") == "1"
        assert await store.get("k") == "2"

    @pytest.mark.asyncio
    async def test_delete_counts_existing_only(self, store):
        await store.set("a", "1")
        await _list(store, "x")

        assert await store.delete("a", KEY, "missing") == 2
        assert await store.exists("a", KEY) == 0

    @pytest.mark.asyncio
    async def test_set_clears_ttl(self, store):
        await store.set("k", "1")
        await store.pexpire_many(["k"], 1000)

        await store.set("k", "2")

        assert store.ttl_ms("k") is None


class TestLists:
    """Tests for list primitives."""

    @pytest.mark.asyncio
    async def test_lpush_prepends_each_value(self, store):
        """Should leave the last value at the head, like Redis LPUSH."""
        await store.lpush(KEY, "a", "b", "c")

        assert await store.lrange(KEY, 0, -1) == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_rpopset_moves_tail(self, store):
        await _list(store, "a", "b")

        assert await store.rpopset(KEY, DEST) == "b"
        assert await store.get(DEST) == "b"
        assert await store.lrange(KEY, 0, -1) == ["a"]

    @pytest.mark.asyncio
    async def test_lclear_returns_length_and_deletes(self, store):
        await _list(store, "a", "b", "c")

        assert await store.lclear(KEY) == 3
        assert await store.exists(KEY) == 0
        assert await store.lclear(KEY) == 0

    @pytest.mark.asyncio
    async def test_rpopset_on_empty_deletes_destination(self, store):
        await store.set(DEST, "stale")

        assert await store.rpopset(KEY, DEST) is None
        assert await store.get(DEST) is None

    @pytest.mark.asyncio
    async def test_last_pop_removes_key(self, store):
        await _list(store, "a")
        await store.rpopset(KEY, DEST)

        assert await store.exists(KEY) == 0

    @pytest.mark.asyncio
    async def test_lindex_negative(self, store):
        await _list(store, "a", "b", "c")

        assert await store.lindex(KEY, -1) == "c"
        assert await store.lindex(KEY, 0) == "a"
        assert await store.lindex(KEY, 3) is None
        assert await store.lindex(KEY, -4) is None

    @pytest.mark.asyncio
    async def test_lrem_at(self, store):
        await _list(store, "a", "b", "a")

        assert await store.lrem_at(KEY, -1) is True
        assert await store.lrange(KEY, 0, -1) == ["a", "b"]
        assert await store.lrem_at(KEY, 5) is False

    @pytest.mark.asyncio
    async def test_lmove_index(self, store):
        await _list(store, "a", "b", "c", "d")

        assert await store.lmove_index(KEY, 0, 2) is True
        assert await store.lrange(KEY, 0, -1) == ["b", "c", "a", "d"]
        assert await store.lmove_index(KEY, 0, 4) is False

    @pytest.mark.asyncio
    async def test_lshuffle_is_seeded(self, store):
        """Should produce the same permutation for the same seed."""
        values = [str(i) for i in range(20)]
        await store.rpush("one", *values)
        await store.rpush("two", *values)

        assert await store.lshuffle("one", 42) == 20
        await store.lshuffle("two", 42)

        shuffled = await store.lrange("one", 0, -1)
        assert shuffled == await store.lrange("two", 0, -1)
        assert sorted(shuffled) == sorted(values)

    @pytest.mark.asyncio
    async def test_lrange_bounds(self, store):
        await _list(store, "a", "b", "c")

        assert await store.lrange(KEY, -2, -1) == ["b", "c"]
        assert await store.lrange(KEY, 1, 10) == ["b", "c"]
        assert await store.lrange(KEY, 2, 1) == []
        assert await store.lrange("missing", 0, -1) == []


class TestExpiry:
    """Tests for pexpire_many and lazy expiry."""

    @pytest.mark.asyncio
    async def test_reports_per_key(self, store):
        await store.set("a", "1")

        assert await store.pexpire_many(["a", "missing"], 5000) == [True, False]
        assert store.ttl_ms("a") == 5000

    @pytest.mark.asyncio
    async def test_expired_keys_vanish(self, store, clock):
        await store.set("a", "1")
        await _list(store, "x")
        await store.pexpire_many(["a", KEY], 1000)

        clock.advance(1.0)

        assert await store.get("a") is None
        assert await store.llen(KEY) == 0
        assert await store.exists("a", KEY) == 0


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_ping_and_close(self, store):
        await store.set("a", "1")

        assert await store.ping() is True
        await store.close()
        assert await store.get("a") is None
