"""
Tests for the ciphertext stores.

Tests cover:
- MemoryStore put/get/delete with lazy expiry
- RedisStore against fakeredis, including native TTLs
- compare_and_delete single-consumer semantics
- Backend failures surfaced as StoreUnavailable
- store_from_url dispatch
"""
import asyncio

import pytest

from ephemeral_vault.exceptions import ConfigurationError, StoreUnavailable
from ephemeral_vault.storage import (
    MemoryStore,
    RedisStore,
    store_from_url,
)


# --- MemoryStore ---

class TestMemoryStore:
    """Tests for the in-process store."""

    @pytest.mark.asyncio
    async def test_put_and_get(self, memory_store):
        await memory_store.put("abc", b"blob")
        assert await memory_store.get("abc") == b"blob"

    @pytest.mark.asyncio
    async def test_get_missing_is_none(self, memory_store):
        assert await memory_store.get("missing") is None

    @pytest.mark.asyncio
    async def test_empty_blob_is_not_absent(self, memory_store):
        await memory_store.put("abc", b"")
        assert await memory_store.get("abc") == b""

    @pytest.mark.asyncio
    async def test_put_overwrites(self, memory_store):
        await memory_store.put("abc", b"one")
        await memory_store.put("abc", b"two")
        assert await memory_store.get("abc") == b"two"

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, memory_store, clock):
        await memory_store.put("abc", b"blob", ttl=60)
        clock.advance(59)
        assert await memory_store.get("abc") == b"blob"
        clock.advance(1)
        assert await memory_store.get("abc") is None
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, memory_store, clock):
        await memory_store.put("abc", b"blob", ttl=0)
        clock.advance(10 ** 9)
        assert await memory_store.get("abc") == b"blob"

    @pytest.mark.asyncio
    async def test_negative_ttl_rejected(self, memory_store):
        with pytest.raises(ValueError):
            await memory_store.put("abc", b"blob", ttl=-1)

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, memory_store):
        await memory_store.put("abc", b"blob")
        await memory_store.delete("abc")
        await memory_store.delete("abc")
        assert await memory_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_compare_and_delete_once(self, memory_store):
        await memory_store.put("abc", b"blob")
        assert await memory_store.compare_and_delete("abc", b"blob") is True
        assert await memory_store.compare_and_delete("abc", b"blob") is False
        assert await memory_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_compare_and_delete_mismatch_keeps_entry(self, memory_store):
        await memory_store.put("abc", b"blob")
        assert await memory_store.compare_and_delete("abc", b"other") is False
        assert await memory_store.get("abc") == b"blob"

    @pytest.mark.asyncio
    async def test_compare_and_delete_expired(self, memory_store, clock):
        await memory_store.put("abc", b"blob", ttl=1)
        clock.advance(2)
        assert await memory_store.compare_and_delete("abc", b"blob") is False

    @pytest.mark.asyncio
    async def test_concurrent_compare_and_delete(self, memory_store):
        await memory_store.put("abc", b"blob")
        results = await asyncio.gather(*[
            memory_store.compare_and_delete("abc", b"blob")
            for _ in range(25)
        ])
        assert results.count(True) == 1

    @pytest.mark.asyncio
    async def test_context_manager_clears(self):
        async with MemoryStore() as store:
            await store.put("abc", b"blob")
            assert len(store) == 1
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_timeout_is_store_unavailable(self):
        store = MemoryStore(timeout=0.01)
        with pytest.raises(StoreUnavailable):
            await store._bounded("slow", asyncio.sleep(1))

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            MemoryStore(timeout=0)


# --- RedisStore ---

class TestRedisStore:
    """Tests for the Redis store using fakeredis."""

    @pytest.mark.asyncio
    async def test_put_and_get(self, redis_store, fake_redis):
        await redis_store.put("abc", b"blob")
        assert await redis_store.get("abc") == b"blob"
        assert await fake_redis.get("secret:abc") == b"blob"

    @pytest.mark.asyncio
    async def test_custom_prefix(self, fake_redis):
        store = RedisStore(client=fake_redis, prefix="ev:")
        await store.put("abc", b"blob")
        assert await fake_redis.get("ev:abc") == b"blob"

    @pytest.mark.asyncio
    async def test_get_missing_is_none(self, redis_store):
        assert await redis_store.get("missing") is None

    @pytest.mark.asyncio
    async def test_empty_blob_is_not_absent(self, redis_store):
        await redis_store.put("abc", b"")
        assert await redis_store.get("abc") == b""

    @pytest.mark.asyncio
    async def test_ttl_is_set(self, redis_store, fake_redis):
        await redis_store.put("abc", b"blob", ttl=3600)
        pttl = await fake_redis.pttl("secret:abc")
        assert 0 < pttl <= 3600 * 1000

    @pytest.mark.asyncio
    async def test_zero_ttl_persists(self, redis_store, fake_redis):
        await redis_store.put("abc", b"blob", ttl=0)
        assert await fake_redis.pttl("secret:abc") == -1

    @pytest.mark.asyncio
    async def test_expired_entry_is_absent(self, redis_store):
        await redis_store.put("abc", b"blob", ttl=0.05)
        await asyncio.sleep(0.2)
        assert await redis_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_negative_ttl_rejected(self, redis_store):
        with pytest.raises(ValueError):
            await redis_store.put("abc", b"blob", ttl=-5)

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, redis_store):
        await redis_store.put("abc", b"blob")
        await redis_store.delete("abc")
        await redis_store.delete("abc")
        assert await redis_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_compare_and_delete_once(self, redis_store):
        await redis_store.put("abc", b"blob")
        assert await redis_store.compare_and_delete("abc", b"blob") is True
        assert await redis_store.compare_and_delete("abc", b"blob") is False
        assert await redis_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_compare_and_delete_mismatch_keeps_entry(self, redis_store):
        await redis_store.put("abc", b"blob")
        assert await redis_store.compare_and_delete("abc", b"other") is False
        assert await redis_store.get("abc") == b"blob"

    @pytest.mark.asyncio
    async def test_compare_and_delete_missing(self, redis_store):
        assert await redis_store.compare_and_delete("nope", b"blob") is False

    @pytest.mark.asyncio
    async def test_backend_failure(self, offline_redis):
        store = RedisStore(client=offline_redis)
        with pytest.raises(StoreUnavailable):
            await store.open()
        with pytest.raises(StoreUnavailable):
            await store.put("abc", b"blob")
        with pytest.raises(StoreUnavailable):
            await store.get("abc")
        with pytest.raises(StoreUnavailable):
            await store.delete("abc")
        with pytest.raises(StoreUnavailable):
            await store.compare_and_delete("abc", b"blob")

    def test_requires_url_or_client(self):
        with pytest.raises(ValueError):
            RedisStore()


# --- store_from_url ---

class TestStoreFromUrl:
    """Tests for URL based store selection."""

    def test_memory(self):
        store = store_from_url("memory://", timeout=2.0, prefix="x:")
        assert isinstance(store, MemoryStore)

    @pytest.mark.asyncio
    async def test_redis(self):
        store = store_from_url("redis://localhost:6379/0", prefix="x:")
        assert isinstance(store, RedisStore)
        await store.close()

    @pytest.mark.parametrize("url", ["ftp://host", "memcached://host", "nowhere"])
    def test_unsupported(self, url):
        with pytest.raises(ConfigurationError):
            store_from_url(url)
