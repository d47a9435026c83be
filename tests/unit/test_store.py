# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the backing stores: memory semantics, codec, networked clients, factory."""

from __future__ import annotations

import time
import zlib
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from softcache.client.facade import SoftCache
from softcache.core.config import Settings
from softcache.core.constants import StoreBackend
from softcache.core.exceptions import StoreError
from softcache.store import codec
from softcache.store.base import KVStore
from softcache.store.factory import create_store
from softcache.store.memory import MemoryStore

# ---------------------------------------------------------------------------
# Abstract base class contract
# ---------------------------------------------------------------------------


class TestKVStoreInterface:
    def test_is_subclass(self) -> None:
        assert issubclass(MemoryStore, KVStore)

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            KVStore()  # type: ignore[abstract]


# ---------------------------------------------------------------------------
# MemoryStore
# ---------------------------------------------------------------------------


class TestMemoryStore:
    async def test_connect(self, store: MemoryStore) -> None:
        assert await store.connect() is True

    async def test_get_set(self, store: MemoryStore) -> None:
        assert await store.set("k1", {"a": 1}) is True
        assert await store.get("k1") == {"a": 1}

    async def test_get_missing(self, store: MemoryStore) -> None:
        assert await store.get("nonexistent") is None

    async def test_values_are_copied(self, store: MemoryStore) -> None:
        original = {"a": 1}
        await store.set("k1", original)
        original["a"] = 2
        fetched = await store.get("k1")
        fetched["a"] = 3
        assert await store.get("k1") == {"a": 1}

    async def test_add_only_when_absent(self, store: MemoryStore) -> None:
        assert await store.add("k1", "first") is True
        assert await store.add("k1", "second") is False
        assert await store.get("k1") == "first"

    async def test_replace_only_when_present(self, store: MemoryStore) -> None:
        assert await store.replace("k1", "v") is False
        assert "k1" not in store
        await store.set("k1", "old")
        assert await store.replace("k1", "new") is True
        assert await store.get("k1") == "new"

    async def test_delete(self, store: MemoryStore) -> None:
        await store.set("k1", "v1")
        assert await store.delete("k1") is True
        assert await store.delete("k1") is False

    async def test_increment_existing(self, store: MemoryStore) -> None:
        await store.set("n", 5)
        assert await store.increment("n") == 6
        assert await store.increment("n", 4) == 10
        assert await store.get("n") == 10

    async def test_increment_missing_does_not_create(self, store: MemoryStore) -> None:
        assert await store.increment("n") is None
        assert "n" not in store

    async def test_increment_non_numeric(self, store: MemoryStore) -> None:
        await store.set("s", "abc")
        await store.set("b", True)
        assert await store.increment("s") is None
        assert await store.increment("b") is None

    async def test_increment_numeric_string(self, store: MemoryStore) -> None:
        await store.set("n", "41")
        assert await store.increment("n") == 42

    async def test_ttl_expiry(self, store: MemoryStore) -> None:
        await store.set("k1", "v1", ttl=60)
        assert await store.get("k1") == "v1"
        store._store["k1"].expires_at = time.monotonic() - 1
        assert await store.get("k1") is None
        assert await store.add("k1", "again") is True

    async def test_zero_ttl_never_expires(self, store: MemoryStore) -> None:
        await store.set("k1", "v1", ttl=0)
        assert store._store["k1"].expires_at is None

    async def test_lru_eviction(self) -> None:
        small = MemoryStore(max_size=2)
        await small.set("a", 1)
        await small.set("b", 2)
        await small.get("a")
        await small.set("c", 3)
        assert await small.get("a") == 1
        assert await small.get("b") is None

    async def test_flush(self, store: MemoryStore) -> None:
        await store.set("a", 1)
        await store.set("b", 2)
        await store.flush()
        assert len(store) == 0


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class TestCodec:
    def test_integers_are_bare_decimals(self) -> None:
        assert codec.encode(12) == b"12"

    def test_decode_plain_json(self) -> None:
        assert codec.decode(b'{"a":[1,2]}') == {"a": [1, 2]}
        assert codec.decode("7") == 7

    def test_decode_none(self) -> None:
        assert codec.decode(None) is None

    def test_compressed_values_are_zlib(self) -> None:
        data = codec.encode({"payload": "x" * 500}, compress=True)
        assert data.startswith(b"x")
        assert zlib.decompress(data) == b'{"payload":"' + b"x" * 500 + b'"}'
        assert codec.decode(data) == {"payload": "x" * 500}

    def test_unserialisable_value(self) -> None:
        with pytest.raises(StoreError):
            codec.encode(object())


    def test_foreign_bytes_raise_store_error(self) -> None:
        with pytest.raises(StoreError):
            codec.decode(b'a:1:{i:0;s:1:"x";}')

    def test_corrupt_compressed_value_raises_store_error(self) -> None:
        with pytest.raises(StoreError):
            codec.decode(b"x\x9cnot-really-zlib")

    def test_invalid_utf8_raises_store_error(self) -> None:
        with pytest.raises(StoreError):
            codec.decode(b"\xff\xfe")

# ---------------------------------------------------------------------------
# MemcachedStore (pymemcache client mocked)
# ---------------------------------------------------------------------------


@pytest.fixture
def memcached_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def memcached_store(memcached_client: MagicMock):
    from softcache.store.memcached import MemcachedStore

    with patch("softcache.store.memcached.PooledClient", return_value=memcached_client):
        yield MemcachedStore(host="cache.local", port=11212)


class TestMemcachedStore:
    async def test_connect_ok(self, memcached_store, memcached_client) -> None:
        memcached_client.version.return_value = b"1.6.21"
        assert await memcached_store.connect() is True

    async def test_connect_refused(self, memcached_store, memcached_client) -> None:
        memcached_client.version.side_effect = ConnectionRefusedError()
        assert await memcached_store.connect() is False

    async def test_set_encodes_value(self, memcached_store, memcached_client) -> None:
        memcached_client.set.return_value = True
        assert await memcached_store.set("k", {"a": 1}, 60) is True
        memcached_client.set.assert_called_once_with("k", b'{"a":1}', 60, False)

    async def test_add_reports_existing(self, memcached_store, memcached_client) -> None:
        memcached_client.add.return_value = False
        assert await memcached_store.add("k", 1, 0) is False
        memcached_client.add.assert_called_once_with("k", b"1", 0, False)

    async def test_get_decodes(self, memcached_store, memcached_client) -> None:
        memcached_client.get.return_value = b'"hello"'
        assert await memcached_store.get("k") == "hello"

    async def test_increment_missing(self, memcached_store, memcached_client) -> None:
        memcached_client.incr.return_value = None
        assert await memcached_store.increment("idx") is None

    async def test_negative_increment_decrements(self, memcached_store, memcached_client) -> None:
        memcached_client.decr.return_value = 3
        assert await memcached_store.increment("n", -2) == 3
        memcached_client.decr.assert_called_once_with("n", 2, False)

    async def test_client_errors_become_store_errors(
        self, memcached_store, memcached_client
    ) -> None:
        from pymemcache.exceptions import MemcacheUnexpectedCloseError

        memcached_client.get.side_effect = MemcacheUnexpectedCloseError()
        with pytest.raises(StoreError):
            await memcached_store.get("k")


    async def test_foreign_value_raises_store_error(
        self, memcached_store, memcached_client
    ) -> None:
        memcached_client.get.return_value = b'a:1:{i:0;s:1:"x";}'
        with pytest.raises(StoreError):
            await memcached_store.get("k")

    async def test_foreign_value_is_a_miss_through_facade(
        self, memcached_store, memcached_client
    ) -> None:
        memcached_client.version.return_value = b"1.6.21"
        memcached_client.get.return_value = b'a:1:{i:0;s:1:"x";}'
        cache = SoftCache(store=memcached_store, settings=Settings(backend=StoreBackend.MEMCACHED))
        assert await cache.get("k") is None

# ---------------------------------------------------------------------------
# RedisStore (redis client mocked)
# ---------------------------------------------------------------------------


@pytest.fixture
def redis_client() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock()
    client.set = AsyncMock()
    client.delete = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.flushdb = AsyncMock()
    client.aclose = AsyncMock()
    client.register_script.return_value = AsyncMock()
    return client


@pytest.fixture
def redis_store(redis_client: MagicMock):
    from softcache.store.redis import RedisStore

    with patch("softcache.store.redis.aioredis.from_url", return_value=redis_client):
        yield RedisStore("redis://cache.local:6379/1")


class TestRedisStore:
    def test_redis_available_returns_bool(self) -> None:
        from softcache.store.redis import redis_available

        assert isinstance(redis_available(), bool)

    async def test_connect(self, redis_store, redis_client) -> None:
        assert await redis_store.connect() is True

    async def test_connect_error(self, redis_store, redis_client) -> None:
        from redis.exceptions import ConnectionError as RedisConnectionError

        redis_client.ping.side_effect = RedisConnectionError("refused")
        assert await redis_store.connect() is False

    async def test_add_uses_nx(self, redis_store, redis_client) -> None:
        redis_client.set.return_value = None
        assert await redis_store.add("k", 1, 0) is False
        redis_client.set.assert_awaited_once_with("k", b"1", ex=None, nx=True, xx=False)

    async def test_replace_uses_xx_with_ttl(self, redis_store, redis_client) -> None:
        redis_client.set.return_value = True
        assert await redis_store.replace("k", "v", 30) is True
        redis_client.set.assert_awaited_once_with("k", b'"v"', ex=30, nx=False, xx=True)

    async def test_increment_runs_script(self, redis_store, redis_client) -> None:
        script = redis_client.register_script.return_value
        script.return_value = 4
        assert await redis_store.increment("idx") == 4
        script.assert_awaited_once_with(keys=["idx"], args=[1])

    async def test_increment_missing(self, redis_store, redis_client) -> None:
        redis_client.register_script.return_value.return_value = None
        assert await redis_store.increment("idx") is None

    async def test_get_decodes(self, redis_store, redis_client) -> None:
        redis_client.get.return_value = b"[1,2]"
        assert await redis_store.get("k") == [1, 2]

    async def test_errors_become_store_errors(self, redis_store, redis_client) -> None:
        from redis.exceptions import TimeoutError as RedisTimeoutError

        redis_client.delete.side_effect = RedisTimeoutError("slow")
        with pytest.raises(StoreError):
            await redis_store.delete("k")


    async def test_foreign_value_raises_store_error(self, redis_store, redis_client) -> None:
        redis_client.get.return_value = b"<?php serialized ?>"
        with pytest.raises(StoreError):
            await redis_store.get("k")

# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestCreateStore:
    def test_memory(self) -> None:
        assert isinstance(create_store(Settings(backend=StoreBackend.MEMORY)), MemoryStore)

    def test_memcached_uses_host_and_port(self) -> None:
        from softcache.store.memcached import MemcachedStore

        with patch("softcache.store.memcached.PooledClient") as pooled:
            store = create_store(
                Settings(backend=StoreBackend.MEMCACHED, host="cache.local:11300")
            )
        assert isinstance(store, MemcachedStore)
        assert pooled.call_args.args[0] == ("cache.local", 11300)

    def test_memcached_falls_back_without_client(self) -> None:
        with patch("softcache.store.memcached._MEMCACHED_AVAILABLE", False):
            store = create_store(Settings(backend=StoreBackend.MEMCACHED))
        assert isinstance(store, MemoryStore)

    def test_redis_falls_back_without_client(self) -> None:
        with patch("softcache.store.redis._REDIS_AVAILABLE", False):
            store = create_store(Settings(backend=StoreBackend.REDIS))
        assert isinstance(store, MemoryStore)
