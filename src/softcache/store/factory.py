# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Build the configured backing store."""

from __future__ import annotations

import logging

from softcache.core.config import Settings
from softcache.core.constants import StoreBackend
from softcache.store.base import KVStore
from softcache.store.memory import MemoryStore

logger = logging.getLogger("softcache.store.factory")


def create_store(settings: Settings) -> KVStore:
    """Instantiate the store named by ``settings.backend``.

    Falls back to :class:`MemoryStore` when the client library for the
    requested backend is not installed.
    """
    if settings.backend == StoreBackend.MEMCACHED:
        from softcache.store.memcached import MemcachedStore, memcached_available

        if not memcached_available():
            logger.warning(
                "memcached store requested but pymemcache not installed. "
                "Falling back to in-memory store."
            )
            return MemoryStore()
        host, port = settings.host_and_port()
        return MemcachedStore(host=host, port=port)

    if settings.backend == StoreBackend.REDIS:
        from softcache.store.redis import RedisStore, redis_available

        if not redis_available():
            logger.warning(
                "Redis store requested but redis package not installed. "
                "Falling back to in-memory store."
            )
            return MemoryStore()
        return RedisStore(redis_url=settings.redis_url)

    return MemoryStore()
