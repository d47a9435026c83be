# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Redis store using the ``redis`` async client.

This backend is **optional** -- if the ``redis`` package is not installed
the module can still be imported but :class:`RedisStore` will raise a
clear error at instantiation time.

memcached semantics are mapped onto Redis commands: ``add`` is ``SET NX``,
``replace`` is ``SET XX`` and ``increment`` runs a small script so a
missing counter is reported instead of silently created at zero.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from softcache.core.exceptions import StoreError
from softcache.store import codec
from softcache.store.base import KVStore

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("softcache.store.redis")

try:
    import redis.asyncio as aioredis
    from redis.exceptions import RedisError, ResponseError

    _REDIS_AVAILABLE = True
except ImportError:  # pragma: no cover
    aioredis = None  # type: ignore[assignment]
    _REDIS_AVAILABLE = False

_INCR_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('INCRBY', KEYS[1], ARGV[1])
end
return false
"""


def redis_available() -> bool:
    """Return ``True`` if the ``redis`` package is installed."""
    return _REDIS_AVAILABLE


@contextlib.contextmanager
def _translate_errors(op: str, key: str | None = None) -> Iterator[None]:
    try:
        yield
    except (RedisError, OSError) as exc:
        target = f" {key}" if key else ""
        raise StoreError(f"redis {op}{target} failed: {exc}") from exc


class RedisStore(KVStore):
    """Redis-backed store using ``redis-py`` async client.

    Args:
        redis_url: Redis connection URL (e.g. ``redis://localhost:6379/0``).
    """

    def __init__(self, redis_url: str = "redis://localhost:6379/0") -> None:
        if not _REDIS_AVAILABLE:
            raise RuntimeError(
                "The 'redis' package is required for the Redis store. "
                "Install it with: pip install 'softcache[redis]'"
            )
        self._client: Redis = aioredis.from_url(redis_url, decode_responses=False)
        self._incr = self._client.register_script(_INCR_IF_EXISTS)

    # ------------------------------------------------------------------
    # KVStore interface
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as exc:
            logger.debug("Redis ping failed: %s", exc)
            return False

    async def get(self, key: str) -> Any | None:
        with _translate_errors("get", key):
            data = await self._client.get(key)
        return codec.decode(data)

    async def set(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        return await self._store(key, value, ttl, compress)

    async def add(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        return await self._store(key, value, ttl, compress, nx=True)

    async def replace(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        return await self._store(key, value, ttl, compress, xx=True)

    async def delete(self, key: str) -> bool:
        with _translate_errors("delete", key):
            result = await self._client.delete(key)
        return bool(result)

    async def increment(self, key: str, by: int = 1) -> int | None:
        try:
            result = await self._incr(keys=[key], args=[by])
        except ResponseError:
            # value is not an integer
            return None
        except (RedisError, OSError) as exc:
            raise StoreError(f"redis increment {key} failed: {exc}") from exc
        return int(result) if result is not None else None

    async def flush(self) -> None:
        with _translate_errors("flush"):
            await self._client.flushdb()

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _store(
        self,
        key: str,
        value: Any,
        ttl: int,
        compress: bool,
        *,
        nx: bool = False,
        xx: bool = False,
    ) -> bool:
        data = codec.encode(value, compress)
        with _translate_errors("set", key):
            result = await self._client.set(key, data, ex=ttl or None, nx=nx, xx=xx)
        return bool(result)
