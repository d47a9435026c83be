# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""memcached store using ``pymemcache``.

``pymemcache`` is a blocking client, so every call is handed to a worker
thread with :func:`asyncio.to_thread`.  A :class:`PooledClient` is used so
concurrent calls never share a socket.

This backend is **optional** -- if ``pymemcache`` is not installed the
module can still be imported but :class:`MemcachedStore` will raise a
clear error at instantiation time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from softcache.core.exceptions import StoreError
from softcache.store import codec
from softcache.store.base import KVStore

logger = logging.getLogger("softcache.store.memcached")

try:
    from pymemcache.client.base import PooledClient
    from pymemcache.exceptions import MemcacheClientError, MemcacheError

    _MEMCACHED_AVAILABLE = True
except ImportError:  # pragma: no cover
    PooledClient = None  # type: ignore[assignment,misc]
    _MEMCACHED_AVAILABLE = False


def memcached_available() -> bool:
    """Return ``True`` if the ``pymemcache`` package is installed."""
    return _MEMCACHED_AVAILABLE


class MemcachedStore(KVStore):
    """memcached-backed store.

    Args:
        host: Server hostname.
        port: Server port.
        timeout: Socket connect and read timeout in seconds.
        max_pool_size: Upper bound on pooled connections.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 11211,
        timeout: float = 1.0,
        max_pool_size: int = 16,
    ) -> None:
        if not _MEMCACHED_AVAILABLE:
            raise RuntimeError(
                "The 'pymemcache' package is required for the memcached store. "
                "Install it with: pip install 'softcache[memcached]'"
            )
        self.host = host
        self.port = port
        self._client = PooledClient(
            (host, port),
            connect_timeout=timeout,
            timeout=timeout,
            no_delay=True,
            max_pool_size=max_pool_size,
        )

    # ------------------------------------------------------------------
    # KVStore interface
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        try:
            await asyncio.to_thread(self._client.version)
        except (MemcacheError, OSError) as exc:
            logger.debug("memcached %s:%d unreachable: %s", self.host, self.port, exc)
            return False
        return True

    async def get(self, key: str) -> Any | None:
        data = await self._call("get", self._client.get, key)
        return codec.decode(data)

    async def set(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        data = codec.encode(value, compress)
        return bool(await self._call("set", self._client.set, key, data, ttl, False))

    async def add(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        data = codec.encode(value, compress)
        return bool(await self._call("add", self._client.add, key, data, ttl, False))

    async def replace(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        data = codec.encode(value, compress)
        return bool(await self._call("replace", self._client.replace, key, data, ttl, False))

    async def delete(self, key: str) -> bool:
        return bool(await self._call("delete", self._client.delete, key, False))

    async def increment(self, key: str, by: int = 1) -> int | None:
        if by < 0:
            func, amount = self._client.decr, -by
        else:
            func, amount = self._client.incr, by
        try:
            result = await asyncio.to_thread(func, key, amount, False)
        except MemcacheClientError:
            # value is not a decimal number
            return None
        except (MemcacheError, OSError) as exc:
            raise StoreError(f"memcached increment {key} failed: {exc}") from exc
        return int(result) if result is not None else None

    async def flush(self) -> None:
        await self._call("flush", self._client.flush_all, 0, False)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call(self, op: str, func: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except (MemcacheError, OSError) as exc:
            raise StoreError(f"memcached {op} failed: {exc}") from exc
