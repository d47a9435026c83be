# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""The :class:`SoftCache` facade.

One handle wraps one backing store and adds the key prefix, soft
expiration and indexed lists on top of the raw operations.  Failures of
the store never raise out of the facade: reads come back as ``None`` and
writes as ``False``.  The one exception is a non-numeric ttl, which is a
programming error and raises :class:`ConfigurationError`.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from softcache.client.expiry import CleanQueue
from softcache.client.lists import IndexedList
from softcache.core.config import Settings, get_settings
from softcache.core.constants import CompressionFlag, ConnectionState, StoreBackend
from softcache.core.exceptions import ConfigurationError, ContentionError, StoreError
from softcache.store.base import KVStore
from softcache.store.factory import create_store

logger = logging.getLogger("softcache.client.facade")

T = TypeVar("T")

# Module-level singleton
_client: SoftCache | None = None


def coerce_ttl(ttl: object) -> int:
    """Return ``ttl`` as whole seconds.

    Numbers and numeric strings are accepted; anything else (including
    booleans) raises :class:`ConfigurationError`.
    """
    if isinstance(ttl, int) and not isinstance(ttl, bool):
        return ttl
    if isinstance(ttl, (float, str)):
        try:
            seconds = float(ttl)
        except ValueError:
            pass
        else:
            if math.isfinite(seconds):
                return int(seconds)
    raise ConfigurationError(f"ttl must be numeric, got {ttl!r}")


class SoftCache:
    """Prefixed cache client with soft expiration and indexed lists.

    Args:
        store: Backing store.  Built from ``settings`` when omitted.
        settings: Configuration; defaults to :func:`get_settings`.
        clock: Epoch-seconds time source for soft expiration.
    """

    def __init__(
        self,
        store: KVStore | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store if store is not None else create_store(self._settings)
        self._state = ConnectionState.UNKNOWN
        self.queue = CleanQueue(self._store, self._settings.key_prefix, clock=clock)
        self.lists = IndexedList(self._store, self._settings)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SoftCache:
        settings = settings or get_settings()
        return cls(create_store(settings), settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> KVStore:
        return self._store

    @property
    def state(self) -> ConnectionState:
        return self._state

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Connect on first use.

        The outcome is remembered: once a connection attempt has failed,
        this handle never tries again.
        """
        if self._state is ConnectionState.CONNECTED:
            return True
        if self._state is ConnectionState.FAILED:
            return False

        try:
            ok = await self._store.connect()
        except StoreError:
            ok = False

        if ok:
            self._state = ConnectionState.CONNECTED
        else:
            self._state = ConnectionState.FAILED
            logger.error("Failed to connect to cache server %s", self._describe_server())
        return ok

    async def close(self) -> None:
        """Release resources held by the store."""
        await self._store.close()

    async def __aenter__(self) -> SoftCache:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Prefixed passthrough
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the value for ``key``, or ``None`` on a miss.

        Keys scheduled for soft expiration whose deadline has passed are
        deleted here and reported as a miss.
        """

        async def _get() -> Any | None:
            if self._settings.use_clean_queue and await self.queue.is_stale(key):
                return None
            return await self._store.get(self._key(key))

        return await self._call("get", key, _get, None)

    async def set(
        self, key: str, value: Any, ttl: Any = None, compress: bool = False
    ) -> bool:
        """Store ``value``; ``ttl`` defaults to ``settings.default_ttl``."""
        seconds = self._ttl(ttl)
        return await self._call(
            "set",
            key,
            lambda: self._store.set(self._key(key), value, seconds, self._compress(compress)),
            False,
        )

    async def add(
        self, key: str, value: Any, ttl: Any = None, compress: bool = False
    ) -> bool:
        """Store ``value`` only if ``key`` does not exist yet."""
        seconds = self._ttl(ttl)
        return await self._call(
            "add",
            key,
            lambda: self._store.add(self._key(key), value, seconds, self._compress(compress)),
            False,
        )

    async def replace(
        self, key: str, value: Any, ttl: Any = None, compress: bool = False
    ) -> bool:
        """Store ``value`` only if ``key`` already exists."""
        seconds = self._ttl(ttl)
        return await self._call(
            "replace",
            key,
            lambda: self._store.replace(self._key(key), value, seconds, self._compress(compress)),
            False,
        )

    async def delete(self, key: str) -> bool:
        return await self._call("delete", key, lambda: self._store.delete(self._key(key)), False)

    async def increment(self, key: str, by: int = 1) -> int | None:
        return await self._call(
            "increment", key, lambda: self._store.increment(self._key(key), by), None
        )

    async def flush(self) -> None:
        """Invalidate every entry on the server, not only prefixed ones."""
        await self._call("flush", None, self._store.flush, None)

    # ------------------------------------------------------------------
    # Soft expiration
    # ------------------------------------------------------------------

    async def schedule_expiry(self, key: str, seconds: Any = 0) -> bool:
        """Treat ``key`` as missing once ``seconds`` have passed.

        Scheduling again can bring the deadline forward but never push it
        back.  ``seconds`` is validated like a ttl.
        """
        delay = coerce_ttl(seconds)
        return await self._call(
            "schedule_expiry", key, lambda: self.queue.schedule(key, delay), False
        )

    async def is_stale(self, key: str) -> bool:
        """Check ``key`` against its deadline, deleting it if it has passed."""
        return await self._call("is_stale", key, lambda: self.queue.is_stale(key), False)

    async def list_scheduled_expirations(self) -> dict[str, int]:
        return await self._call("list_scheduled", None, self.queue.scheduled, {})

    async def purge_expiration_schedule(self) -> bool:
        """Forget all scheduled deadlines without touching the entries."""
        return await self._call("purge_schedule", None, self.queue.purge, False)

    # ------------------------------------------------------------------
    # Indexed lists
    # ------------------------------------------------------------------

    async def push(self, list_name: str, value: Any, ttl: Any = None) -> bool:
        """Append ``value`` to ``list_name``; each slot expires after ``ttl``."""
        seconds = self._ttl(ttl)
        return await self._call(
            "push", list_name, lambda: self.lists.push(list_name, value, seconds), False
        )

    async def trim(self, list_name: str) -> dict[int, Any]:
        """Return ``{slot: value}`` for every readable slot of ``list_name``."""
        return await self._call("trim", list_name, lambda: self.lists.trim(list_name), {})

    async def list_length(self, list_name: str) -> int:
        return await self._call(
            "list_length", list_name, lambda: self.lists.length(list_name), 0
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _key(self, key: str) -> str:
        return f"{self._settings.key_prefix}{key}"

    def _ttl(self, ttl: Any) -> int:
        return self._settings.default_ttl if ttl is None else coerce_ttl(ttl)

    def _compress(self, requested: bool) -> bool:
        return requested and self._settings.compression != CompressionFlag.NONE

    def _describe_server(self) -> str:
        if self._settings.backend == StoreBackend.REDIS:
            return self._settings.redis_url
        host, port = self._settings.host_and_port()
        return f"{host}:{port}"

    async def _call(
        self,
        op: str,
        key: str | None,
        func: Callable[[], Awaitable[T]],
        default: T,
    ) -> T:
        if not await self.connect():
            return default
        try:
            return await func()
        except StoreError as exc:
            logger.warning("Cache %s failed: %s", op, exc, extra={"cache_key": key})
        except ContentionError:
            # logged where the retries ran out
            pass
        return default


def get_client() -> SoftCache:
    """Return the module-level :class:`SoftCache` singleton.

    Creates a new instance on first call using application settings.
    """
    global _client
    if _client is None:
        _client = SoftCache.from_settings()
    return _client


def reset_client() -> None:
    """Reset the singleton (useful for testing)."""
    global _client
    _client = None
