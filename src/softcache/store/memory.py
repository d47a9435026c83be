# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""In-process key-value store with memcached semantics.

Used for tests and single-process deployments.  Values are deep-copied on
the way in and out so callers never share mutable state with the store,
matching what a networked server would do.  There are no awaits between a
read and the matching write, so ``add`` and ``increment`` are atomic with
respect to other tasks on the same event loop.
"""

from __future__ import annotations

import copy
import time
from collections import OrderedDict
from typing import Any

from softcache.store.base import KVStore

# Default maximum number of entries before eviction kicks in.
_DEFAULT_MAX_SIZE = 65536


class _Entry:
    """A stored value with an optional expiry timestamp."""

    __slots__ = ("expires_at", "value")

    def __init__(self, value: Any, expires_at: float | None) -> None:
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() > self.expires_at


class MemoryStore(KVStore):
    """Dict-backed store with TTL expiry and LRU eviction.

    Args:
        max_size: Maximum number of entries.  When exceeded the least
            recently used entry is evicted.
    """

    def __init__(self, max_size: int = _DEFAULT_MAX_SIZE) -> None:
        self._store: OrderedDict[str, _Entry] = OrderedDict()
        self._max_size = max_size

    # ------------------------------------------------------------------
    # KVStore interface
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._live(key)
        if entry is None:
            return None
        self._store.move_to_end(key)
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        self._put(key, value, ttl)
        return True

    async def add(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        if self._live(key) is not None:
            return False
        self._put(key, value, ttl)
        return True

    async def replace(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        if self._live(key) is None:
            return False
        self._put(key, value, ttl)
        return True

    async def delete(self, key: str) -> bool:
        if self._live(key) is None:
            return False
        del self._store[key]
        return True

    async def increment(self, key: str, by: int = 1) -> int | None:
        entry = self._live(key)
        if entry is None or isinstance(entry.value, bool):
            return None
        try:
            current = int(entry.value)
        except (TypeError, ValueError):
            return None
        # memcached counters are unsigned 64-bit: incr wraps, decr stops at zero
        entry.value = (current + by) % 2**64 if by >= 0 else max(current + by, 0)
        return entry.value

    async def flush(self) -> None:
        self._store.clear()

    async def close(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        self._prune_expired()
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._live(key) is not None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _live(self, key: str) -> _Entry | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._store[key]
            return None
        return entry

    def _put(self, key: str, value: Any, ttl: int) -> None:
        expires_at = (time.monotonic() + ttl) if ttl else None
        if key in self._store:
            self._store.move_to_end(key)
        self._store[key] = _Entry(value=copy.deepcopy(value), expires_at=expires_at)
        while len(self._store) > self._max_size:
            self._store.popitem(last=False)

    def _prune_expired(self) -> None:
        """Remove all expired entries."""
        expired_keys = [k for k, v in self._store.items() if v.is_expired()]
        for k in expired_keys:
            del self._store[k]
