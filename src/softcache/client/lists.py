# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Append-only lists on a flat key-value store.

A list ``L`` is spread over three kinds of keys:

* ``list:L:idx`` -- counter holding the highest slot handed out
* ``list:L:<n>`` -- one entry per pushed value, ``n >= 1``
* ``list:L:lock`` -- set while a trim is reading the list

Slot numbers come only from the atomic counter, so concurrent pushers
never share a slot.  They may leave gaps, and a higher slot can be written
before a lower one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from softcache.client.lock import SpinLock, spin_until
from softcache.core.config import Settings
from softcache.core.constants import LIST_INDEX_SUFFIX, LIST_KEY_PREFIX, LIST_LOCK_SUFFIX
from softcache.store.base import KVStore

logger = logging.getLogger("softcache.client.lists")


@dataclass(frozen=True)
class ListKeys:
    """Physical keys of one list."""

    base: str

    @classmethod
    def for_list(cls, name: str, prefix: str = "") -> ListKeys:
        return cls(base=f"{prefix}{LIST_KEY_PREFIX}{name}:")

    @property
    def index(self) -> str:
        return f"{self.base}{LIST_INDEX_SUFFIX}"

    @property
    def lock(self) -> str:
        return f"{self.base}{LIST_LOCK_SUFFIX}"

    def slot(self, n: int) -> str:
        return f"{self.base}{n}"


class IndexedList:
    """Push and trim operations for indexed lists.

    Raises :class:`~softcache.core.exceptions.ContentionError` when the
    trim lock or the index counter stays contended past the configured
    ceilings; the facade turns that into a failed result.
    """

    def __init__(self, store: KVStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def keys(self, name: str) -> ListKeys:
        return ListKeys.for_list(name, self._settings.key_prefix)

    def lock(self, name: str) -> SpinLock:
        return SpinLock(self._store, self.keys(name).lock, ttl=self._settings.lock_ttl)

    async def push(self, name: str, value: Any, ttl: int) -> bool:
        """Append ``value`` to list ``name``.

        Waits for a running trim to finish, then claims the next slot.
        """
        if not name:
            return False
        keys = self.keys(name)
        await self.lock(name).wait_released(
            attempts=self._settings.push_lock_retries,
            delay=self._settings.spin_delay,
        )
        slot = await self._next_slot(keys.index)
        return await self._store.set(keys.slot(slot), value, ttl)

    async def trim(self, name: str) -> dict[int, Any]:
        """Read every slot of list ``name`` in slot order.

        Pushes are held off while the lock is set, but a push that already
        passed its lock check can still land during the read.  Slots and
        the counter are left in place.
        """
        keys = self.keys(name)
        lock = self.lock(name)
        await lock.acquire()
        try:
            await asyncio.sleep(self._settings.trim_settle_delay)
            last = await self._index_value(keys.index)
            values: dict[int, Any] = {}
            for n in range(1, last + 1):
                value = await self._store.get(keys.slot(n))
                if value is not None:
                    values[n] = value
        finally:
            await lock.release()
        logger.debug("Trimmed %d of %d slots from %s", len(values), last, name)
        return values

    async def length(self, name: str) -> int:
        """Return the highest slot handed out so far (``0`` for a new list)."""
        return await self._index_value(self.keys(name).index)

    async def _next_slot(self, index_key: str) -> int:
        async def _claim() -> int | None:
            slot = await self._store.increment(index_key)
            if slot is not None:
                return slot
            # first push: only one creator can win the add
            if await self._store.add(index_key, 1, 0):
                return 1
            return None

        return await spin_until(
            _claim,
            key=index_key,
            attempts=self._settings.index_retries,
            delay=self._settings.spin_delay,
        )

    async def _index_value(self, index_key: str) -> int:
        raw = await self._store.get(index_key)
        try:
            return int(raw or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric list index %r", raw, extra={"cache_key": index_key})
            return 0
