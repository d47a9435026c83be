# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Soft expiration ("clean queue").

A single cache entry, ``<prefix>__CACHE__``, maps logical keys to the epoch
second after which they count as stale.  Nothing sweeps the map: the first
read of a key past its deadline drops the bookkeeping, deletes the real
entry and reports a miss.

The map is updated with a plain read-then-write, so two writers racing on
it can lose an update.  Lost updates only ever leave a key fresh for
longer; they never delete data early.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from softcache.core.constants import CLEAN_QUEUE_KEY
from softcache.store.base import KVStore

logger = logging.getLogger("softcache.client.expiry")


class CleanQueue:
    """Stale-deadline bookkeeping stored alongside the data it governs.

    Args:
        store: The backing store.
        prefix: Key prefix shared with the facade.  The map lives at
            ``prefix + "__CACHE__"``; logical keys in the map are unprefixed.
        clock: Returns the current epoch time in seconds.
    """

    def __init__(
        self,
        store: KVStore,
        prefix: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._prefix = prefix
        self._clock = clock
        self.map_key = f"{prefix}{CLEAN_QUEUE_KEY}"

    async def scheduled(self) -> dict[str, int]:
        """Return the raw key -> deadline map (empty if none is stored)."""
        deadlines = await self._store.get(self.map_key)
        if not isinstance(deadlines, dict):
            return {}
        return deadlines

    async def schedule(self, key: str, seconds: float = 0) -> bool:
        """Mark ``key`` stale ``seconds`` from now.

        An existing deadline is only ever moved earlier.

        Returns:
            ``True`` if the map was written.
        """
        deadlines = await self.scheduled()
        deadline = int(self._clock() + seconds)
        current = deadlines.get(key)
        if current is not None and deadline >= current:
            return False
        deadlines[key] = deadline
        await self._store.set(self.map_key, deadlines, 0)
        logger.debug("Scheduled %s stale at %s", key, deadline, extra={"cache_key": key})
        return True

    async def is_stale(self, key: str) -> bool:
        """Report whether ``key`` has passed its deadline.

        A stale key is removed from the map and its entry is deleted, so
        only call this from a read that will treat the value as missing.
        """
        deadlines = await self.scheduled()
        deadline = deadlines.get(key)
        if deadline is None or deadline > self._clock():
            return False
        del deadlines[key]
        await self._store.set(self.map_key, deadlines, 0)
        await self._store.delete(f"{self._prefix}{key}")
        logger.debug("Evicted stale key %s", key, extra={"cache_key": key})
        return True

    async def purge(self) -> bool:
        """Forget every deadline.  Entries themselves are left alone."""
        return await self._store.delete(self.map_key)
