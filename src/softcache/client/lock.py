# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache-resident spin-lock and bounded retry.

The lock is nothing but the presence of a key.  Waiters poll it with a
fixed short sleep and give up after a fixed number of attempts, so a
contended or abandoned lock turns into a logged :class:`ContentionError`
instead of a stall.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from softcache.core.exceptions import ContentionError
from softcache.store.base import KVStore

logger = logging.getLogger("softcache.client.lock")

T = TypeVar("T")


async def spin_until(
    probe: Callable[[], Awaitable[T | None]],
    *,
    key: str,
    attempts: int,
    delay: float,
) -> T:
    """Call ``probe`` until it returns something other than ``None``.

    Sleeps ``delay`` seconds between calls and makes at most ``attempts``
    calls.

    Raises:
        ContentionError: if every attempt came back ``None``.
    """
    for attempt in range(1, attempts + 1):
        result = await probe()
        if result is not None:
            return result
        if attempt < attempts:
            await asyncio.sleep(delay)
    logger.error(
        "Giving up on %s after %d attempts", key, attempts, extra={"cache_key": key}
    )
    raise ContentionError(key, attempts)


class SpinLock:
    """Mutual exclusion flag held in the backing store.

    Args:
        store: The backing store.
        key: Physical lock key.
        ttl: Lease in seconds.  ``0`` keeps the lock until released.
    """

    def __init__(self, store: KVStore, key: str, ttl: int = 0) -> None:
        self._store = store
        self.key = key
        self.ttl = ttl

    async def is_held(self) -> bool:
        return bool(await self._store.get(self.key))

    async def acquire(self) -> bool:
        """Set the flag.  Does not wait for other holders."""
        return await self._store.set(self.key, 1, self.ttl)

    async def release(self) -> bool:
        return await self._store.delete(self.key)

    async def wait_released(self, attempts: int, delay: float) -> None:
        """Block until the flag is clear.

        Raises:
            ContentionError: if the flag is still set after ``attempts`` checks.
        """

        async def _free() -> bool | None:
            return None if await self.is_held() else True

        await spin_until(_free, key=self.key, attempts=attempts, delay=delay)
