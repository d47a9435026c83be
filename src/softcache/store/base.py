# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract key-value store interface with memcached semantics."""

from __future__ import annotations

import abc
from typing import Any


class KVStore(abc.ABC):
    """Abstract base class for the backing key-value store.

    Keys are physical keys (any prefix is already applied).  A ``ttl`` of
    ``0`` means the entry never expires.
    """

    @abc.abstractmethod
    async def connect(self) -> bool:
        """Open the connection to the server.

        Returns:
            ``True`` if the server is reachable.
        """

    @abc.abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve a value, or ``None`` if the key is missing or expired."""

    @abc.abstractmethod
    async def set(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        """Store a value unconditionally.

        Args:
            key: Physical key.
            value: Value to store.
            ttl: Time-to-live in seconds.  ``0`` means no expiry.
            compress: Compress the stored representation.
        """

    @abc.abstractmethod
    async def add(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        """Store a value only if the key does not exist yet.

        Returns:
            ``False`` if the key was already present.
        """

    @abc.abstractmethod
    async def replace(self, key: str, value: Any, ttl: int = 0, compress: bool = False) -> bool:
        """Store a value only if the key already exists.

        Returns:
            ``False`` if the key was absent.
        """

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            ``True`` if the key existed and was deleted.
        """

    @abc.abstractmethod
    async def increment(self, key: str, by: int = 1) -> int | None:
        """Atomically add ``by`` to an integer value.

        Returns:
            The new value, or ``None`` if the key is missing or not numeric.
            A missing key is never created by this call.
        """

    @abc.abstractmethod
    async def flush(self) -> None:
        """Invalidate every entry on the server."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release any resources held by the client."""
