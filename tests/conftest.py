# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from softcache.client.facade import SoftCache
from softcache.core.config import Settings
from softcache.core.constants import StoreBackend
from softcache.store.memory import MemoryStore


class FakeClock:
    """Settable epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(
        backend=StoreBackend.MEMORY,
        key_prefix="test:",
        push_lock_retries=100,
        index_retries=1000,
        spin_delay=0.0,
        trim_settle_delay=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, settings: Settings, clock: FakeClock) -> SoftCache:
    return SoftCache(store=store, settings=settings, clock=clock)


@pytest.fixture(autouse=True)
def _reset_client():
    """Ensure the module-level client singleton is cleared between tests."""
    from softcache.client.facade import reset_client

    reset_client()
    yield
    reset_client()
