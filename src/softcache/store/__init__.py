# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Backing key-value stores."""

from softcache.store.base import KVStore
from softcache.store.factory import create_store
from softcache.store.memory import MemoryStore

__all__ = ["KVStore", "MemoryStore", "create_store"]
