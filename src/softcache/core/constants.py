# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, key layout, and retry defaults."""

from enum import StrEnum


class CompressionFlag(StrEnum):
    NONE = "none"
    ZLIB = "zlib"


class StoreBackend(StrEnum):
    MEMORY = "memory"
    MEMCACHED = "memcached"
    REDIS = "redis"


class ConnectionState(StrEnum):
    UNKNOWN = "unknown"
    CONNECTED = "connected"
    FAILED = "failed"


# Physical key of the stale-deadline map, appended to the key prefix.
CLEAN_QUEUE_KEY = "__CACHE__"

# Indexed list layout: list:<name>:<slot>, list:<name>:idx, list:<name>:lock
LIST_KEY_PREFIX = "list:"
LIST_INDEX_SUFFIX = "idx"
LIST_LOCK_SUFFIX = "lock"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 11211
DEFAULT_TTL = 3600

PUSH_LOCK_RETRIES = 100
INDEX_RETRIES = 1000
SPIN_DELAY = 0.000001
TRIM_SETTLE_DELAY = 0.001
