# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""softcache - memcached-style cache facade with soft expiration and indexed lists."""

__version__ = "0.1.0"

from softcache.client.facade import SoftCache, get_client, reset_client
from softcache.core.config import Settings, get_settings
from softcache.core.exceptions import ConfigurationError, SoftCacheError

__all__ = [
    "ConfigurationError",
    "Settings",
    "SoftCache",
    "SoftCacheError",
    "__version__",
    "get_client",
    "get_settings",
    "reset_client",
]
