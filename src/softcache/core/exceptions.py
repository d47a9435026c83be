# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for softcache."""


class SoftCacheError(Exception):
    """Base exception for all softcache errors."""


class ConfigurationError(SoftCacheError):
    """Invalid configuration or argument, such as a non-numeric ttl."""


class StoreError(SoftCacheError):
    """The backing key-value store rejected or failed an operation."""


class ContentionError(SoftCacheError):
    """A cache-resident lock or counter stayed contended past its retry ceiling."""

    def __init__(self, key: str, attempts: int) -> None:
        super().__init__(f"{key} still contended after {attempts} attempts")
        self.key = key
        self.attempts = attempts
