# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache facade: prefixed passthrough, soft expiration, and indexed lists."""

from softcache.client.facade import SoftCache, get_client, reset_client

__all__ = ["SoftCache", "get_client", "reset_client"]
