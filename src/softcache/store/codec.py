# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Wire representation of cached values for networked stores.

Values are JSON.  Integers therefore encode as bare decimals, which keeps
them usable by the server-side ``incr`` / ``INCRBY`` commands.  Compressed
values are zlib streams; a zlib header always starts with ``0x78`` (``x``),
a byte no JSON document can start with, so no extra flag is needed to tell
the two apart on read.
"""

from __future__ import annotations

import json
import zlib
from typing import Any

from softcache.core.exceptions import StoreError

_ZLIB_MARK = b"x"


def encode(value: Any, compress: bool = False) -> bytes:
    try:
        raw = json.dumps(value, separators=(",", ":")).encode()
    except (TypeError, ValueError) as exc:
        raise StoreError(f"value is not JSON serialisable: {exc}") from exc
    if compress:
        return zlib.compress(raw)
    return raw


def decode(data: bytes | str | None) -> Any | None:
    if data is None:
        return None
    if isinstance(data, str):
        data = data.encode()
    try:
        if data.startswith(_ZLIB_MARK):
            data = zlib.decompress(data)
        return json.loads(data)
    except (ValueError, zlib.error) as exc:
        raise StoreError(f"stored value is not readable JSON: {exc}") from exc
