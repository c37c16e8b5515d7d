"""Zlib compression helpers for message bodies."""

from __future__ import annotations

import zlib

BEST_SPEED = 1
BEST_COMPRESSION = 9


def compress(raw: bytes, level: int) -> bytes:
    """Compress ``raw`` with zlib at ``level`` (1 to 9).

    Raises ValueError for a level outside that range.
    """
    if level < BEST_SPEED or level > BEST_COMPRESSION:
        raise ValueError("unsupported compress level")
    return zlib.compress(bytes(raw), level)


def uncompress(data: bytes) -> bytes:
    """Decompress zlib ``data``; data that is not valid zlib is returned as is."""
    try:
        return zlib.decompress(bytes(data))
    except zlib.error:
        return data