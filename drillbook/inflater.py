"""Decompression of zlib streams with a bounded output size."""

from __future__ import annotations

import zlib

EXPANSION_LIMIT = 100


class InflateError(ValueError):
    """Raised when a zlib stream cannot be decompressed."""


def inflate(data: bytes) -> bytes:
    """Decompress a complete zlib stream.

    The output may be at most ``EXPANSION_LIMIT`` times the size of the input;
    larger, truncated or corrupt streams raise :class:`InflateError`.
    """
    data = bytes(data)
    if not data:
        raise InflateError("An error occurred during inflation: no input")
    decompressor = zlib.decompressobj()
    try:
        result = decompressor.decompress(data, len(data) * EXPANSION_LIMIT)
    except zlib.error as exc:
        raise InflateError(f"An error occurred during inflation: {exc}") from exc
    if not decompressor.eof:
        raise InflateError(
            "An error occurred during inflation: stream truncated or output too large"
        )
    return result