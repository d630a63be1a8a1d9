"""CRC-32 checksums as used by PNG chunks."""

from __future__ import annotations

import zlib


def calculate_crc(data: bytes) -> int:
    """Return the CRC-32 of ``data`` as an unsigned 32-bit integer."""
    return zlib.crc32(data) & 0xFFFFFFFF


def check_crc(data: bytes, given_crc: int) -> bool:
    """Tell whether ``data`` has the checksum ``given_crc``."""
    return calculate_crc(data) == given_crc