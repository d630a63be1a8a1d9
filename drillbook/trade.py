"""A single trade record and its 28-byte binary form."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Trade:
    """A trade: price, volume, timestamp and an exchange code.

    On disk a trade takes 28 bytes: three little-endian signed 64-bit integers
    (price, volume, timestamp) followed by a signed 32-bit code.
    """

    SIZE: ClassVar[int] = 28
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<qqqi")

    price: int
    volume: int
    timestamp: int
    code: int

    def pack(self) -> bytes:
        """Encode the trade as its 28-byte record."""
        try:
            return self._FORMAT.pack(self.price, self.volume, self.timestamp, self.code)
        except struct.error as exc:
            raise ValueError(f"trade does not fit its record: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> Trade:
        """Decode a trade from exactly 28 bytes."""
        if len(data) != cls.SIZE:
            raise ValueError(f"trade record must be {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._FORMAT.unpack(data))