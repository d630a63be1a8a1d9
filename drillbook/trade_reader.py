"""Sequential reading of trade records from a binary stream."""

from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO

from drillbook.trade import Trade


class TradeReader:
    """Reads consecutive 28-byte trade records from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read_next(self) -> Trade | None:
        """Return the next trade, or ``None`` when no whole record is left."""
        data = self._stream.read(Trade.SIZE)
        if len(data) != Trade.SIZE:
            return None
        return Trade.unpack(data)

    def read_all(self) -> list[Trade]:
        """Read every remaining whole record."""
        return list(self)

    def __iter__(self) -> Iterator[Trade]:
        while (trade := self.read_next()) is not None:
            yield trade