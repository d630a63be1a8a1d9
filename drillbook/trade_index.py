"""Range queries over the traded value of a sequence of trades."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable

from drillbook.trade import Trade


class TradeIndex:
    """Answers total traded value (price times volume) over timestamp ranges.

    Running totals are taken in the order the trades are given, so the trades
    are expected to come in timestamp order.
    """

    def __init__(self, trades: Iterable[Trade]) -> None:
        totals = [(0, 0)]
        running = 0
        for trade in trades:
            running += trade.volume * trade.price
            totals.append((trade.timestamp, running))
        totals.sort()
        self._timestamps = [timestamp for timestamp, _ in totals]
        self._totals = [total for _, total in totals]

    def _total_before(self, timestamp: int) -> int:
        position = bisect_left(self._timestamps, timestamp)
        return self._totals[position - 1] if position else 0

    def total_volume(self, start: int, end: int) -> int:
        """Traded value of trades with ``start <= timestamp < end``."""
        return self._total_before(end) - self._total_before(start)