"""An order book kept in a fixed ring of price slots."""

from __future__ import annotations

import math
from collections.abc import Iterator

ARRAY_SIZE = 100_000


def _scale(price: float) -> float:
    """Shift the decimal point right until the price is a whole number."""
    price = float(price)
    if price < 0:
        raise ValueError(f"negative price {price}")
    while abs(price - int(price)) > 1e-9:
        price *= 10
    return price


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


class CircularOrderBook:
    """Price levels stored in a ring indexed by distance from the lowest price.

    Prices are scaled to whole numbers by moving the decimal point. Iteration
    starts at the first slot and cycles endlessly over occupied slots.
    """

    def __init__(self) -> None:
        self._slots: list[tuple[float, float]] = [(0.0, 0.0)] * ARRAY_SIZE
        self._occupied = bytearray(ARRAY_SIZE)
        self._min_price = 0
        self._max_price = 0
        self._min_index = 0

    def _track(self, price: float) -> None:
        if price < self._min_price or self._min_price == 0:
            self._min_price = int(price)
        if price > self._max_price:
            self._max_price = int(price)

    def insert(self, price: float, volume: float) -> None:
        """Store a price level and mark its slot occupied."""
        price = _scale(price)
        self._track(price)
        index = _round_half_away(price - self._min_price) % ARRAY_SIZE
        self._slots[index] = (price, volume)
        self._occupied[index] = 1

    def __setitem__(self, price: float, volume: float) -> None:
        """Set the volume of the slot for ``price`` without marking it occupied."""
        price = _scale(price)
        self._track(price)
        index = int(price - self._min_price) % ARRAY_SIZE
        self._slots[index] = (self._slots[index][0], volume)

    def erase(self, price: float) -> None:
        """Mark the slot for ``price`` free."""
        price = _scale(price)
        index = _round_half_away(price - self._min_price) % ARRAY_SIZE
        self._occupied[index] = 0

    def __iter__(self) -> Iterator[tuple[float, float]]:
        index = self._min_index
        if self._occupied[index]:
            yield self._slots[index]
        idle = 0
        while idle <= ARRAY_SIZE:
            index = (index + 1) % ARRAY_SIZE
            if self._occupied[index]:
                idle = 0
                yield self._slots[index]
            else:
                idle += 1