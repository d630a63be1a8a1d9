"""An immutable map backed by a sorted list and binary search."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class StaticMap(Generic[K, V]):
    """A read-only mapping built once from key/value pairs.

    Keys need only support ``<``. Lookups are binary searches.
    """

    def __init__(self, items: Iterable[tuple[K, V]]) -> None:
        pairs = sorted(items, key=lambda pair: pair[0])
        self._keys = [key for key, _ in pairs]
        self._values = [value for _, value in pairs]

    def find(self, key: K) -> V | None:
        """Return the value stored for ``key``, or ``None`` if it is absent."""
        position = bisect_left(self._keys, key)
        if position == len(self._keys) or key < self._keys[position]:
            return None
        return self._values[position]

    def __len__(self) -> int:
        return len(self._keys)