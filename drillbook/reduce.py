"""Parallel reduction of a sequence, and helpers for exercising it."""

from __future__ import annotations

import functools
import os
import random
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

T = TypeVar("T")

_TEST_SEED = 7347475


def reduce(
    values: Sequence[T],
    initial: T,
    func: Callable[[T, T], T],
    num_threads: int | None = None,
) -> T:
    """Fold ``values`` with ``func`` in contiguous chunks on several threads.

    Each chunk starts from ``initial`` and the chunk results are folded again
    starting from ``initial``, so ``func`` should be associative and
    ``initial`` its identity. Defaults to half the available CPUs.
    """
    items = values if isinstance(values, Sequence) else list(values)
    if not items:
        return initial
    if num_threads is None:
        num_threads = max(1, (os.cpu_count() or 2) // 2)
    if num_threads < 1:
        raise ValueError(f"num_threads must be positive, got {num_threads}")

    size = len(items)
    chunk = -(-size // num_threads)
    bounds = [(start, min(start + chunk, size)) for start in range(0, size, chunk)]

    def fold(bound: tuple[int, int]) -> T:
        start, end = bound
        return functools.reduce(func, items[start:end], initial)

    with ThreadPoolExecutor(max_workers=len(bounds)) as executor:
        partial = list(executor.map(fold, bounds))
    partial.extend([initial] * (num_threads - len(partial)))
    return functools.reduce(func, partial, initial)


def summator(total, value):
    """Return ``total + value``."""
    return total + value


def multiplier(product, value):
    """Return ``product * value``."""
    return product * value


def _mt19937(seed: int) -> random.Random:
    """A generator whose ``getrandbits(32)`` follows the standard MT19937 seeding."""
    state = [seed & 0xFFFFFFFF]
    for index in range(1, 624):
        previous = state[-1]
        state.append((1812433253 * (previous ^ (previous >> 30)) + index) & 0xFFFFFFFF)
    generator = random.Random()
    generator.setstate((3, (*state, 624), None))
    return generator


_GENERATOR = _mt19937(_TEST_SEED)
_GENERATOR_LOCK = threading.Lock()


def gen_test(size: int) -> list[int]:
    """Return ``size`` non-zero 32-bit values from a generator shared by all calls."""
    with _GENERATOR_LOCK:
        values = [_GENERATOR.getrandbits(32) for _ in range(size)]
    return [value or 1 for value in values]