"""Square matrices of unsigned 32-bit integers stored in flat buffers."""

from __future__ import annotations

import os
from array import array
from collections.abc import MutableSequence
from concurrent.futures import ThreadPoolExecutor
from operator import mul

MASK = 0xFFFFFFFF
MIN_PER_THREAD = 10_000


class Matrix:
    """A view of ``size * size`` unsigned 32-bit values in row-major order.

    ``data`` may be any mutable sequence of integers: a list, an
    ``array('I')`` or a memoryview cast to ``'I'``. Arithmetic wraps
    modulo 2**32.
    """

    def __init__(self, data: MutableSequence[int], size: int) -> None:
        if size < 0:
            raise ValueError(f"matrix size must not be negative, got {size}")
        if len(data) < size * size:
            raise ValueError(
                f"a {size}x{size} matrix needs {size * size} values, got {len(data)}"
            )
        self.data = data
        self.size = size

    def _store(self, values: list[int]) -> None:
        self.data[: len(values)] = array("I", values)

    def _values(self) -> list[int]:
        return list(self.data[: self.size * self.size])

    def set_value(self, i: int, j: int, value: int) -> None:
        """Set the element at row ``i``, column ``j``."""
        if not (0 <= i < self.size and 0 <= j < self.size):
            raise IndexError(f"({i}, {j}) outside {self.size}x{self.size} matrix")
        self.data[i * self.size + j] = value & MASK

    def set_all(self, value: int) -> None:
        """Set every element to ``value``."""
        self._store([value & MASK] * (self.size * self.size))

    @staticmethod
    def _check_sizes(*matrices: Matrix) -> int:
        sizes = {matrix.size for matrix in matrices}
        if len(sizes) != 1:
            raise ValueError(f"matrix sizes differ: {sorted(sizes)}")
        return sizes.pop()

    @staticmethod
    def _transposed(values: list[int], size: int) -> list[int]:
        return [values[(i % size) * size + i // size] for i in range(size * size)]

    @staticmethod
    def multiply(a: Matrix, b: Matrix, res: Matrix) -> None:
        """Store ``a @ b`` in ``res``; ``res`` may be ``a`` or ``b``."""
        size = Matrix._check_sizes(a, b, res)
        a_values = a._values()
        columns = Matrix._transposed(b._values(), size)
        rows = [a_values[r * size : (r + 1) * size] for r in range(size)]
        cols = [columns[c * size : (c + 1) * size] for c in range(size)]
        res._store([sum(map(mul, row, col)) & MASK for row in rows for col in cols])

    @staticmethod
    def transpose(a: Matrix, res: Matrix) -> None:
        """Store the transpose of ``a`` in ``res``."""
        size = Matrix._check_sizes(a, res)
        res._store(Matrix._transposed(a._values(), size))

    @staticmethod
    def parallel_multiply(a: Matrix, b: Matrix, res: Matrix) -> None:
        """Store ``a @ b`` in ``res``, splitting the output over several threads."""
        size = Matrix._check_sizes(a, b, res)
        length = size * size
        if not length:
            return

        max_threads = (length + MIN_PER_THREAD - 1) // MIN_PER_THREAD
        num_threads = min(os.cpu_count() or 2, max_threads)
        block = length // num_threads
        bounds = [(i * block, (i + 1) * block) for i in range(num_threads - 1)]
        bounds.append(((num_threads - 1) * block, length))

        a_values = a._values()
        columns = Matrix._transposed(b._values(), size)

        def compute(bound: tuple[int, int]) -> list[int]:
            start, end = bound
            result = []
            for index in range(start, end):
                row_start = (index // size) * size
                col_start = (index % size) * size
                row = a_values[row_start : row_start + size]
                col = columns[col_start : col_start + size]
                result.append(sum(map(mul, row, col)) & MASK)
            return result

        with ThreadPoolExecutor(max_workers=num_threads) as executor:
            chunks = list(executor.map(compute, bounds))
        res._store([value for chunk in chunks for value in chunk])