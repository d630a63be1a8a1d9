"""A matrix-power server working on a shared-memory segment.

The segment starts with a header of three native ints: status, the power and
the matrix size. The input matrix follows at byte 12 as unsigned 32-bit
values, and the result is written right after it.
"""

from __future__ import annotations

import struct
import sys
import time
from array import array
from collections.abc import MutableSequence, Sequence
from enum import IntEnum
from multiprocessing import shared_memory

from drillbook.matrix import Matrix

SHM_SIZE = 64 * 1024 * 1024
HEADER = struct.Struct("@iii")
HEADER_SIZE = HEADER.size
POLL_INTERVAL = 0.001
_STATUS = struct.Struct("@i")


class Status(IntEnum):
    """Values of the header's status field."""

    STOP = -1
    REQUESTED = 0
    WORKING = 1
    DONE = 2


def multiply_matrices(a: Sequence[int], b: Sequence[int], size: int) -> list[int]:
    """Return the product of two ``size x size`` matrices."""
    result = [0] * (size * size)
    Matrix.parallel_multiply(Matrix(list(a), size), Matrix(list(b), size), Matrix(result, size))
    return result


def matrix_exponentiation(matrix: MutableSequence[int], size: int, power: int) -> list[int]:
    """Raise the matrix in the first ``size * size`` values to ``power``.

    The result is written into the next ``size * size`` values of ``matrix``
    and also returned.
    """
    if size < 0:
        raise ValueError(f"matrix size must not be negative, got {size}")
    count = size * size
    if len(matrix) < 2 * count:
        raise ValueError(f"buffer holds {len(matrix)} values, need {2 * count}")

    result = [1 if i == j else 0 for i in range(size) for j in range(size)]
    base = list(matrix[:count])
    while power > 0:
        if power % 2 == 1:
            result = multiply_matrices(result, base, size)
        base = multiply_matrices(base, base, size)
        power //= 2

    matrix[count : 2 * count] = array("I", result)
    return result


def _open_segment(name: str) -> shared_memory.SharedMemory:
    name = name.lstrip("/")
    try:
        segment = shared_memory.SharedMemory(name=name, create=False)
    except FileNotFoundError:
        segment = shared_memory.SharedMemory(name=name, create=True, size=SHM_SIZE)
    if segment.size < HEADER_SIZE:
        segment.close()
        raise ValueError(f"shared memory segment {name!r} is too small")
    return segment


def _handle_request(buf: memoryview) -> None:
    _, power, size = HEADER.unpack_from(buf, 0)
    end = HEADER_SIZE + 4 * 2 * size * size
    if size < 0 or end > len(buf):
        raise ValueError(f"matrix size {size} does not fit the segment")
    with buf[HEADER_SIZE:end] as region, region.cast("I") as values:
        matrix_exponentiation(values, size, power)


def serve(name: str) -> None:
    """Answer requests on the shared segment ``name`` until told to stop."""
    segment = _open_segment(name)
    try:
        buf = segment.buf
        while True:
            (status,) = _STATUS.unpack_from(buf, 0)
            if status == Status.STOP:
                return
            if status == Status.REQUESTED:
                _STATUS.pack_into(buf, 0, Status.WORKING)
                _handle_request(buf)
                _STATUS.pack_into(buf, 0, Status.DONE)
            else:
                time.sleep(POLL_INTERVAL)
    finally:
        segment.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return 1
    try:
        serve(args[0])
    except (OSError, ValueError):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())