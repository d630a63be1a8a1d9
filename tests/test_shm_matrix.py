import random
import struct
import threading
import time
import uuid
from multiprocessing import shared_memory

import pytest

from drillbook.shm_matrix import (
    HEADER_SIZE,
    SHM_SIZE,
    Status,
    main,
    matrix_exponentiation,
    multiply_matrices,
    serve,
)


def _identity(size):
    return [1 if i == j else 0 for i in range(size) for j in range(size)]


def _random_values(size, seed):
    rng = random.Random(seed)
    return [rng.getrandbits(32) for _ in range(size * size)]


def test_status_values_follow_protocol():
    decoded = [Status(value) for value in (-1, 0, 1, 2)]
    assert decoded == [Status.STOP, Status.REQUESTED, Status.WORKING, Status.DONE]


def test_multiply_matrices_by_identity():
    values = _random_values(4, 1)
    assert multiply_matrices(values, _identity(4), 4) == values


def test_power_zero_gives_identity():
    values = _random_values(3, 2)
    buffer = values + [9] * 9
    result = matrix_exponentiation(buffer, 3, 0)
    assert result == _identity(3)
    assert buffer[9:] == _identity(3)
    assert buffer[:9] == values


def test_power_one_gives_matrix():
    values = _random_values(3, 3)
    buffer = values + [0] * 9
    matrix_exponentiation(buffer, 3, 1)
    assert buffer[9:] == values


def test_power_matches_repeated_multiplication():
    values = _random_values(4, 4)
    expected = _identity(4)
    for _ in range(5):
        expected = multiply_matrices(expected, values, 4)
    buffer = values + [0] * 16
    assert matrix_exponentiation(buffer, 4, 5) == expected
    assert buffer[16:] == expected


def test_short_buffer_raises():
    with pytest.raises(ValueError):
        matrix_exponentiation([1, 2, 3, 4], 2, 2)


def test_main_without_name_fails():
    assert main([]) == 1


def test_serve_answers_requests_and_stops():
    name = f"drillbook_{uuid.uuid4().hex[:12]}"
    segment = shared_memory.SharedMemory(name=name, create=True, size=SHM_SIZE)
    buf = segment.buf
    try:
        struct.pack_into("@i", buf, 0, Status.DONE)
        worker = threading.Thread(target=serve, args=(name,), daemon=True)
        worker.start()

        size, power = 3, 4
        values = _random_values(size, 5)
        struct.pack_into("@ii", buf, 4, power, size)
        struct.pack_into(f"@{size * size}I", buf, HEADER_SIZE, *values)
        struct.pack_into("@i", buf, 0, Status.REQUESTED)

        deadline = time.monotonic() + 10
        while struct.unpack_from("@i", buf, 0)[0] != Status.DONE:
            assert time.monotonic() < deadline
            time.sleep(0.005)

        expected = _identity(size)
        for _ in range(power):
            expected = multiply_matrices(expected, values, size)
        result = struct.unpack_from(f"@{size * size}I", buf, HEADER_SIZE + 4 * size * size)
        assert list(result) == expected

        struct.pack_into("@i", buf, 0, Status.STOP)
        worker.join(timeout=10)
        assert not worker.is_alive()
    finally:
        del buf
        segment.close()
        segment.unlink()