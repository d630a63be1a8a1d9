import random

import pytest

from drillbook.sse_search import sse_search


def collect(found):
    def callback(position):
        found.append(position)
        return True

    return callback


def dummy(position):
    return True


def test_simple():
    found = []
    needle = 0x1A2B3C4DD4C3B2A1
    data = bytes(
        [0x83, 0x73, 0x12, 0xA1, 0xB2, 0xC3, 0xD4, 0x4D,
         0x3C, 0x2B, 0x1A, 0x0, 0x19, 0x17, 0x66, 0xAA]
    )
    assert sse_search(data, needle, collect(found)) == 1
    assert found == [3]


def test_corner_short_data():
    assert sse_search(bytes(3), 0, dummy) == 0


def test_corner_exact_length():
    found = []
    assert sse_search(bytes(8), 0, collect(found)) == 1
    assert found == [0]


def test_corner_all_ones():
    found = []
    data = bytes([0]) + bytes([0xFF] * 8)
    assert sse_search(data, (1 << 64) - 1, collect(found)) == 1
    assert found == [1]


def test_corner2():
    data = bytes(i % 8 for i in range(17))
    found = []
    assert sse_search(data, 0x0007060504030201, collect(found)) == 2
    assert found == [1, 9]


def test_stop():
    count = 0

    def callback(position):
        nonlocal count
        assert position == count
        count += 1
        return count < 2

    assert sse_search(bytes(28), 0, callback) == 2


def test_big():
    rng = random.Random(637573)
    needle = 0x1A2B3C4DD4C3B2A1
    needle_bytes = needle.to_bytes(8, "little")
    data = bytearray()
    expected = []
    for _ in range(10000):
        if rng.random() < 0.3:
            expected.append(len(data))
            data += needle_bytes
        else:
            data.append(rng.randrange(256))
    found = []
    assert sse_search(data, needle, collect(found)) == len(expected)
    assert found == expected


def test_positions_increase_and_match_count():
    data = bytes(40)
    found = []
    count = sse_search(data, 0, collect(found))
    assert count == len(found)
    assert found == sorted(set(found))


@pytest.mark.parametrize("word", [-1, 1 << 64])
def test_word_out_of_range(word):
    with pytest.raises(ValueError):
        sse_search(bytes(16), word, dummy)