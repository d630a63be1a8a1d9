import random
from array import array

import pytest

from drillbook.matrix import Matrix


def _identity(size):
    return [1 if i == j else 0 for i in range(size) for j in range(size)]


def _random_values(size, seed):
    rng = random.Random(seed)
    return [rng.getrandbits(32) for _ in range(size * size)]


def test_multiply_small_example():
    res = [0] * 4
    Matrix.multiply(Matrix([1, 2, 3, 4], 2), Matrix([1, 2, 3, 4], 2), Matrix(res, 2))
    assert res == [7, 10, 15, 22]


def test_multiply_by_identity_keeps_matrix():
    values = _random_values(5, 1)
    res = [0] * 25
    Matrix.multiply(Matrix(values, 5), Matrix(_identity(5), 5), Matrix(res, 5))
    assert res == values
    Matrix.multiply(Matrix(_identity(5), 5), Matrix(values, 5), Matrix(res, 5))
    assert res == values


def test_multiply_wraps_modulo_32_bits():
    res = [7]
    Matrix.multiply(Matrix([1 << 31], 1), Matrix([2], 1), Matrix(res, 1))
    assert res == [0]


def test_multiply_in_place_matches_copy():
    values = _random_values(4, 2)
    expected = [0] * 16
    Matrix.multiply(Matrix(list(values), 4), Matrix(list(values), 4), Matrix(expected, 4))
    shared = Matrix(list(values), 4)
    Matrix.multiply(shared, shared, shared)
    assert list(shared.data) == expected


@pytest.mark.parametrize("size", [1, 3, 17, 120])
def test_parallel_multiply_matches_multiply(size):
    a = _random_values(size, size)
    b = _random_values(size, size + 100)
    expected = [0] * (size * size)
    actual = [0] * (size * size)
    Matrix.multiply(Matrix(a, size), Matrix(b, size), Matrix(expected, size))
    Matrix.parallel_multiply(Matrix(a, size), Matrix(b, size), Matrix(actual, size))
    assert actual == expected


def test_parallel_multiply_empty_matrix_is_noop():
    res = [5]
    Matrix.parallel_multiply(Matrix([], 0), Matrix([], 0), Matrix(res, 0))
    assert res == [5]


def test_transpose_swaps_rows_and_columns():
    res = [0] * 4
    Matrix.transpose(Matrix([1, 2, 3, 4], 2), Matrix(res, 2))
    assert res == [1, 3, 2, 4]


def test_transpose_twice_restores():
    values = _random_values(6, 3)
    once = [0] * 36
    twice = [0] * 36
    Matrix.transpose(Matrix(values, 6), Matrix(once, 6))
    Matrix.transpose(Matrix(once, 6), Matrix(twice, 6))
    assert twice == values
    assert once != values


def test_set_value_and_set_all():
    data = array("I", [0] * 9)
    matrix = Matrix(data, 3)
    matrix.set_all(4)
    assert list(data) == [4] * 9
    matrix.set_value(1, 2, -1)
    assert data[5] == 0xFFFFFFFF
    with pytest.raises(IndexError):
        matrix.set_value(3, 0, 1)


def test_works_on_memoryview_buffer():
    raw = bytearray(4 * 8)
    view = memoryview(raw).cast("I")
    view[:4] = array("I", [1, 2, 3, 4])
    Matrix.multiply(Matrix(view[:4], 2), Matrix(_identity(2), 2), Matrix(view[4:], 2))
    assert list(view[4:]) == [1, 2, 3, 4]
    view.release()


def test_invalid_shapes_raise():
    with pytest.raises(ValueError):
        Matrix([1, 2, 3], 2)
    with pytest.raises(ValueError):
        Matrix([], -1)
    with pytest.raises(ValueError):
        Matrix.multiply(Matrix([1], 1), Matrix([1, 2, 3, 4], 2), Matrix([0], 1))