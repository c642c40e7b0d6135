from __future__ import annotations

import pytest
import torch

from dnc_lab import DimensionMismatchError, Matrix
from dnc_lab.core.matrix import next_power_of_two


def test_factories() -> None:
    assert Matrix.zeros(3).tolist() == [[0.0] * 3 for _ in range(3)]
    eye = Matrix.identity(3)
    assert [eye.get(i, i) for i in range(3)] == [1.0, 1.0, 1.0]
    assert eye.get(0, 1) == 0.0
    m = Matrix.from_function(4, lambda i, j: i + j)
    assert m.size == m.rows == m.cols == 4
    assert m[2, 3] == 5.0
    assert Matrix.from_function(0, lambda i, j: 1.0).size == 0


def test_constructor_copies_input_tensor() -> None:
    t = torch.ones((2, 2), dtype=torch.float64)
    m = Matrix(t)
    t[0, 0] = 9.0
    assert m.get(0, 0) == 1.0


def test_non_square_input_is_rejected() -> None:
    with pytest.raises(ValueError):
        Matrix([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    with pytest.raises(ValueError):
        Matrix(torch.zeros((2, 3)))
    with pytest.raises(ValueError):
        Matrix([[1.0, 2.0], [3.0]])
    with pytest.raises(ValueError):
        Matrix(torch.zeros(4))


def test_get_set_bounds() -> None:
    m = Matrix.zeros(2)
    m.set(1, 0, 2.5)
    m[0, 1] = -1.0
    assert m.tolist() == [[0.0, -1.0], [2.5, 0.0]]
    with pytest.raises(IndexError):
        m.get(2, 0)
    with pytest.raises(IndexError):
        m.set(-1, 0, 1.0)


def test_add_and_subtract_return_new_matrices() -> None:
    a = Matrix([[1.0, 2.0], [3.0, 4.0]])
    b = Matrix([[10.0, 20.0], [30.0, 40.0]])
    total = a + b
    diff = b.subtract(a)
    assert total.tolist() == [[11.0, 22.0], [33.0, 44.0]]
    assert diff.tolist() == [[9.0, 18.0], [27.0, 36.0]]
    assert a.tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_elementwise_mismatch_carries_shapes() -> None:
    with pytest.raises(DimensionMismatchError) as info:
        Matrix.zeros(2).add(Matrix.zeros(3))
    assert info.value.left_shape == (2, 2)
    assert info.value.right_shape == (3, 3)
    assert info.value.operation == "addition"
    with pytest.raises(DimensionMismatchError):
        Matrix.zeros(2) - Matrix.zeros(1)


def test_submatrix_is_an_owned_copy() -> None:
    m = Matrix.from_function(4, lambda i, j: 4 * i + j)
    block = m.submatrix(1, 3, 2, 4)
    assert block.tolist() == [[6.0, 7.0], [10.0, 11.0]]
    m.set(1, 2, 100.0)
    assert block.get(0, 0) == 6.0


def test_submatrix_preconditions() -> None:
    m = Matrix.zeros(4)
    with pytest.raises(IndexError):
        m.submatrix(0, 5, 0, 5)
    with pytest.raises(IndexError):
        m.submatrix(3, 2, 0, 1)
    with pytest.raises(ValueError):
        m.submatrix(0, 2, 0, 3)


@pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (2, 2), (3, 4), (5, 8), (64, 64), (65, 128)])
def test_next_power_of_two(n: int, expected: int) -> None:
    assert next_power_of_two(n) == expected


def test_pad_and_unpad() -> None:
    m = Matrix.from_function(5, lambda i, j: i * 5 + j + 1)
    padded = m.pad_to_power_of_2()
    assert padded.size == 8
    t = padded.to_tensor()
    assert torch.equal(t[:5, :5], m.to_tensor())
    assert torch.count_nonzero(t[5:, :]) == 0
    assert torch.count_nonzero(t[:, 5:]) == 0
    assert padded.unpad(5) == m
    with pytest.raises(ValueError):
        m.unpad(6)


def test_pad_power_of_two_is_a_copy() -> None:
    m = Matrix.identity(4)
    padded = m.pad_to_power_of_2()
    assert padded == m
    padded.set(0, 0, 7.0)
    assert m.get(0, 0) == 1.0


def test_equality_and_allclose() -> None:
    a = Matrix([[1.0, 2.0], [3.0, 4.0]])
    b = Matrix([[1.0, 2.0], [3.0, 4.0 + 1e-12]])
    assert a != b
    assert a.allclose(b)
    assert not a.allclose(Matrix.zeros(3))


def test_dict_round_trip() -> None:
    m = Matrix.from_function(3, lambda i, j: i - j)
    payload = m.to_dict()
    assert payload["size"] == 3
    assert Matrix.from_dict(payload) == m
    with pytest.raises(ValueError):
        Matrix.from_dict({"size": 2, "data": payload["data"]})
