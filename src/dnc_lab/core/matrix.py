from __future__ import annotations

from typing import Any, Callable, Sequence, Union

import torch

from .errors import DimensionMismatchError

MatrixData = Union[torch.Tensor, Sequence[Sequence[float]]]

_DTYPE = torch.float64


def next_power_of_two(n: int) -> int:
    """Least power of two >= n (1 for n <= 1)."""
    return 1 if n <= 1 else 1 << (n - 1).bit_length()


def _as_square_tensor(data: MatrixData) -> torch.Tensor:
    if isinstance(data, torch.Tensor):
        tensor = data.detach().to(device="cpu", dtype=_DTYPE).clone()
    else:
        rows = [list(row) for row in data]
        if not rows:
            return torch.zeros((0, 0), dtype=_DTYPE)
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ValueError(f"Matrix rows must all have the same length, got lengths {sorted(widths)}.")
        tensor = torch.tensor(rows, dtype=_DTYPE)

    if tensor.dim() != 2:
        raise ValueError(f"Matrix data must be 2-D, got {tensor.dim()} dimension(s).")
    if tensor.shape[0] != tensor.shape[1]:
        raise ValueError(
            f"Matrix must be square, got {tensor.shape[0]}x{tensor.shape[1]}."
        )
    return tensor.contiguous()


class Matrix:
    """
    Square matrix of float64 values.

    The backing tensor is owned exclusively by the instance. Every
    transforming operation (pad, unpad, submatrix, add, subtract, multiply)
    returns a new matrix; only :meth:`set` mutates in place.
    """

    __slots__ = ("_data",)

    def __init__(self, data: MatrixData) -> None:
        self._data = _as_square_tensor(data)

    @classmethod
    def _wrap(cls, tensor: torch.Tensor) -> Matrix:
        # Takes ownership of a freshly allocated square tensor without copying.
        instance = cls.__new__(cls)
        instance._data = tensor
        return instance

    # ------------------------------------------------------------------ factories

    @classmethod
    def from_tensor(cls, tensor: torch.Tensor) -> Matrix:
        return cls(tensor)

    @classmethod
    def zeros(cls, size: int) -> Matrix:
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}.")
        return cls._wrap(torch.zeros((size, size), dtype=_DTYPE))

    @classmethod
    def identity(cls, size: int) -> Matrix:
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}.")
        return cls._wrap(torch.eye(size, dtype=_DTYPE))

    @classmethod
    def from_function(cls, size: int, fn: Callable[[int, int], float]) -> Matrix:
        """Build a matrix whose (i, j) entry is ``fn(i, j)``."""
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}.")
        rows = [[float(fn(i, j)) for j in range(size)] for i in range(size)]
        if not rows:
            return cls.zeros(0)
        return cls._wrap(torch.tensor(rows, dtype=_DTYPE))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Matrix:
        matrix = cls(payload["data"])
        if matrix.size != int(payload["size"]):
            raise ValueError(
                f"Matrix payload declares size {payload['size']} but holds {matrix.size} rows."
            )
        return matrix

    # ------------------------------------------------------------------ shape/access

    @property
    def size(self) -> int:
        return int(self._data.shape[0])

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def is_square(self) -> bool:
        return self.rows == self.cols

    def _check_index(self, i: int, j: int) -> None:
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexError(f"Index ({i}, {j}) out of range for {self.rows}x{self.cols} matrix.")

    def get(self, i: int, j: int) -> float:
        self._check_index(i, j)
        return float(self._data[i, j].item())

    def set(self, i: int, j: int, value: float) -> None:
        self._check_index(i, j)
        self._data[i, j] = float(value)

    def __getitem__(self, index: tuple[int, int]) -> float:
        i, j = index
        return self.get(i, j)

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        i, j = index
        self.set(i, j, value)

    def to_tensor(self) -> torch.Tensor:
        """Return a copy of the backing tensor."""
        return self._data.clone()

    def tolist(self) -> list[list[float]]:
        return self._data.tolist()

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size, "data": self.tolist()}

    # ------------------------------------------------------------------ transforms

    def submatrix(self, start_row: int, end_row: int, start_col: int, end_col: int) -> Matrix:
        """
        Copy the half-open block ``[start_row, end_row) x [start_col, end_col)``.
        """
        if not (0 <= start_row <= end_row <= self.rows and 0 <= start_col <= end_col <= self.cols):
            raise IndexError(
                f"Submatrix range [{start_row}:{end_row}, {start_col}:{end_col}] "
                f"out of bounds for {self.rows}x{self.cols} matrix."
            )
        if end_row - start_row != end_col - start_col:
            raise ValueError(
                f"Submatrix must be square, got {end_row - start_row}x{end_col - start_col}."
            )
        return Matrix._wrap(self._data[start_row:end_row, start_col:end_col].clone())

    def _check_same_shape(self, other: Matrix, operation: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(operation, self.shape, other.shape)

    def add(self, other: Matrix) -> Matrix:
        self._check_same_shape(other, "addition")
        return Matrix._wrap(self._data + other._data)

    def subtract(self, other: Matrix) -> Matrix:
        self._check_same_shape(other, "subtraction")
        return Matrix._wrap(self._data - other._data)

    def pad_to_power_of_2(self) -> Matrix:
        """Zero-pad to the least power-of-two size >= the current size."""
        new_size = next_power_of_two(self.size)
        padded = torch.zeros((new_size, new_size), dtype=_DTYPE)
        padded[: self.rows, : self.cols] = self._data
        return Matrix._wrap(padded)

    def unpad(self, original_size: int) -> Matrix:
        if not 0 <= original_size <= self.size:
            raise ValueError(
                f"Cannot unpad a {self.size}x{self.size} matrix to size {original_size}."
            )
        return self.submatrix(0, original_size, 0, original_size)

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        from .multiply import multiply

        return multiply(self, other)

    # ------------------------------------------------------------------ comparison

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(torch.equal(self._data, other._data))

    __hash__ = None  # mutable through set()

    def allclose(self, other: Matrix, *, rtol: float = 1e-9, atol: float = 1e-9) -> bool:
        if self.shape != other.shape:
            return False
        return bool(torch.allclose(self._data, other._data, rtol=rtol, atol=atol))

    def __repr__(self) -> str:
        return f"Matrix(size={self.size})"
