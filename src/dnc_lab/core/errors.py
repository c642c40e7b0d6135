from __future__ import annotations

from typing import Tuple


class DimensionMismatchError(ValueError):
    """
    Raised when two matrices have incompatible shapes for an operation.

    Carries both shapes so callers can decide whether to reshape and retry
    or propagate the failure.
    """

    def __init__(
        self,
        operation: str,
        left_shape: Tuple[int, int],
        right_shape: Tuple[int, int],
    ) -> None:
        self.operation = operation
        self.left_shape = tuple(left_shape)
        self.right_shape = tuple(right_shape)
        super().__init__(
            f"Matrix dimensions incompatible for {operation}: "
            f"{self.left_shape[0]}x{self.left_shape[1]} vs "
            f"{self.right_shape[0]}x{self.right_shape[1]}"
        )
