from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

import torch

from .errors import DimensionMismatchError
from .matrix import Matrix, next_power_of_two

DEFAULT_STRASSEN_THRESHOLD = 64

ProgressCallback = Callable[[str, dict[str, Any]], None]


def _standard_product(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Textbook O(n^3) product, accumulated one rank-1 update per inner index.

    Works for rectangular operands with ``a.shape[1] == b.shape[0]``.
    """
    if a.shape[1] != b.shape[0]:
        raise DimensionMismatchError(
            "multiplication",
            (int(a.shape[0]), int(a.shape[1])),
            (int(b.shape[0]), int(b.shape[1])),
        )
    out = torch.zeros((a.shape[0], b.shape[1]), dtype=a.dtype)
    for k in range(a.shape[1]):
        out.add_(torch.outer(a[:, k], b[k, :]))
    return out


def _check_operands(a: Matrix, b: Matrix) -> None:
    if a.size != b.size:
        raise DimensionMismatchError("multiplication", a.shape, b.shape)


def standard_multiply(a: Matrix, b: Matrix) -> Matrix:
    """O(n^3) reference multiplication of two equal-size square matrices."""
    _check_operands(a, b)
    return Matrix._wrap(_standard_product(a._data, b._data))


def _strassen(
    a: torch.Tensor,
    b: torch.Tensor,
    threshold: int,
    depth: int,
    progress_callback: ProgressCallback | None,
    executor: Optional[ThreadPoolExecutor] = None,
) -> torch.Tensor:
    n = int(a.shape[0])
    if n <= threshold:
        if progress_callback is not None:
            progress_callback("base", {"depth": depth, "size": n})
        return _standard_product(a, b)

    if progress_callback is not None:
        progress_callback("split", {"depth": depth, "size": n})

    h = n // 2
    # Quadrants are views into the operand buffers; only the sums below allocate.
    a11, a12, a21, a22 = a[:h, :h], a[:h, h:], a[h:, :h], a[h:, h:]
    b11, b12, b21, b22 = b[:h, :h], b[:h, h:], b[h:, :h], b[h:, h:]

    operands = (
        (a11 + a22, b11 + b22),
        (a21 + a22, b11),
        (a11, b12 - b22),
        (a22, b21 - b11),
        (a11 + a12, b22),
        (a21 - a11, b11 + b12),
        (a12 - a22, b21 + b22),
    )

    if executor is not None:
        futures = [
            executor.submit(_strassen, left, right, threshold, depth + 1, progress_callback)
            for left, right in operands
        ]
        m1, m2, m3, m4, m5, m6, m7 = (f.result() for f in futures)
    else:
        m1, m2, m3, m4, m5, m6, m7 = (
            _strassen(left, right, threshold, depth + 1, progress_callback)
            for left, right in operands
        )

    out = torch.empty((n, n), dtype=a.dtype)
    out[:h, :h] = m1 + m4 - m5 + m7
    out[:h, h:] = m3 + m5
    out[h:, :h] = m2 + m4
    out[h:, h:] = m1 - m2 + m3 + m6
    return out


def strassen_multiply(
    a: Matrix,
    b: Matrix,
    *,
    threshold: int = DEFAULT_STRASSEN_THRESHOLD,
    max_workers: int | None = None,
    progress_callback: ProgressCallback | None = None,
) -> Matrix:
    """
    Multiply two equal-size square matrices with the 7-product block formula.

    Matrices of size <= ``threshold`` use the standard product directly.
    Larger operands are zero-padded to the next power of two, recursively
    split into quadrants until the threshold, and the result is cropped back
    to the original size.

    The block formula performs more additions than the standard product, so
    its floating-point rounding error is somewhat larger. Results agree with
    :func:`standard_multiply` to a small relative tolerance, not bit for bit.

    With ``max_workers > 1`` the seven top-level products run concurrently on
    a thread pool; they read disjoint views and are joined before the combine.
    """
    _check_operands(a, b)
    if threshold < 1:
        raise ValueError(f"threshold must be at least 1, got {threshold}.")

    size = a.size
    if size <= threshold:
        if progress_callback is not None:
            progress_callback("base", {"depth": 0, "size": size})
        return standard_multiply(a, b)

    padded_size = next_power_of_two(size)
    if padded_size != size:
        if progress_callback is not None:
            progress_callback("pad", {"size": size, "padded_size": padded_size})
        a = a.pad_to_power_of_2()
        b = b.pad_to_power_of_2()

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            product = _strassen(a._data, b._data, threshold, 0, progress_callback, executor)
    else:
        product = _strassen(a._data, b._data, threshold, 0, progress_callback)

    result = Matrix._wrap(product)
    if padded_size != size:
        result = result.unpad(size)
    return result


def multiply(
    a: Matrix,
    b: Matrix,
    *,
    threshold: int = DEFAULT_STRASSEN_THRESHOLD,
    max_workers: int | None = None,
    progress_callback: ProgressCallback | None = None,
) -> Matrix:
    """
    Product of two equal-size square matrices.

    Raises :class:`DimensionMismatchError` when the sizes differ.
    """
    return strassen_multiply(
        a,
        b,
        threshold=threshold,
        max_workers=max_workers,
        progress_callback=progress_callback,
    )
