from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from .point import ClosestPairResult, Point, PointsLike, as_points

DEFAULT_BRUTE_FORCE_THRESHOLD = 50
DEFAULT_BASE_CASE_SIZE = 3

ProgressCallback = Callable[[str, dict[str, Any]], None]

# (distance, arena index of first point, arena index of second point)
_Best = Tuple[float, int, int]


def _brute_force_indices(points: list[Point], indices: list[int]) -> Optional[_Best]:
    best: Optional[_Best] = None
    for a in range(len(indices)):
        pa = points[indices[a]]
        for b in range(a + 1, len(indices)):
            d = pa.distance_to(points[indices[b]])
            if best is None or d < best[0]:
                best = (d, indices[a], indices[b])
    return best


def _to_result(points: list[Point], best: Optional[_Best]) -> Optional[ClosestPairResult]:
    if best is None:
        return None
    d, i, j = best
    return ClosestPairResult(point1=points[i], point2=points[j], distance=d)


def closest_pair_brute_force(points: PointsLike) -> Optional[ClosestPairResult]:
    """
    Examine every pair and return the closest one.

    O(n^2) time, O(1) extra space. Returns ``None`` for fewer than two points.
    """
    arena = as_points(points)
    return _to_result(arena, _brute_force_indices(arena, list(range(len(arena)))))


def _merge_strip(
    points: list[Point],
    order_y: list[int],
    x_mid: float,
    best: _Best,
) -> Tuple[_Best, int]:
    """
    Check pairs that straddle the dividing line at ``x_mid``.

    ``order_y`` holds the indices of the current sub-problem sorted by y.
    Only points within ``best`` distance of the line can improve on it, and
    for each of them only the following strip points whose y-gap is below
    the current minimum need to be compared (at most 7 by packing).
    """
    delta = best[0]
    strip = [i for i in order_y if abs(points[i].x - x_mid) <= delta]

    for a in range(len(strip)):
        pa = points[strip[a]]
        b = a + 1
        while b < len(strip) and points[strip[b]].y - pa.y < best[0]:
            d = pa.distance_to(points[strip[b]])
            if d < best[0]:
                best = (d, strip[a], strip[b])
            b += 1

    return best, len(strip)


def closest_pair_divide_conquer(
    points: PointsLike,
    *,
    base_case_size: int = DEFAULT_BASE_CASE_SIZE,
    progress_callback: ProgressCallback | None = None,
) -> Optional[ClosestPairResult]:
    """
    O(n log n) closest pair by recursive halving on x and a strip combine.

    Points live in a single arena; the recursion threads two index views over
    it: a slice of the x-sorted order and the y-sorted indices of the same
    subset. Both orders are computed once, with ties broken by the other
    coordinate and then by input position.
    """
    if base_case_size < 3:
        raise ValueError(f"base_case_size must be at least 3, got {base_case_size}.")

    arena = as_points(points)
    n = len(arena)
    if n < 2:
        return None

    order_x = sorted(range(n), key=lambda i: (arena[i].x, arena[i].y, i))
    order_y = sorted(range(n), key=lambda i: (arena[i].y, arena[i].x, i))
    rank_x = [0] * n
    for rank, idx in enumerate(order_x):
        rank_x[idx] = rank

    def solve(lo: int, hi: int, by_y: list[int], depth: int) -> _Best:
        size = hi - lo
        if size <= base_case_size:
            best = _brute_force_indices(arena, order_x[lo:hi])
            assert best is not None
            return best

        split = lo + (size + 1) // 2
        left_y = [i for i in by_y if rank_x[i] < split]
        right_y = [i for i in by_y if rank_x[i] >= split]

        left = solve(lo, split, left_y, depth + 1)
        right = solve(split, hi, right_y, depth + 1)
        best = left if left[0] <= right[0] else right

        if best[0] == 0.0:
            return best

        x_mid = arena[order_x[split]].x
        best, strip_size = _merge_strip(arena, by_y, x_mid, best)

        if progress_callback is not None:
            progress_callback(
                "combine",
                {"depth": depth, "n": size, "strip_size": strip_size, "delta": best[0]},
            )
        return best

    return _to_result(arena, solve(0, n, order_y, 0))


def closest_pair(
    points: PointsLike,
    *,
    threshold: int = DEFAULT_BRUTE_FORCE_THRESHOLD,
    base_case_size: int = DEFAULT_BASE_CASE_SIZE,
    progress_callback: ProgressCallback | None = None,
) -> Optional[ClosestPairResult]:
    """
    Return the minimum-distance pair of ``points``, or ``None`` if there are
    fewer than two.

    Inputs of at most ``threshold`` points use the brute-force scan; larger
    inputs use divide and conquer. Both paths return the same distance.
    """
    arena = as_points(points)
    if len(arena) <= threshold:
        return closest_pair_brute_force(arena)
    return closest_pair_divide_conquer(
        arena,
        base_case_size=base_case_size,
        progress_callback=progress_callback,
    )
