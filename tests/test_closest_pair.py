from __future__ import annotations

import math
import random

import pytest
import torch

from dnc_lab import (
    ClosestPairResult,
    Point,
    closest_pair,
    closest_pair_brute_force,
    closest_pair_divide_conquer,
)
from dnc_lab.bench.datasets import clustered_points, grid_points, random_points


SCENARIO = [(0.0, 0.0), (1.0, 1.0), (5.0, 5.0), (2.0, 2.0)]
SCENARIO_PAIRS = {
    frozenset({Point(0.0, 0.0), Point(1.0, 1.0)}),
    frozenset({Point(1.0, 1.0), Point(2.0, 2.0)}),
}


def _pair(result: ClosestPairResult) -> frozenset:
    return frozenset({result.point1, result.point2})


@pytest.mark.parametrize(
    "solver", [closest_pair, closest_pair_brute_force, closest_pair_divide_conquer]
)
def test_fewer_than_two_points_has_no_pair(solver) -> None:
    assert solver([]) is None
    assert solver([(3.0, 4.0)]) is None
    assert solver(torch.empty((0, 2), dtype=torch.float64)) is None


@pytest.mark.parametrize(
    "solver", [closest_pair, closest_pair_brute_force, closest_pair_divide_conquer]
)
def test_diagonal_scenario(solver) -> None:
    result = solver(SCENARIO)
    assert result is not None
    assert result.distance == pytest.approx(math.sqrt(2.0), abs=1e-12)
    assert _pair(result) in SCENARIO_PAIRS
    assert result.distance == result.point1.distance_to(result.point2)


def test_two_points() -> None:
    result = closest_pair_divide_conquer([(0.0, 0.0), (3.0, 4.0)])
    assert result is not None
    assert result.distance == 5.0


@pytest.mark.parametrize("n", [4, 5, 7, 10, 51, 200, 1000, 2500])
def test_divide_and_conquer_matches_brute_force(n: int) -> None:
    points = random_points(n, seed=n)
    fast = closest_pair_divide_conquer(points)
    slow = closest_pair_brute_force(points)
    assert fast is not None and slow is not None
    assert fast.distance == slow.distance
    assert fast.point1 != fast.point2 or fast.distance == 0.0


@pytest.mark.parametrize("seed", range(5))
def test_dispatch_matches_brute_force_on_clusters(seed: int) -> None:
    points = clustered_points(4, 40, 5.0, seed=seed)
    result = closest_pair(points, threshold=10)
    expected = closest_pair_brute_force(points)
    assert result is not None and expected is not None
    assert result.distance == expected.distance


def test_permutation_invariance() -> None:
    rng = random.Random(7)
    points = [(rng.uniform(-50, 50), rng.uniform(-50, 50)) for _ in range(300)]
    base = closest_pair(points)
    for _ in range(5):
        shuffled = points[:]
        rng.shuffle(shuffled)
        result = closest_pair(shuffled)
        assert result is not None and base is not None
        assert result.distance == base.distance


def test_translation_invariance() -> None:
    rng = random.Random(11)
    points = [(float(rng.randint(-10_000, 10_000)), float(rng.randint(-10_000, 10_000))) for _ in range(400)]
    shifted = [(x + 1234.0, y - 987.0) for x, y in points]
    a = closest_pair(points)
    b = closest_pair(shifted)
    assert a is not None and b is not None
    assert a.distance == b.distance


def test_coincident_points_give_zero() -> None:
    points = [(float(i), float(i * i)) for i in range(100)]
    points.insert(37, (12.0, 144.0))
    result = closest_pair_divide_conquer(points)
    assert result is not None
    assert result.distance == 0.0
    assert result.point1 == result.point2 == Point(12.0, 144.0)


def test_all_points_identical() -> None:
    result = closest_pair([(2.5, -1.0)] * 200)
    assert result is not None
    assert result.distance == 0.0


def test_shared_x_coordinates() -> None:
    # Vertical line: every point shares the same x, exercising the tie-broken split.
    points = [(0.0, float(y) * 3.0) for y in range(100)] + [(0.0, 1.5)]
    result = closest_pair_divide_conquer(points)
    assert result is not None
    assert result.distance == 1.5


def test_grid_ties_on_both_axes() -> None:
    result = closest_pair_divide_conquer(grid_points(20))
    assert result is not None
    assert result.distance == 1.0


def test_cross_strip_pair_is_found() -> None:
    # The closest pair straddles the median split.
    points = [(-10.0, 0.0), (-6.0, 5.0), (-0.1, 2.0), (0.1, 2.05), (6.0, -5.0), (10.0, 0.0)]
    result = closest_pair_divide_conquer(points)
    assert result is not None
    assert _pair(result) == frozenset({Point(-0.1, 2.0), Point(0.1, 2.05)})


def test_accepts_point_instances() -> None:
    points = [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.5, 0.0)]
    result = closest_pair(points)
    assert result is not None
    assert result.distance == 0.5


def test_progress_callback_reports_combines() -> None:
    events = []
    closest_pair_divide_conquer(
        random_points(64, seed=3),
        progress_callback=lambda event, payload: events.append((event, payload)),
    )
    assert events
    assert all(event == "combine" for event, _ in events)
    top = [payload for _, payload in events if payload["depth"] == 0]
    assert len(top) == 1 and top[0]["n"] == 64


def test_rejects_non_finite_coordinates() -> None:
    with pytest.raises(ValueError):
        closest_pair([(0.0, 0.0), (float("nan"), 1.0)])


def test_rejects_bad_tensor_shape() -> None:
    with pytest.raises(ValueError):
        closest_pair(torch.zeros((5, 3)))


def test_rejects_empty_tensor_with_wrong_width() -> None:
    with pytest.raises(ValueError):
        closest_pair(torch.zeros((0, 3)))


def test_rejects_small_base_case() -> None:
    with pytest.raises(ValueError):
        closest_pair_divide_conquer(SCENARIO, base_case_size=2)


def test_result_serialization_is_field_named() -> None:
    result = closest_pair(SCENARIO)
    assert result is not None
    payload = result.to_dict()
    assert set(payload) == {"point1", "point2", "distance"}
    assert set(payload["point1"]) == {"x", "y"}
    assert ClosestPairResult.from_dict(payload) == result
