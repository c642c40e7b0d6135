from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Union

import torch


@dataclass(frozen=True)
class Point:
    """Immutable 2-D point with exact component-wise equality."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def distance_squared_to(self, other: Point) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Point:
        return cls(x=float(payload["x"]), y=float(payload["y"]))


@dataclass(frozen=True)
class ClosestPairResult:
    """
    Minimum-distance pair found by a solver.

    `distance` is the Euclidean distance between `point1` and `point2` and
    equals the minimum pairwise distance of the whole input.
    """

    point1: Point
    point2: Point
    distance: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "point1": self.point1.to_dict(),
            "point2": self.point2.to_dict(),
            "distance": self.distance,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ClosestPairResult:
        return cls(
            point1=Point.from_dict(payload["point1"]),
            point2=Point.from_dict(payload["point2"]),
            distance=float(payload["distance"]),
        )


PointsLike = Union[torch.Tensor, Sequence[Point], Iterable[Sequence[float]]]


def as_points(points: PointsLike) -> list[Point]:
    """
    Coerce a point collection into a list of `Point`.

    Accepts `Point` instances, `(x, y)` pairs, or a tensor of shape [n, 2].
    Order and duplicates are preserved.
    """
    if isinstance(points, torch.Tensor):
        if points.dim() != 2 or points.shape[1] != 2:
            raise ValueError(f"Point tensor must have shape [n, 2], got {tuple(points.shape)}.")
        coords = points.detach().to(device="cpu", dtype=torch.float64).tolist()
        result = [Point(float(x), float(y)) for x, y in coords]
    else:
        result = []
        for item in points:
            if isinstance(item, Point):
                result.append(item)
                continue
            x, y = item
            result.append(Point(float(x), float(y)))

    for p in result:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise ValueError(f"Point coordinates must be finite, got {p!r}.")
    return result
