from __future__ import annotations

import math
from typing import Tuple

import torch

from ..core.matrix import Matrix


def _generator(seed: int) -> torch.Generator:
    generator = torch.Generator(device="cpu")
    generator.manual_seed(int(seed))
    return generator


def _uniform(shape: Tuple[int, ...], low: float, high: float, generator: torch.Generator) -> torch.Tensor:
    return low + (high - low) * torch.rand(shape, dtype=torch.float64, generator=generator)


def random_points(n: int, *, low: float = -1000.0, high: float = 1000.0, seed: int = 1) -> torch.Tensor:
    """Uniform random points in the square [low, high]^2, shape [n, 2]."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}.")
    return _uniform((n, 2), low, high, _generator(seed))


def circular_points(n: int, radius: float = 50.0) -> torch.Tensor:
    """``n`` points evenly spaced on a circle centred at the origin."""
    angles = 2.0 * math.pi * torch.arange(n, dtype=torch.float64) / max(n, 1)
    return torch.stack((radius * torch.cos(angles), radius * torch.sin(angles)), dim=1)


def grid_points(side: int) -> torch.Tensor:
    """Integer lattice of ``side x side`` points; many ties on both axes."""
    coords = torch.arange(side, dtype=torch.float64)
    xs, ys = torch.meshgrid(coords, coords, indexing="ij")
    return torch.stack((xs.reshape(-1), ys.reshape(-1)), dim=1)


def clustered_points(
    clusters: int,
    per_cluster: int,
    radius: float = 10.0,
    *,
    seed: int = 1,
) -> torch.Tensor:
    """
    Points scattered around random centres in [-500, 500]^2.

    Each point sits at a uniform angle and a uniform distance below
    ``radius`` from its cluster centre.
    """
    generator = _generator(seed)
    centres = _uniform((clusters, 2), -500.0, 500.0, generator)
    angles = _uniform((clusters, per_cluster), 0.0, 2.0 * math.pi, generator)
    dists = _uniform((clusters, per_cluster), 0.0, radius, generator)
    xs = centres[:, 0:1] + dists * torch.cos(angles)
    ys = centres[:, 1:2] + dists * torch.sin(angles)
    return torch.stack((xs.reshape(-1), ys.reshape(-1)), dim=1)


def random_matrices(
    size: int,
    *,
    low: float = -100.0,
    high: float = 100.0,
    seed: int = 1,
) -> Tuple[Matrix, Matrix]:
    """Pair of independent uniform random ``size x size`` matrices."""
    generator = _generator(seed)
    a = _uniform((size, size), low, high, generator)
    b = _uniform((size, size), low, high, generator)
    return Matrix._wrap(a), Matrix._wrap(b)


def diagonal_matrix(size: int, *, seed: int = 1) -> Matrix:
    diag = _uniform((size,), 1.0, 100.0, _generator(seed))
    return Matrix._wrap(torch.diag(diag))


def sparse_matrix(size: int, density: float, *, seed: int = 1) -> Matrix:
    """Dense storage with roughly ``density`` of the entries non-zero."""
    if not 0.0 <= density <= 1.0:
        raise ValueError(f"density must be in [0, 1], got {density}.")
    generator = _generator(seed)
    keep = torch.rand((size, size), dtype=torch.float64, generator=generator) < density
    values = _uniform((size, size), -100.0, 100.0, generator)
    return Matrix._wrap(torch.where(keep, values, torch.zeros_like(values)))
