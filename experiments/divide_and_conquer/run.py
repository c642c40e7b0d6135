#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import math
from pathlib import Path

# Allow running without an install when invoked from repo root
import sys

REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from dnc_lab.bench import BenchmarkRunner  # noqa: E402
from dnc_lab.bench.datasets import random_matrices, random_points  # noqa: E402


def run_geometry(runner: BenchmarkRunner, points: int, runs: int, seed: int) -> None:
    print(f"Number of points: {points}")
    data = random_points(points, seed=seed)
    runner.benchmark_closest_pair("closest_pair_divide_conquer", data, runs=runs)
    # The quadratic scan is only practical on small inputs.
    if points <= 5000:
        runner.benchmark_closest_pair("closest_pair_brute_force", data, runs=runs)


def run_matrix(
    runner: BenchmarkRunner,
    size: int,
    runs: int,
    seed: int,
    strassen: bool,
    threshold: int,
    workers: int | None,
) -> None:
    print(f"Matrix size: {size}x{size}")
    a, b = random_matrices(size, seed=seed)
    if strassen:
        print(f"Using Strassen algorithm (threshold={threshold})")
        runner.benchmark_multiply(
            "matmul_strassen", a, b, runs=runs, threshold=threshold, max_workers=workers
        )
    else:
        runner.benchmark_multiply("matmul_standard", a, b, runs=runs)


def run_all(runner: BenchmarkRunner, small: bool, runs: int, seed: int, threshold: int) -> None:
    sizes = [100, 500, 1000, 5000] if small else [1000, 5000, 10000, 50000, 100000]
    for size in sizes:
        print(f"\n--- Data size: {size} ---")
        matrix_size = int(math.sqrt(size))
        if matrix_size >= 4:
            run_matrix(runner, matrix_size, runs, seed, False, threshold, None)
            run_matrix(runner, matrix_size, runs, seed, True, threshold, None)
        run_geometry(runner, size, runs, seed)


def main():
    p = argparse.ArgumentParser(description="Benchmark divide-and-conquer algorithms using dnc_lab")
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--out", type=str, default=None, help="Optional JSON output path")
    p.add_argument("--csv", type=str, default=None, help="Optional CSV output path")
    sub = p.add_subparsers(dest="command", required=True)

    geo = sub.add_parser("geometry", help="Closest pair of points")
    geo.add_argument("--points", type=int, default=10000)

    mat = sub.add_parser("matrix", help="Square matrix multiplication")
    mat.add_argument("--size", type=int, default=512)
    mat.add_argument("--strassen", action="store_true")
    mat.add_argument("--threshold", type=int, default=64)
    mat.add_argument("--workers", type=int, default=None, help="Threads for the top-level products")

    everything = sub.add_parser("all", help="Sweep every algorithm over a range of sizes")
    everything.add_argument("--small", action="store_true")
    everything.add_argument("--threshold", type=int, default=64)

    args = p.parse_args()

    print("Divide-and-Conquer Benchmark")
    print(f"Parameters: command={args.command}, runs={args.runs}, seed={args.seed}")
    print("=" * 60)

    runner = BenchmarkRunner(verbose=True)
    if args.command == "geometry":
        run_geometry(runner, args.points, args.runs, args.seed)
    elif args.command == "matrix":
        run_matrix(runner, args.size, args.runs, args.seed, args.strassen, args.threshold, args.workers)
    else:
        run_all(runner, args.small, args.runs, args.seed, args.threshold)

    print()
    for line in runner.summary():
        print(line)

    if args.out:
        out_path = runner.save_json(args.out)
        print(f"Saved results to {out_path}")
    if args.csv:
        csv_path = runner.save_csv(args.csv)
        print(f"Saved CSV summary to {csv_path}")
    if not args.out and not args.csv:
        print("RESULTS:")
        print(json.dumps([r.to_dict() for r in runner.results], indent=2))


if __name__ == "__main__":
    main()
