#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
from collections import defaultdict

import matplotlib.pyplot as plt


def load_series(path: str) -> dict[str, list[tuple[int, float]]]:
    with open(path, "r") as f:
        data = json.load(f)

    # Average runtimes for each (algorithm, n) pair
    aggregated = defaultdict(list)
    for res in data["results"]:
        aggregated[(res["algorithm"], res["data_size"])].append(res["mean_time_s"])

    series = defaultdict(list)
    for (algorithm, n), runtimes in aggregated.items():
        series[algorithm].append((n, sum(runtimes) / len(runtimes)))
    for points in series.values():
        points.sort()
    return series


def main():
    p = argparse.ArgumentParser(description="Plot mean runtime against input size")
    p.add_argument("--input", type=str, required=True, help="JSON written by run.py --out")
    p.add_argument("--output-dir", type=str, default="plots")
    p.add_argument("--show", action="store_true")
    args = p.parse_args()

    series = load_series(args.input)

    plt.figure(figsize=(10, 6))
    for algorithm, points in sorted(series.items()):
        n_vals, runtime_vals = zip(*points)
        plt.plot(n_vals, runtime_vals, marker="o", label=algorithm)

    plt.xscale("log")
    plt.yscale("log")
    plt.xlabel("N (points or matrix rows)")
    plt.ylabel("Time (s)")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()

    os.makedirs(args.output_dir, exist_ok=True)
    plt.savefig(os.path.join(args.output_dir, "runtime_vs_n.png"))
    plt.savefig(os.path.join(args.output_dir, "runtime_vs_n.svg"))
    print(f"Saved plots to {args.output_dir}")
    if args.show:
        plt.show()


if __name__ == "__main__":
    main()
