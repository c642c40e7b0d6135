from __future__ import annotations

import csv
import json
import math
import os
import time
import tracemalloc
from collections import defaultdict
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

import psutil
import torch

from ..algorithms.registry import Algorithm, get_algorithm
from ..core.matrix import Matrix
from ..core.multiply import DEFAULT_STRASSEN_THRESHOLD, standard_multiply
from ..core.point import PointsLike, as_points

ProgressCallback = Callable[[str, dict[str, Any]], None]

CSV_COLUMNS = (
    "algorithm",
    "family",
    "data_size",
    "runs",
    "mean_time_ms",
    "min_time_ms",
    "max_time_ms",
    "peak_memory_mb",
    "parallel",
)


@dataclass
class BenchmarkResult:
    algorithm: str
    family: str
    data_size: int
    runs: int
    mean_time_s: float
    min_time_s: float
    max_time_s: float
    peak_memory_bytes: Optional[int] = None
    parallel: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> BenchmarkResult:
        # Unknown keys are ignored so older readers accept newer files.
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in payload.items() if key in known})


def _output_tensor_bytes(output: Any) -> int:
    if isinstance(output, Matrix):
        output = output._data
    if isinstance(output, torch.Tensor):
        return output.element_size() * output.numel()
    return 0


def _metadata(options: dict[str, Any]) -> dict[str, Any]:
    # Only JSON scalars are recorded; callbacks and other objects are dropped.
    return {
        key: value
        for key, value in options.items()
        if value is None or isinstance(value, (bool, int, float, str))
    }


def theoretical_ratio(complexity: str, n1: int, n2: int) -> float:
    """
    Expected running-time ratio T(n2) / T(n1) for a complexity class.

    ``complexity`` is one of ``"n log n"``, ``"n^2"``, ``"n^3"`` or
    ``"n^log2(7)"``.
    """
    if n1 < 2 or n2 < 2:
        raise ValueError("Sizes must be at least 2 to compare growth.")
    growth = {
        "n log n": lambda n: n * math.log2(n),
        "n^2": lambda n: float(n) ** 2,
        "n^3": lambda n: float(n) ** 3,
        "n^log2(7)": lambda n: float(n) ** math.log2(7),
    }
    try:
        fn = growth[complexity]
    except KeyError as exc:
        raise KeyError(f"Unknown complexity '{complexity}'. Known: {', '.join(growth)}") from exc
    return fn(n2) / fn(n1)


class BenchmarkRunner:
    """
    Times registered algorithms and collects :class:`BenchmarkResult` rows.

    Each timed call is repeated ``runs`` times. The memory figure is the
    largest per-run peak: the greater of the process RSS growth and the
    tracemalloc peak plus the tensor storage of the returned value, since
    tracemalloc does not see torch allocations.
    """

    def __init__(
        self,
        *,
        progress_callback: ProgressCallback | None = None,
        verbose: bool = False,
        track_memory: bool = True,
    ) -> None:
        self._results: list[BenchmarkResult] = []
        self._progress_callback = progress_callback
        self._verbose = verbose
        self._track_memory = track_memory

    @property
    def results(self) -> tuple[BenchmarkResult, ...]:
        return tuple(self._results)

    def _resolve(self, name: str, family: str) -> Algorithm:
        algorithm = get_algorithm(name)
        if algorithm.family != family:
            raise ValueError(
                f"Algorithm '{name}' belongs to family '{algorithm.family}', expected '{family}'."
            )
        return algorithm

    def _measure(self, fn: Callable[[], Any], runs: int, label: str) -> tuple[list[float], Optional[int], Any]:
        if runs < 1:
            raise ValueError(f"runs must be at least 1, got {runs}.")

        times: list[float] = []
        peak: Optional[int] = None
        output: Any = None
        # Leave an outer tracemalloc session untouched.
        owns_tracing = self._track_memory and not tracemalloc.is_tracing()
        process = psutil.Process(os.getpid()) if self._track_memory else None

        for run in range(runs):
            if owns_tracing:
                tracemalloc.start()
            rss_before = process.memory_info().rss if process is not None else 0
            t0 = time.perf_counter()
            output = fn()
            t1 = time.perf_counter()
            if process is not None:
                rss_growth = process.memory_info().rss - rss_before
                traced_peak = 0
                if owns_tracing:
                    _, traced_peak = tracemalloc.get_traced_memory()
                    tracemalloc.stop()
                run_peak = max(rss_growth, traced_peak + _output_tensor_bytes(output))
                peak = run_peak if peak is None else max(peak, run_peak)
            times.append(t1 - t0)

            if self._progress_callback is not None:
                self._progress_callback(
                    "run",
                    {"algorithm": label, "run": run, "runs": runs, "time_s": t1 - t0},
                )

        return times, peak, output

    def _record(
        self,
        algorithm: Algorithm,
        data_size: int,
        times: Sequence[float],
        peak: Optional[int],
        parallel: bool,
        metadata: dict[str, Any],
    ) -> BenchmarkResult:
        result = BenchmarkResult(
            algorithm=algorithm.name,
            family=algorithm.family,
            data_size=data_size,
            runs=len(times),
            mean_time_s=sum(times) / len(times),
            min_time_s=min(times),
            max_time_s=max(times),
            peak_memory_bytes=peak,
            parallel=parallel,
            metadata=metadata,
        )
        self._results.append(result)
        if self._verbose:
            print(f"  {algorithm.name} (n={data_size}): {result.mean_time_s * 1000.0:.2f}ms")
        return result

    def benchmark_closest_pair(
        self,
        name: str,
        points: PointsLike,
        *,
        runs: int = 1,
        **options: Any,
    ) -> BenchmarkResult:
        algorithm = self._resolve(name, "closest_pair")
        arena = as_points(points)
        if self._verbose:
            print(f"  Testing {name} on {len(arena)} points...")

        times, peak, pair = self._measure(lambda: algorithm(arena, **options), runs, name)
        metadata = _metadata(options)
        metadata["distance"] = None if pair is None else pair.distance
        return self._record(algorithm, len(arena), times, peak, False, metadata)

    def benchmark_multiply(
        self,
        name: str,
        a: Matrix,
        b: Matrix,
        *,
        runs: int = 1,
        **options: Any,
    ) -> BenchmarkResult:
        algorithm = self._resolve(name, "matmul")
        if self._verbose:
            print(f"  Testing {name} on {a.size}x{a.size} matrices...")

        times, peak, _ = self._measure(lambda: algorithm(a, b, **options), runs, name)
        # The thread pool only runs when the block recursion does.
        workers = int(options.get("max_workers") or 1)
        threshold = int(options.get("threshold", DEFAULT_STRASSEN_THRESHOLD))
        parallel = algorithm.fn is not standard_multiply and workers > 1 and a.size > threshold
        return self._record(algorithm, a.size, times, peak, parallel, _metadata(options))

    def best(self) -> Optional[BenchmarkResult]:
        """Fastest result by mean time, or ``None`` when nothing has run."""
        if not self._results:
            return None
        return min(self._results, key=lambda r: r.mean_time_s)

    def summary(self) -> list[str]:
        if not self._results:
            return ["No benchmark results available"]

        grouped: dict[str, list[BenchmarkResult]] = defaultdict(list)
        for result in self._results:
            grouped[result.algorithm].append(result)

        lines = ["=== Benchmark Results ==="]
        for algorithm, results in grouped.items():
            lines.append(f"--- {algorithm} ---")
            for r in sorted(results, key=lambda r: r.data_size):
                line = f"Data size: {r.data_size}, Execution time: {r.mean_time_s * 1000.0:.2f}ms"
                if r.peak_memory_bytes is not None:
                    line += f", Memory usage: {r.peak_memory_bytes / 1024 / 1024:.2f}MB"
                lines.append(line)

        fastest = self.best()
        assert fastest is not None
        lines.append(f"Best Performance: {fastest.algorithm} ({fastest.mean_time_s * 1000.0:.2f}ms)")
        return lines

    def save_json(self, path: Union[str, Path]) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump({"results": [r.to_dict() for r in self._results]}, f, indent=2)
        return out_path

    def save_csv(self, path: Union[str, Path]) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", newline="") as f:
            w = csv.writer(f)
            w.writerow(CSV_COLUMNS)
            for r in self._results:
                w.writerow([
                    r.algorithm,
                    r.family,
                    r.data_size,
                    r.runs,
                    f"{r.mean_time_s * 1000.0:.3f}",
                    f"{r.min_time_s * 1000.0:.3f}",
                    f"{r.max_time_s * 1000.0:.3f}",
                    "N/A" if r.peak_memory_bytes is None else f"{r.peak_memory_bytes / 1024 / 1024:.2f}",
                    r.parallel,
                ])
        return out_path

    @classmethod
    def load_json(cls, path: Union[str, Path]) -> BenchmarkRunner:
        """Rebuild a runner holding the results stored by :meth:`save_json`."""
        with open(path, "r") as f:
            payload = json.load(f)
        runner = cls()
        runner._results = [BenchmarkResult.from_dict(item) for item in payload.get("results", [])]
        return runner
