from .runner import BenchmarkResult, BenchmarkRunner, theoretical_ratio

__all__ = ["BenchmarkResult", "BenchmarkRunner", "theoretical_ratio"]
