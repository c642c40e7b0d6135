"""
Public interface for the divide-and-conquer algorithms library.

`closest_pair` and `multiply` are the main entry points. Algorithm
registration helpers are re-exported from `dnc_lab.algorithms.registry`
so the benchmark harness and users can look algorithms up by name.
"""

from .core.closest_pair import closest_pair, closest_pair_brute_force, closest_pair_divide_conquer
from .core.errors import DimensionMismatchError
from .core.matrix import Matrix
from .core.multiply import multiply, standard_multiply, strassen_multiply
from .core.point import ClosestPairResult, Point
from .algorithms import available_algorithms, get_algorithm, register_algorithm

__all__ = [
    "ClosestPairResult",
    "DimensionMismatchError",
    "Matrix",
    "Point",
    "available_algorithms",
    "closest_pair",
    "closest_pair_brute_force",
    "closest_pair_divide_conquer",
    "get_algorithm",
    "multiply",
    "register_algorithm",
    "standard_multiply",
    "strassen_multiply",
]
