from .registry import Algorithm, available_algorithms, get_algorithm, register_algorithm
from . import builtin  # noqa: F401 - ensures built-in algorithm registration

__all__ = ["Algorithm", "available_algorithms", "get_algorithm", "register_algorithm"]
