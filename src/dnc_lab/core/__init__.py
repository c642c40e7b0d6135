from .errors import DimensionMismatchError
from .matrix import Matrix
from .point import ClosestPairResult, Point

__all__ = ["ClosestPairResult", "DimensionMismatchError", "Matrix", "Point"]
