from __future__ import annotations

from .registry import register_algorithm
from ..core.closest_pair import (
    closest_pair,
    closest_pair_brute_force,
    closest_pair_divide_conquer,
)
from ..core.multiply import multiply, standard_multiply, strassen_multiply

register_algorithm("closest_pair", closest_pair, family="closest_pair")
register_algorithm("closest_pair_brute_force", closest_pair_brute_force, family="closest_pair")
register_algorithm("closest_pair_divide_conquer", closest_pair_divide_conquer, family="closest_pair")
register_algorithm("matmul", multiply, family="matmul")
register_algorithm("matmul_standard", standard_multiply, family="matmul")
register_algorithm("matmul_strassen", strassen_multiply, family="matmul")
