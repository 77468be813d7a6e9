# fastfib public API: O(log n) floating-point Fibonacci via symmetric 2x2 matrix powers

from .types import PrecisionConfig, PrecisionInfo, FibonacciResult
from .matrix import PowerMatrix, square, multiply, top_right_product
from .power import accumulate, matrix_power, top_right_of_power
from .fibonacci import fibonacci, fibonacci_result
from .precision import (
    exact_limit,
    max_finite_index,
    precision_info,
    reference_fibonacci,
    relative_error,
)

__all__ = [
    "PrecisionConfig",
    "PrecisionInfo",
    "FibonacciResult",
    "PowerMatrix",
    "square",
    "multiply",
    "top_right_product",
    "accumulate",
    "matrix_power",
    "top_right_of_power",
    "fibonacci",
    "fibonacci_result",
    "exact_limit",
    "max_finite_index",
    "precision_info",
    "reference_fibonacci",
    "relative_error",
]
