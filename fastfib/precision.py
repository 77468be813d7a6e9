"""Precision ceiling of floating-point Fibonacci values.

A float type with p significand bits represents every integer up to 2**p.
Along the way to F(n) the matrix loop only reads entries bounded by F(n)
(the accumulator holds BASE**m for m < n, the squared matrix BASE**(2**j)
with 2**j < n, and every partial product a*e, b*f is a product of Fibonacci
numbers below F(n)). So F(n) is integer-exact whenever F(n) <= 2**p:

    dtype        p    exact through
    float32     24    F(36)
    float64     53    F(78)
    longdouble  64    F(93)   (x87 extended; equals float64 where long double is 64-bit)

Past that the low bits are rounded away; past the type's max the value is inf.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional, Tuple

import numpy as np

from .types import PrecisionConfig, PrecisionInfo


def reference_fibonacci(n: int) -> int:
    """Exact F(n) with Python ints by linear summation; reference for checks only."""
    if n < 0:
        raise ValueError("n must be >= 0")
    prev, cur = 0, 1
    for _ in range(n):
        prev, cur = cur, prev + cur
    return prev


@lru_cache(maxsize=None)
def _limits(dtype: str) -> Tuple[int, int, int]:
    cfg = PrecisionConfig(dtype=dtype)
    bits = cfg.mantissa_bits
    exact_ceiling = 1 << bits
    max_value = int(np.finfo(cfg.np_dtype).max)

    n = 0
    prev, cur = 0, 1  # F(n), F(n+1)
    exact_limit = -1
    while prev <= max_value:
        if prev <= exact_ceiling:
            exact_limit = n
        prev, cur = cur, prev + cur
        n += 1
    return bits, exact_limit, n - 1


def exact_limit(cfg: Optional[PrecisionConfig] = None) -> int:
    """Largest n for which F(n) comes out integer-exact in cfg.dtype."""
    _cfg = cfg or PrecisionConfig()
    return _limits(_cfg.dtype)[1]


def max_finite_index(cfg: Optional[PrecisionConfig] = None) -> int:
    """Largest n for which F(n) is below the dtype's largest finite value."""
    _cfg = cfg or PrecisionConfig()
    return _limits(_cfg.dtype)[2]


def precision_info(cfg: Optional[PrecisionConfig] = None) -> PrecisionInfo:
    _cfg = cfg or PrecisionConfig()
    bits, limit, finite = _limits(_cfg.dtype)
    return PrecisionInfo(
        dtype=_cfg.dtype,
        mantissa_bits=bits,
        exact_limit=limit,
        max_finite_index=finite,
    )


def relative_error(value: np.floating, exact: int) -> float:
    """|value - exact| / exact computed without rounding the difference; inf for non-finite values."""
    if not np.isfinite(value):
        return float("inf")
    if exact == 0:
        return 0.0 if value == 0 else float("inf")
    return abs(int(value) - exact) / exact


__all__ = [
    "reference_fibonacci",
    "exact_limit",
    "max_finite_index",
    "precision_info",
    "relative_error",
]
