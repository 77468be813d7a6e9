"""Fibonacci extraction from powers of the base matrix.

BASE ** k == | F(k+1)  F(k)   |
             | F(k)    F(k-1) |

so F(n) is the top-right entry of BASE ** n. Indices 0 and 1 are answered
directly; everything else goes through the square-and-multiply loop with the
accumulator seeded by BASE and n - 1 exponent bits.
"""
from __future__ import annotations

from numbers import Integral
from typing import Optional

import numpy as np

from .power import top_right_of_power
from .precision import precision_info
from .types import FibonacciResult, PrecisionConfig
from .utils.logging import get_logger

_LOG = get_logger("fastfib.fibonacci")


def _validate_index(index: object) -> int:
    if isinstance(index, bool) or not isinstance(index, Integral):
        raise TypeError(f"index must be an integer, got {type(index).__name__}")
    n = int(index)
    if n < 0:
        # A negative count would never shift down to zero in the exponent loop.
        raise ValueError(f"index must be >= 0, got {n}")
    return n


def fibonacci(index: int, cfg: Optional[PrecisionConfig] = None) -> np.floating:
    """
    Floating-point F(index) in O(log index) matrix products.

    The value is integer-exact up to `fastfib.precision.exact_limit(cfg)`;
    beyond it the low bits are rounded, and beyond the dtype's range it is inf.
    """
    _cfg = cfg or PrecisionConfig()
    n = _validate_index(index)
    if n == 0:
        return _cfg.scalar(0)
    if n == 1:
        return _cfg.scalar(1)
    value = top_right_of_power(n, _cfg)
    _LOG.debug("fibonacci index=%d dtype=%s value=%r", n, _cfg.dtype, value)
    return value


def fibonacci_result(index: int, cfg: Optional[PrecisionConfig] = None) -> FibonacciResult:
    """F(index) together with the precision facts a caller needs to trust it."""
    _cfg = cfg or PrecisionConfig()
    value = fibonacci(index, _cfg)
    n = int(index)
    info = precision_info(_cfg)
    finite = bool(np.isfinite(value))
    exact = n <= info.exact_limit
    if not finite:
        _LOG.warning(
            "F(%d) exceeds the %s range (max finite index %d); value is %r",
            n, _cfg.dtype, info.max_finite_index, value,
        )
    elif not exact:
        _LOG.warning(
            "F(%d) is past the %d-bit mantissa ceiling of %s (exact through F(%d)); low digits are rounded",
            n, info.mantissa_bits, _cfg.dtype, info.exact_limit,
        )
    return FibonacciResult(index=n, value=value, exact=exact, finite=finite, precision=info)


__all__ = ["fibonacci", "fibonacci_result"]
