"""Binary (square-and-multiply) exponentiation of the Fibonacci base matrix."""
from __future__ import annotations

from numbers import Integral
from typing import Optional

import numpy as np

from .matrix import PowerMatrix, multiply, square, top_right_product
from .types import PrecisionConfig
from .utils.logging import get_logger

_LOG = get_logger("fastfib.power")


def _as_nonnegative_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    ivalue = int(value)
    if ivalue < 0:
        raise ValueError(f"{name} must be >= 0, got {ivalue}")
    return ivalue


def accumulate(acc: PowerMatrix, pow2: PowerMatrix, bits: int) -> PowerMatrix:
    """
    Return acc @ pow2 ** bits, scanning `bits` least-significant bit first.

    `pow2` is squared in place as the scan moves up, so on return it holds
    pow2 ** (2 ** k) for the highest bit k visited. `acc` is not mutated.
    The loop stops as soon as the shifted bit count reaches zero, so no
    squaring is spent past the top set bit.
    """
    remaining = _as_nonnegative_int(bits, "bits")
    result = acc
    step = 0
    while True:
        if remaining & 1:
            result = multiply(result, pow2)
        remaining >>= 1
        if not remaining:
            break
        square(pow2)
        step += 1
    _LOG.debug("accumulate bits=%d squarings=%d power=%d", int(bits), step, result.power)
    return result


def matrix_power(exponent: int, cfg: Optional[PrecisionConfig] = None) -> PowerMatrix:
    """
    BASE ** exponent for exponent >= 0, in O(log exponent) multiplications.

    The accumulator is seeded with BASE itself and the loop consumes
    exponent - 1 bits, so exponent == 1 needs no multiplication at all.
    """
    _cfg = cfg or PrecisionConfig()
    k = _as_nonnegative_int(exponent, "exponent")
    if k == 0:
        return PowerMatrix.identity(_cfg)
    with np.errstate(over=_cfg.overflow, invalid=_cfg.overflow):
        return accumulate(PowerMatrix.base(_cfg), PowerMatrix.base(_cfg), k - 1)


def top_right_of_power(exponent: int, cfg: Optional[PrecisionConfig] = None) -> np.floating:
    """
    Top-right entry of BASE ** exponent, i.e. F(exponent).

    Runs the same scan as `matrix_power` but the product for the top set bit
    only forms a*e + b*f. Every entry touched is then bounded by the returned
    value, so strict overflow modes trip only when that value itself overflows.
    """
    _cfg = cfg or PrecisionConfig()
    k = _as_nonnegative_int(exponent, "exponent")
    if k == 0:
        return _cfg.scalar(0)
    result = PowerMatrix.base(_cfg)
    remaining = k - 1
    if not remaining:
        return result.b
    pow2 = PowerMatrix.base(_cfg)
    with np.errstate(over=_cfg.overflow, invalid=_cfg.overflow):
        while True:
            if remaining & 1:
                if remaining == 1:
                    return top_right_product(result, pow2)
                result = multiply(result, pow2)
            remaining >>= 1
            square(pow2)


__all__ = ["accumulate", "matrix_power", "top_right_of_power"]
