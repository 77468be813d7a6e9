"""Symmetric 2x2 powers of the Fibonacci base matrix.

Every matrix handled here is BASE ** k with

    BASE = | 1  1 |
           | 1  0 |

so it is symmetric and stored as three scalars (a, b, c):

    | a  b |
    | b  c |

Any two powers of BASE commute, which is what lets `multiply` compute only
three of the four product entries. `PowerMatrix` carries the exponent k as a
tag and can only be built from BASE or the identity, so the three-entry
product is never applied to arbitrary matrices.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from .types import PrecisionConfig


class PowerMatrix:
    """BASE ** power, stored as (a, b, c) scalars of one numpy float type."""

    __slots__ = ("a", "b", "c", "power", "dtype")

    # No public constructor: instances come from base(), identity() and the products below.
    def __init__(self, *args: object, **kwargs: object) -> None:
        raise TypeError("PowerMatrix is built with PowerMatrix.base() or PowerMatrix.identity()")

    @classmethod
    def _make(cls, a: np.floating, b: np.floating, c: np.floating, power: int, dtype: np.dtype) -> "PowerMatrix":
        m = object.__new__(cls)
        m.a = a
        m.b = b
        m.c = c
        m.power = int(power)
        m.dtype = dtype
        return m

    @classmethod
    def base(cls, cfg: Optional[PrecisionConfig] = None) -> "PowerMatrix":
        _cfg = cfg or PrecisionConfig()
        one, zero = _cfg.scalar(1), _cfg.scalar(0)
        return cls._make(one, one, zero, 1, _cfg.np_dtype)

    @classmethod
    def identity(cls, cfg: Optional[PrecisionConfig] = None) -> "PowerMatrix":
        _cfg = cfg or PrecisionConfig()
        one, zero = _cfg.scalar(1), _cfg.scalar(0)
        return cls._make(one, zero, one, 0, _cfg.np_dtype)

    def copy(self) -> "PowerMatrix":
        return PowerMatrix._make(self.a, self.b, self.c, self.power, self.dtype)

    def as_array(self) -> np.ndarray:
        """Dense (2, 2) view of the matrix in its own dtype."""
        return np.array([[self.a, self.b], [self.b, self.c]], dtype=self.dtype)

    def square(self) -> "PowerMatrix":
        square(self)
        return self

    def multiply(self, other: "PowerMatrix") -> "PowerMatrix":
        return multiply(self, other)

    def __repr__(self) -> str:
        return f"PowerMatrix(a={self.a!r}, b={self.b!r}, c={self.c!r}, power={self.power}, dtype={self.dtype.name})"


def _check_operand(m: object, name: str) -> PowerMatrix:
    if not isinstance(m, PowerMatrix):
        raise TypeError(f"{name} must be a PowerMatrix (a power of the base matrix)")
    return m


def square(m: PowerMatrix) -> None:
    """
    Replace m with m @ m in place.

        b2 = b*b
        a' = a*a + b2
        b' = a*b + b*c
        c' = b2  + c*c
    """
    _check_operand(m, "m")
    a, b, c = m.a, m.b, m.c
    b2 = b * b
    m.a = a * a + b2
    m.b = a * b + b * c
    m.c = b2 + c * c
    m.power *= 2


def multiply(m1: PowerMatrix, m2: PowerMatrix) -> PowerMatrix:
    """
    Return m1 @ m2 as a new PowerMatrix.

    The bottom-left entry of the product is never formed; it equals the
    top-right one because powers of the base matrix commute.

        be = b*e
        x = a*d + be
        y = a*e + b*f
        z = be  + c*f
    """
    _check_operand(m1, "m1")
    _check_operand(m2, "m2")
    if m1.dtype != m2.dtype:
        raise ValueError(f"dtype mismatch: {m1.dtype.name} vs {m2.dtype.name}")
    a, b, c = m1.a, m1.b, m1.c
    d, e, f = m2.a, m2.b, m2.c
    be = b * e
    x = a * d + be
    y = a * e + b * f
    z = be + c * f
    return PowerMatrix._make(x, y, z, m1.power + m2.power, m1.dtype)


def top_right_product(m1: PowerMatrix, m2: PowerMatrix) -> np.floating:
    """Top-right entry of m1 @ m2 (a*e + b*f) without forming the rest."""
    _check_operand(m1, "m1")
    _check_operand(m2, "m2")
    if m1.dtype != m2.dtype:
        raise ValueError(f"dtype mismatch: {m1.dtype.name} vs {m2.dtype.name}")
    return m1.a * m2.b + m1.b * m2.c


__all__ = ["PowerMatrix", "square", "multiply", "top_right_product"]
