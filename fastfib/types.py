# Core value types for fastfib: precision configuration and result records.
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np


_DTYPES: Dict[str, Any] = {
    "float32": np.float32,
    "float64": np.float64,
    "longdouble": np.longdouble,
}
_OVERFLOW_MODES = ("ignore", "warn", "raise")


@dataclass(frozen=True)
class PrecisionConfig:
    """
    Floating-point width used for one Fibonacci computation.

    Replaces process-wide FPU control-word setup: the chosen dtype travels with
    the call, and `overflow` is applied through numpy.errstate only while the
    matrices are being multiplied.
    """

    dtype: str = "float64"          # {"float32","float64","longdouble"}
    overflow: str = "ignore"        # numpy.errstate mode for over/invalid

    def __post_init__(self) -> None:
        if self.dtype not in _DTYPES:
            raise ValueError(f"dtype must be one of {sorted(_DTYPES)}")
        if self.overflow not in _OVERFLOW_MODES:
            raise ValueError("overflow must be 'ignore', 'warn' or 'raise'")

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self.dtype])

    @property
    def mantissa_bits(self) -> int:
        """Significand width including the implicit leading bit (53 for float64)."""
        return int(np.finfo(self.np_dtype).nmant) + 1

    def scalar(self, x: Any) -> np.floating:
        return self.np_dtype.type(x)


@dataclass(frozen=True)
class PrecisionInfo:
    dtype: str
    mantissa_bits: int
    exact_limit: int         # largest n with F(n) integer-exact
    max_finite_index: int    # largest n with F(n) below the dtype's max

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dtype": self.dtype,
            "mantissa_bits": int(self.mantissa_bits),
            "exact_limit": int(self.exact_limit),
            "max_finite_index": int(self.max_finite_index),
        }


@dataclass(frozen=True)
class FibonacciResult:
    index: int
    value: np.floating
    exact: bool
    finite: bool
    precision: PrecisionInfo


__all__ = ["PrecisionConfig", "PrecisionInfo", "FibonacciResult"]
