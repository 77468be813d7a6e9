#!/usr/bin/env python3
"""
Command-line runner for fastfib.

Usage:
    fastfib INDEX [--dtype {float32,float64,longdouble}] [--overflow {ignore,warn,raise}]
                  [--info] [--log-level LEVEL]

Prints F(INDEX) on stdout without a trailing newline, as the exact decimal
expansion of the binary value with six fractional digits. `--info` reports the
mantissa width and the integer-exact ceiling of the chosen dtype on stderr.

Exit codes: 0 ok, 1 rejected index or floating-point error, 2 bad arguments.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from fastfib import PrecisionConfig, fibonacci_result
from fastfib.utils.logging import get_logger, set_level


def format_value(value: np.floating) -> str:
    """Fixed-point rendering of a float scalar with six fractional digits."""
    if np.isnan(value):
        return "nan"
    if np.isinf(value):
        return "inf" if value > 0 else "-inf"
    return np.format_float_positional(value, precision=6, unique=False, fractional=True, trim="k")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="fastfib", description="Compute F(INDEX) by fast 2x2 matrix exponentiation.")
    ap.add_argument("index", type=int, help="Fibonacci index (>= 0)")
    ap.add_argument("--dtype", choices=["float32", "float64", "longdouble"], default="float64",
                    help="floating-point width of the computation")
    ap.add_argument("--overflow", choices=["ignore", "warn", "raise"], default="ignore",
                    help="numpy handling of overflow during the matrix products")
    ap.add_argument("--info", action="store_true", help="report mantissa width and exact ceiling on stderr")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="fastfib logger level")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_level(getattr(logging, args.log_level))
    log = get_logger("fastfib.cli")

    cfg = PrecisionConfig(dtype=args.dtype, overflow=args.overflow)
    try:
        res = fibonacci_result(args.index, cfg)
    except (ValueError, TypeError, FloatingPointError) as e:
        log.error("cannot compute F(%s): %s", args.index, e)
        sys.stderr.write(f"error: {e}\n")
        return 1

    if args.info:
        info = res.precision
        sys.stderr.write(
            f"dtype={info.dtype} mantissa_bits={info.mantissa_bits} "
            f"exact_limit={info.exact_limit} max_finite_index={info.max_finite_index}\n"
        )
        if not res.finite:
            sys.stderr.write(f"note: F({res.index}) overflows {info.dtype}\n")
        elif not res.exact:
            sys.stderr.write(f"note: F({res.index}) is approximate past F({info.exact_limit})\n")

    sys.stdout.write(format_value(res.value))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
