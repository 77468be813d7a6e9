"""Relative-error plot for a fastfib precision sweep (headless matplotlib)."""
from __future__ import annotations

import argparse
import math
import os
from typing import Any, Dict, List, Optional, Sequence

from matplotlib.figure import Figure

from fastfib import PrecisionConfig, PrecisionInfo, precision_info
from harness.fib_bench import precision_sweep


def plot_precision(
    rows: Sequence[Dict[str, Any]],
    path: str,
    info: Optional[PrecisionInfo] = None,
) -> str:
    """
    Plot rel_error vs. index and save a PNG at `path`.

    Exact rows (zero error) are drawn on the x-axis floor since a log scale
    cannot show zero; the integer-exact ceiling is marked when `info` is given.
    Returns the absolute output path.
    """
    if len(rows) == 0:
        raise ValueError("rows must be non-empty")
    xs = [int(r["index"]) for r in rows]
    # Overflowed rows carry no error and are left as gaps
    errs = [float("nan") if r["rel_error"] is None else float(r["rel_error"]) for r in rows]
    nonzero = [e for e in errs if e > 0.0 and math.isfinite(e)]
    floor = min(nonzero) / 10.0 if nonzero else 1e-20
    ys: List[float] = [floor if e == 0.0 else e for e in errs]

    fig = Figure(figsize=(7.0, 4.0), dpi=100)
    ax = fig.add_subplot(111)
    ax.plot(xs, ys, marker=".", linestyle="-", linewidth=0.8)
    ax.set_yscale("log")
    ax.set_xlabel("index n")
    ax.set_ylabel("relative error of F(n)")
    title = "fastfib precision"
    if info is not None:
        title = f"fastfib precision ({info.dtype}, {info.mantissa_bits}-bit mantissa)"
        ax.axvline(info.exact_limit, color="tab:red", linestyle="--", linewidth=1.0,
                   label=f"exact through F({info.exact_limit})")
        ax.legend(loc="upper left")
    ax.set_title(title)
    ax.grid(True, which="both", alpha=0.3)
    fig.tight_layout()

    out = os.path.abspath(path)
    if os.path.dirname(out):
        os.makedirs(os.path.dirname(out), exist_ok=True)
    fig.savefig(out, format="png")
    return out


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Plot fastfib relative error against exact Fibonacci numbers.")
    ap.add_argument("--dtype", choices=["float32", "float64", "longdouble"], default="float64")
    ap.add_argument("--max-index", type=int, default=200)
    ap.add_argument("--out", default="fastfib_precision.png")
    args = ap.parse_args(argv)

    cfg = PrecisionConfig(dtype=args.dtype)
    rows = precision_sweep(args.max_index, cfg)
    path = plot_precision(rows, args.out, precision_info(cfg))
    print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
