from __future__ import annotations

"""
Benchmark and precision utilities for fastfib (numpy + stdlib).

Exports:
- linear_fibonacci(n, cfg=None) -> numpy scalar (O(n) float summation, the baseline)
- bench_fibonacci(cfg: BenchConfig) -> dict
- precision_sweep(max_index, precision=None) -> list[dict]
- write_precision_csv(path, rows) -> int
- make_markdown_report(bench, sweep, info) -> str
- main(argv=None) -> int

Notes:
- Outputs are JSON-native (lists/ints/floats/bools/str/None); non-finite values
  are reported as None so the JSON output stays strict.
- Percentiles use the deterministic nearest-rank rule.
"""

import argparse
import csv
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from fastfib import (
    PrecisionConfig,
    PrecisionInfo,
    fibonacci,
    precision_info,
    relative_error,
)
from fastfib.utils.logging import get_logger, log_metrics


def _finite_or_none(x: Any) -> Optional[float]:
    v = float(x)
    return v if np.isfinite(v) else None


@dataclass(frozen=True)
class BenchConfig:
    indices: Tuple[int, ...] = (10, 50, 78, 500, 1000)
    repeats: int = 20                       # >= 1 timed calls per index and method
    dtype: str = "float64"
    include_linear: bool = True             # time the O(n) baseline as well

    def __post_init__(self) -> None:
        if len(self.indices) == 0:
            raise ValueError("indices must be non-empty")
        for n in self.indices:
            if int(n) < 0:
                raise ValueError("indices must be >= 0")
        if int(self.repeats) < 1:
            raise ValueError("repeats must be >= 1")
        # Fails early on an unknown dtype
        PrecisionConfig(dtype=self.dtype)

    @property
    def precision(self) -> PrecisionConfig:
        return PrecisionConfig(dtype=self.dtype)


def linear_fibonacci(n: int, cfg: Optional[PrecisionConfig] = None) -> np.floating:
    """F(n) by n float additions in cfg.dtype."""
    _cfg = cfg or PrecisionConfig()
    if n < 0:
        raise ValueError("n must be >= 0")
    prev, cur = _cfg.scalar(0), _cfg.scalar(1)
    with np.errstate(over="ignore"):
        for _ in range(int(n)):
            prev, cur = cur, prev + cur
    return prev


def percentile_nearest_rank(values: List[float], p: float) -> float:
    """Deterministic nearest-rank percentile for p in [0,100]."""
    data = sorted(float(x) for x in values)
    n = len(data)
    if n == 0:
        return 0.0
    if p <= 0.0:
        return float(data[0])
    if p >= 100.0:
        return float(data[-1])
    r = (p / 100.0) * n
    idx = int(r)
    if r - idx > 0.0:
        idx += 1
    idx = max(1, min(n, idx))
    return float(data[idx - 1])


def _stats(timings_us: List[float]) -> Dict[str, float]:
    return {
        "min_us": float(min(timings_us) if timings_us else 0.0),
        "max_us": float(max(timings_us) if timings_us else 0.0),
        "mean_us": float(sum(timings_us) / float(len(timings_us)) if timings_us else 0.0),
        "p50_us": float(percentile_nearest_rank(timings_us, 50.0)),
        "p95_us": float(percentile_nearest_rank(timings_us, 95.0)),
    }


def _time_calls(fn, n: int, cfg: PrecisionConfig, repeats: int) -> Tuple[List[float], Any]:
    timings_us: List[float] = []
    value = None
    for _ in range(int(repeats)):
        t0 = time.perf_counter()
        value = fn(n, cfg)
        t1 = time.perf_counter()
        timings_us.append(float((t1 - t0) * 1_000_000.0))
    return timings_us, value


def bench_fibonacci(cfg: Optional[BenchConfig] = None) -> Dict[str, Any]:
    """
    Time the matrix method (and the linear baseline) per index.

    Returns:
      {
        "dtype": str,
        "repeats": int,
        "results": [{"index", "matrix": {stats}, "linear": {stats} | None,
                     "value": float | None, "finite": bool, "agree": bool | None}],
      }
    `agree` is whether both methods produced the same value (None without the baseline).
    """
    _cfg = cfg or BenchConfig()
    pcfg = _cfg.precision
    log = get_logger("fastfib.bench")
    results: List[Dict[str, Any]] = []
    for step, n in enumerate(_cfg.indices):
        n = int(n)
        t_mat, v_mat = _time_calls(fibonacci, n, pcfg, _cfg.repeats)
        rec: Dict[str, Any] = {
            "index": n,
            "matrix": _stats(t_mat),
            "linear": None,
            "value": _finite_or_none(v_mat),
            "finite": bool(np.isfinite(v_mat)),
            "agree": None,
        }
        if _cfg.include_linear:
            t_lin, v_lin = _time_calls(linear_fibonacci, n, pcfg, _cfg.repeats)
            rec["linear"] = _stats(t_lin)
            if np.isfinite(v_mat) and np.isfinite(v_lin):
                rec["agree"] = bool(np.isclose(v_mat, v_lin, rtol=1e-9 if pcfg.dtype != "float32" else 1e-5))
            else:
                rec["agree"] = bool(np.isinf(v_mat) and np.isinf(v_lin))
            log_metrics({"matrix_p50_us": rec["matrix"]["p50_us"], "linear_p50_us": rec["linear"]["p50_us"]},
                        step=step, logger=log)
        else:
            log_metrics({"matrix_p50_us": rec["matrix"]["p50_us"]}, step=step, logger=log)
        results.append(rec)

    return {"dtype": pcfg.dtype, "repeats": int(_cfg.repeats), "results": results}


def precision_sweep(max_index: int, precision: Optional[PrecisionConfig] = None) -> List[Dict[str, Any]]:
    """
    Compare F(0..max_index) against the exact integer reference.

    Row keys: index, value, exact_value (str, since it can exceed float range),
    rel_error, exact. value and rel_error are None once F(n) no longer fits a float.
    """
    if int(max_index) < 0:
        raise ValueError("max_index must be >= 0")
    pcfg = precision or PrecisionConfig()
    rows: List[Dict[str, Any]] = []
    prev, cur = 0, 1
    for n in range(int(max_index) + 1):
        value = fibonacci(n, pcfg)
        err = relative_error(value, prev)
        rows.append({
            "index": n,
            "value": _finite_or_none(value),
            "exact_value": str(prev),
            "rel_error": _finite_or_none(err),
            "exact": bool(np.isfinite(value) and int(value) == prev),
        })
        prev, cur = cur, prev + cur
    return rows


_CSV_HEADER: List[str] = ["index", "value", "exact_value", "rel_error", "exact"]


def write_precision_csv(path: str, rows: Sequence[Dict[str, Any]]) -> int:
    """Write sweep rows with a fixed header; returns the number of data rows."""
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(_CSV_HEADER)
        for r in rows:
            w.writerow([
                int(r["index"]),
                "" if r["value"] is None else repr(float(r["value"])),
                str(r["exact_value"]),
                "" if r["rel_error"] is None else f"{float(r['rel_error']):.6e}",
                int(bool(r["exact"])),
            ])
    return len(rows)


def _fmt_us(x: Any) -> str:
    try:
        return f"{float(x):.3f}"
    except (TypeError, ValueError):
        return str(x)


def make_markdown_report(bench: Dict[str, Any], sweep: Sequence[Dict[str, Any]], info: PrecisionInfo) -> str:
    """
    Human-readable summary:
      - H1: Fibonacci Benchmark Report
      - Precision: dtype, mantissa bits, exact ceiling, max finite index, first inexact index in the sweep
      - Timing: Index / matrix p50 / linear p50 table
    """
    first_inexact = next((int(r["index"]) for r in sweep if not r["exact"]), None)

    lines: List[str] = []
    lines.append("# Fibonacci Benchmark Report")
    lines.append("")
    lines.append("## Precision")
    lines.append(f"- dtype: {info.dtype}")
    lines.append(f"- mantissa_bits: {info.mantissa_bits}")
    lines.append(f"- exact_limit: {info.exact_limit}")
    lines.append(f"- max_finite_index: {info.max_finite_index}")
    if first_inexact is not None:
        lines.append(f"- first inexact index in sweep: {first_inexact}")
    lines.append("")
    lines.append("## Timing")
    lines.append(f"- repeats: {int(bench.get('repeats', 0))}")
    lines.append("")
    lines.append("| Index | matrix p50 (us) | linear p50 (us) |")
    lines.append("|---:|---:|---:|")
    for rec in bench.get("results", []):
        lin = rec.get("linear")
        lin_s = _fmt_us(lin["p50_us"]) if isinstance(lin, dict) else "-"
        lines.append(f"| {int(rec['index'])} | {_fmt_us(rec['matrix']['p50_us'])} | {lin_s} |")
    lines.append("")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Benchmark fastfib against linear summation and sweep its precision.")
    ap.add_argument("--indices", type=int, nargs="+", default=list(BenchConfig().indices))
    ap.add_argument("--repeats", type=int, default=20)
    ap.add_argument("--dtype", choices=["float32", "float64", "longdouble"], default="float64")
    ap.add_argument("--no-linear", action="store_true", help="skip the O(n) baseline")
    ap.add_argument("--sweep-max", type=int, default=120, help="last index of the precision sweep")
    ap.add_argument("--csv", default=None, help="write the precision sweep to this CSV path")
    ap.add_argument("--report", default=None, help="write a Markdown report to this path")
    args = ap.parse_args(argv)

    cfg = BenchConfig(
        indices=tuple(args.indices),
        repeats=args.repeats,
        dtype=args.dtype,
        include_linear=not args.no_linear,
    )
    bench = bench_fibonacci(cfg)
    sweep = precision_sweep(args.sweep_max, cfg.precision)
    info = precision_info(cfg.precision)

    if args.csv:
        write_precision_csv(args.csv, sweep)
    if args.report:
        if os.path.dirname(args.report):
            os.makedirs(os.path.dirname(args.report), exist_ok=True)
        with open(args.report, "w", encoding="utf-8") as f:
            f.write(make_markdown_report(bench, sweep, info))

    out = {"bench": bench, "precision": info.to_dict()}
    print(json.dumps(out, indent=2, sort_keys=True, allow_nan=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
