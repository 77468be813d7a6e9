"""Logging setup for fastfib and its harness scripts.

Every fastfib logger writes through one marked stderr handler and does not
propagate to the root logger. Library modules fetch their logger with
`get_logger(__name__-style name)` and leave the level alone; the CLI decides
the level once with `set_level`.

Public API
- get_logger(name="fastfib", level=None) -> logging.Logger
- set_level(level, prefix="fastfib") -> None
- log_metrics(metrics, step=None, logger=None) -> None
"""
from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def get_logger(name: str = "fastfib", level: Optional[int] = None) -> logging.Logger:
    """
    Fetch `name`, installing the fastfib stderr handler on first use.

    `level=None` keeps whatever level is already set (WARNING for a new
    logger), so importing a module never overrides the level picked by a CLI.
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(int(level))
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    logger.propagate = False

    if not any(getattr(h, "_fastfib_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler._fastfib_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
    return logger


def set_level(level: int, prefix: str = "fastfib") -> None:
    """Apply `level` to `prefix` and every logger already created under it."""
    get_logger(prefix, level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(prefix + "."):
            logging.getLogger(name).setLevel(int(level))


def _finite(x: object, what: str) -> float:
    try:
        val = float(x)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise TypeError(f"{what} must be a real number") from e
    if not math.isfinite(val):
        raise ValueError(f"{what} must be finite, got {val}")
    return val


def log_metrics(
    metrics: Mapping[str, float],
    step: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Emit one INFO line "metrics k1=v1 k2=v2 [step=N]" with keys sorted.

    Timings are logged this way by the benchmark; values must be finite.
    """
    if not isinstance(metrics, Mapping) or not metrics:
        raise ValueError("metrics must be a non-empty mapping of str -> float")
    fields = []
    for key in sorted(metrics):
        if not isinstance(key, str) or not key:
            raise ValueError("metric keys must be non-empty strings")
        fields.append(f"{key}={_finite(metrics[key], repr(key)):.10g}")
    if step is not None:
        fields.append(f"step={int(_finite(step, 'step'))}")
    (logger or get_logger()).info("metrics " + " ".join(fields))


__all__ = ["get_logger", "set_level", "log_metrics"]
