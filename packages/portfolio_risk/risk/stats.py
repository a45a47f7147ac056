"""
Statistics Kernel

Sample statistics underpinning every other risk module. Functions accept any
sequence of floats and never raise on empty or short input: they degrade to
0, which callers must not read as "no risk".
"""

from typing import Optional, Sequence

import numpy as np
import structlog

from portfolio_risk.config import get_settings

logger = structlog.get_logger(__name__)


class SeriesLengthMismatchError(ValueError):
    """Raised for mismatched paired series when strict inputs are enabled."""


def check_paired(
    caller: str,
    xs: Sequence[float],
    ys: Sequence[float],
    strict: Optional[bool] = None,
) -> bool:
    """Return True when two paired series have equal length.

    A mismatch is logged and, in strict mode, raised as
    :class:`SeriesLengthMismatchError`; otherwise the caller falls back to
    its documented default. ``strict=None`` reads ``RISK_STRICT_INPUTS``.
    """
    if len(xs) == len(ys):
        return True

    logger.warning(
        "check_paired: paired series length mismatch",
        caller=caller,
        left_length=len(xs),
        right_length=len(ys),
    )
    if strict is None:
        strict = get_settings().STRICT_INPUTS
    if strict:
        raise SeriesLengthMismatchError(
            f"{caller}: paired series lengths differ ({len(xs)} vs {len(ys)})"
        )
    return False


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty series."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def variance(values: Sequence[float]) -> float:
    """Sample variance (n - 1 denominator); 0 for fewer than 2 values."""
    if len(values) < 2:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float), ddof=1))


def std_dev(values: Sequence[float]) -> float:
    """Sample standard deviation."""
    return float(np.sqrt(variance(values)))


def covariance(
    xs: Sequence[float],
    ys: Sequence[float],
    strict: Optional[bool] = None,
) -> float:
    """Sample covariance of two paired series.

    Returns 0 on length mismatch or fewer than 2 pairs.
    """
    if not check_paired("covariance", xs, ys, strict) or len(xs) < 2:
        return 0.0

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    return float(np.sum((x - x.mean()) * (y - y.mean())) / (len(x) - 1))


def percentile(values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile of a sorted copy of *values*.

    Args:
        values: Observations (not modified)
        p: Percentile in [0, 100]

    Returns:
        Interpolated value, or 0 for an empty series
    """
    if len(values) == 0:
        return 0.0

    p = min(max(p, 0.0), 100.0)
    ordered = np.sort(np.asarray(values, dtype=float))
    index = (p / 100.0) * (len(ordered) - 1)
    lower = int(np.floor(index))
    upper = int(np.ceil(index))
    if lower == upper:
        return float(ordered[lower])
    return float(ordered[lower] + (ordered[upper] - ordered[lower]) * (index - lower))
