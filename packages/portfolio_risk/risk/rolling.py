"""
Rolling Metrics Module

Fixed-window trailing calculations. A window of size w produces one point
per index i >= w - 1, dated at dates[i]; inputs shorter than the window give
an empty list rather than an error.
"""

import datetime as dt
from typing import Callable, List, Optional, Sequence

import numpy as np
import structlog

from .models import RollingMetricPoint
from .ratios import PERIODS_PER_YEAR, beta, sharpe_ratio
from .stats import check_paired
from .tail import value_at_risk

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW = 12


def _check_window(window_size: int) -> None:
    if window_size < 1:
        raise ValueError(f"Window size must be >= 1, got {window_size}")


def _date_at(dates: Sequence[dt.date], i: int):
    return dates[i] if i < len(dates) else None


def rolling_metric(
    values: Sequence[float],
    dates: Sequence[dt.date],
    window_size: int,
    calculator: Callable[[Sequence[float]], float],
) -> List[RollingMetricPoint]:
    """Apply *calculator* to every trailing window of *values*.

    Args:
        values: Input series
        dates: Dates aligned with values
        window_size: Number of periods per window
        calculator: Function mapping a window (list of floats) to a number

    Returns:
        len(values) - window_size + 1 points, or [] when the series is shorter
    """
    _check_window(window_size)
    if len(values) < window_size:
        return []

    windows = np.lib.stride_tricks.sliding_window_view(np.asarray(values, dtype=float), window_size)
    return [
        RollingMetricPoint(
            date=_date_at(dates, i + window_size - 1),
            value=calculator(window.tolist()),
        )
        for i, window in enumerate(windows)
    ]


def rolling_beta(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
    dates: Sequence[dt.date],
    window_size: int = DEFAULT_WINDOW,
    strict: Optional[bool] = None,
) -> List[RollingMetricPoint]:
    """Beta over each trailing window of paired returns; [] on length mismatch."""
    _check_window(window_size)
    if not check_paired("rolling_beta", portfolio_returns, benchmark_returns, strict):
        return []

    result = []
    for i in range(window_size - 1, len(portfolio_returns)):
        start = i - window_size + 1
        result.append(
            RollingMetricPoint(
                date=_date_at(dates, i),
                value=beta(portfolio_returns[start:i + 1], benchmark_returns[start:i + 1], strict),
            )
        )
    return result


def rolling_sharpe(
    returns: Sequence[float],
    dates: Sequence[dt.date],
    window_size: int = DEFAULT_WINDOW,
    risk_free_rate: float = 0.0,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> List[RollingMetricPoint]:
    """Annualized Sharpe ratio over each trailing window."""
    return rolling_metric(
        returns,
        dates,
        window_size,
        lambda window: sharpe_ratio(window, risk_free_rate, periods_per_year),
    )


def rolling_var(
    returns: Sequence[float],
    dates: Sequence[dt.date],
    window_size: int = DEFAULT_WINDOW,
    confidence: float = 0.95,
) -> List[RollingMetricPoint]:
    """Historical VaR (loss magnitude, decimal) over each trailing window."""
    return rolling_metric(
        returns,
        dates,
        window_size,
        lambda window: value_at_risk(window, confidence),
    )
