"""
Performance Series Module

Builds the indexed ReturnPoint series the engine consumes and derives the
summary and rolling performance figures shown alongside the risk metrics.
ReturnPoint returns and alpha are in percent; levels start from a base of 100.
"""

import datetime as dt
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import structlog

from .models import PerformanceSummary, ReturnPoint, RollingMetricPoint
from .ratios import PERIODS_PER_YEAR

logger = structlog.get_logger(__name__)

BASE_VALUE = 100.0

SERIES_COLUMNS = [
    "date",
    "portfolio_value",
    "benchmark_value",
    "portfolio_return",
    "benchmark_return",
    "alpha",
]


def build_return_series(
    dates: Sequence[dt.date],
    portfolio_returns: Sequence[Optional[float]],
    benchmark_returns: Sequence[Optional[float]],
    base_value: float = BASE_VALUE,
) -> List[ReturnPoint]:
    """Compound decimal period returns into an indexed ReturnPoint series.

    A missing (None/NaN) return leaves that side's level unchanged and is
    stored as None, so the period is excluded from statistics downstream.

    Args:
        dates: Period dates in chronological order
        portfolio_returns: Decimal portfolio returns per period
        benchmark_returns: Decimal benchmark returns per period
        base_value: Starting level for both series

    Returns:
        ReturnPoint list with returns and alpha in percent

    Raises:
        ValueError: If the three inputs differ in length
    """
    if not len(dates) == len(portfolio_returns) == len(benchmark_returns):
        raise ValueError(
            f"Length mismatch: {len(dates)} dates, {len(portfolio_returns)} portfolio "
            f"returns, {len(benchmark_returns)} benchmark returns"
        )

    def _clean(r: Optional[float]) -> Optional[float]:
        if r is None or pd.isna(r):
            return None
        return float(r)

    points = []
    portfolio_value = base_value
    benchmark_value = base_value

    for date, p_ret, b_ret in zip(dates, portfolio_returns, benchmark_returns):
        p_ret = _clean(p_ret)
        b_ret = _clean(b_ret)
        if p_ret is not None:
            portfolio_value *= 1 + p_ret
        if b_ret is not None:
            benchmark_value *= 1 + b_ret

        points.append(
            ReturnPoint(
                date=date,
                portfolio_value=portfolio_value,
                benchmark_value=benchmark_value,
                portfolio_return=p_ret * 100 if p_ret is not None else None,
                benchmark_return=b_ret * 100 if b_ret is not None else None,
            )
        )

    logger.info(
        "build_return_series: series built",
        num_points=len(points),
        null_points=sum(1 for p in points if not p.is_valid),
    )

    return points


def return_series_from_frame(frame: pd.DataFrame) -> List[ReturnPoint]:
    """Convert a DataFrame into ReturnPoints.

    Expects a ``date`` column (or a DatetimeIndex) plus ``portfolio_value``,
    ``benchmark_value``, ``portfolio_return`` and ``benchmark_return``
    columns; ``alpha`` is optional. NaN returns become None.
    """
    if frame.empty:
        logger.warning("return_series_from_frame: empty DataFrame provided")
        return []

    df = frame.copy()
    if "date" not in df.columns:
        if not isinstance(df.index, pd.DatetimeIndex):
            raise ValueError("DataFrame needs a 'date' column or a DatetimeIndex")
        df = df.rename_axis("date").reset_index()

    missing = [c for c in SERIES_COLUMNS[1:5] if c not in df.columns]
    if missing:
        raise ValueError(f"DataFrame is missing columns: {missing}")

    df["date"] = pd.to_datetime(df["date"]).dt.date
    df = df.astype(object).where(pd.notna(df), None)

    return [
        ReturnPoint(**{k: v for k, v in row.items() if k in SERIES_COLUMNS})
        for row in df.to_dict(orient="records")
    ]


def return_series_to_frame(series: Sequence[ReturnPoint]) -> pd.DataFrame:
    """ReturnPoints as a DataFrame indexed by date (None returns become NaN)."""
    df = pd.DataFrame([p.model_dump() for p in series], columns=SERIES_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date").astype(float)


def performance_summary(series: Sequence[ReturnPoint]) -> PerformanceSummary:
    """Total and excess return (percent) from the first to the last level."""
    if len(series) == 0:
        return PerformanceSummary()

    first = series[0]
    last = series[-1]

    total = (
        (last.portfolio_value - first.portfolio_value) / first.portfolio_value * 100
        if first.portfolio_value != 0 else 0.0
    )
    total_benchmark = (
        (last.benchmark_value - first.benchmark_value) / first.benchmark_value * 100
        if first.benchmark_value != 0 else 0.0
    )

    return PerformanceSummary(
        total_return=total,
        total_benchmark_return=total_benchmark,
        excess_return=total - total_benchmark,
        start_date=first.date,
        end_date=last.date,
        periods=len(series),
    )


def _to_points(rolled: pd.Series) -> List[RollingMetricPoint]:
    rolled = rolled.dropna()
    return [
        RollingMetricPoint(date=date.date(), value=float(value))
        for date, value in rolled.items()
    ]


def _returns_frame(series: Sequence[ReturnPoint]) -> pd.DataFrame:
    # Null returns count as flat periods in the trailing windows
    return return_series_to_frame(series).fillna(
        {"portfolio_return": 0.0, "benchmark_return": 0.0, "alpha": 0.0}
    )


def rolling_alpha(
    series: Sequence[ReturnPoint],
    window: int = 12,
    years: float = 1.0,
) -> List[RollingMetricPoint]:
    """Trailing sum of alpha (percent) over *window* periods divided by *years*.

    window=12, years=1 gives cumulative one-year alpha; window=36, years=3
    gives annualized three-year alpha.
    """
    if window < 1:
        raise ValueError(f"Window must be >= 1, got {window}")
    if years <= 0:
        raise ValueError(f"Years must be positive, got {years}")
    if len(series) < window:
        return []

    alpha = _returns_frame(series)["alpha"]
    return _to_points(alpha.rolling(window=window, min_periods=window).sum() / years)


def rolling_volatility(
    series: Sequence[ReturnPoint],
    window: int = 12,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> List[RollingMetricPoint]:
    """Annualized population volatility (percent) of portfolio returns per window."""
    if window < 1:
        raise ValueError(f"Window must be >= 1, got {window}")
    if len(series) < window:
        return []

    returns = _returns_frame(series)["portfolio_return"]
    rolled = returns.rolling(window=window, min_periods=window).std(ddof=0) * np.sqrt(periods_per_year)
    return _to_points(rolled)


def rolling_tracking_error(
    series: Sequence[ReturnPoint],
    window: int = 12,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> List[RollingMetricPoint]:
    """Annualized population deviation (percent) of active returns per window."""
    if window < 1:
        raise ValueError(f"Window must be >= 1, got {window}")
    if len(series) < window:
        return []

    frame = _returns_frame(series)
    active = frame["portfolio_return"] - frame["benchmark_return"]
    rolled = active.rolling(window=window, min_periods=window).std(ddof=0) * np.sqrt(periods_per_year)
    return _to_points(rolled)
