"""
Drawdown Module

Peak-to-trough analysis over an indexed value series (e.g., growth of 100).
Drawdowns are decimals: 0.25 means 25% below the running peak.
"""

import datetime as dt
from typing import List, Optional, Sequence

import structlog

from .models import DrawdownPoint, MaxDrawdown

logger = structlog.get_logger(__name__)


def _date_at(dates: Sequence[dt.date], i: int) -> Optional[dt.date]:
    return dates[i] if i < len(dates) else None


def drawdown_series(values: Sequence[float], dates: Sequence[dt.date]) -> List[DrawdownPoint]:
    """Drawdown from the running peak at every point.

    The peak starts at the first value, so the first drawdown is always 0.
    A non-positive peak yields a drawdown of 0.
    """
    points: List[DrawdownPoint] = []
    if len(values) == 0:
        return points

    peak = values[0]
    for i, value in enumerate(values):
        peak = max(peak, value)
        drawdown = (peak - value) / peak if peak > 0 else 0.0
        points.append(
            DrawdownPoint(date=_date_at(dates, i), drawdown=drawdown, peak=peak, value=value)
        )

    return points


def max_drawdown(values: Sequence[float], dates: Sequence[dt.date]) -> MaxDrawdown:
    """Worst drawdown with the peak that preceded its trough.

    The reported peak is the running peak at the moment the worst trough was
    recorded, not any later peak.

    Returns:
        MaxDrawdown (zero-valued for an empty or never-declining series)
    """
    if len(values) == 0:
        return MaxDrawdown()

    worst = 0.0
    peak = values[0]
    peak_idx = 0
    trough_idx = 0
    worst_peak_idx = 0

    for i in range(1, len(values)):
        if values[i] > peak:
            peak = values[i]
            peak_idx = i
        drawdown = (peak - values[i]) / peak if peak > 0 else 0.0
        if drawdown > worst:
            worst = drawdown
            trough_idx = i
            worst_peak_idx = peak_idx

    return MaxDrawdown(
        value=worst,
        peak_index=worst_peak_idx,
        trough_index=trough_idx,
        peak_date=_date_at(dates, worst_peak_idx),
        trough_date=_date_at(dates, trough_idx),
        peak_value=values[worst_peak_idx],
        trough_value=values[trough_idx],
    )


def drawdown_duration(values: Sequence[float], dates: Sequence[dt.date] = ()) -> int:
    """Longest consecutive run of periods spent below the prior peak.

    A value at or above the peak sets a new peak and ends the run. The
    result covers both completed runs and one still in progress.
    """
    if len(values) == 0:
        return 0

    longest = 0
    current = 0
    peak = values[0]

    for value in values[1:]:
        if value >= peak:
            peak = value
            longest = max(longest, current)
            current = 0
        else:
            current += 1

    return max(longest, current)
