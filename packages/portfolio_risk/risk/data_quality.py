"""Data quality checks for return series.

Upstream series come from spreadsheet uploads and are often sparse. These
checks count the artifacts that silently change the risk numbers (null
returns, duplicate or unordered dates, outliers, flat streaks) so callers
can surface them next to the results. Nothing here rejects input.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import structlog

from .models import ReturnPoint, SeriesQuality

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Warning thresholds
# ---------------------------------------------------------------------------

OUTLIER_RETURN_THRESHOLD = 30.0       # |return| > 30% (percent units) flagged
FLAT_STREAK_THRESHOLD = 5             # >=5 periods of zero return flagged
WARN_NULL_RETURN_PCT = 10.0           # Warn if >10% of points have null returns
MIN_PERIODS_FOR_ROLLING = 12          # Default rolling window


def compute_series_quality(series: Sequence[ReturnPoint]) -> SeriesQuality:
    """Count data-quality artifacts in a return series."""
    if len(series) == 0:
        return SeriesQuality()

    valid = [p for p in series if p.is_valid]

    seen = set()
    duplicate_dates = 0
    out_of_order = 0
    for i, point in enumerate(series):
        if point.date in seen:
            duplicate_dates += 1
        seen.add(point.date)
        if i > 0 and point.date < series[i - 1].date:
            out_of_order += 1

    outliers = sum(1 for p in valid if abs(p.portfolio_return) > OUTLIER_RETURN_THRESHOLD)

    flat_streaks = 0
    streak = 0
    for p in valid:
        if abs(p.portfolio_return) < 1e-8:  # essentially zero return
            streak += 1
            if streak >= FLAT_STREAK_THRESHOLD:
                flat_streaks += 1
                streak = 0
        else:
            streak = 0

    return SeriesQuality(
        total_points=len(series),
        valid_points=len(valid),
        null_return_points=len(series) - len(valid),
        duplicate_dates=duplicate_dates,
        out_of_order_dates=out_of_order,
        outlier_returns=outliers,
        flat_streaks=flat_streaks,
        first_date=series[0].date,
        last_date=series[-1].date,
    )


def generate_warnings(
    quality: SeriesQuality,
    rolling_window: int = MIN_PERIODS_FOR_ROLLING,
) -> List[Dict[str, str]]:
    """Generate warning banners based on thresholds.

    Args:
        quality: Output of compute_series_quality
        rolling_window: Window the rolling metrics will use; fewer usable
            periods than this leaves the rolling series empty

    Returns:
        List of {level: 'info'|'warning'|'error', message: str}
    """
    warnings = []

    if quality.total_points == 0:
        warnings.append({
            "level": "error",
            "message": "Return series is empty; all risk metrics default to zero",
        })
        return warnings

    null_pct = quality.null_return_points / quality.total_points * 100
    if null_pct > WARN_NULL_RETURN_PCT:
        warnings.append({
            "level": "warning",
            "message": f"{null_pct:.1f}% of periods have missing returns and are excluded",
        })

    if quality.out_of_order_dates > 0 or quality.duplicate_dates > 0:
        warnings.append({
            "level": "error",
            "message": (
                f"Dates are not strictly increasing ({quality.out_of_order_dates} out of order, "
                f"{quality.duplicate_dates} duplicated)"
            ),
        })

    if quality.valid_points < rolling_window:
        warnings.append({
            "level": "warning",
            "message": (
                f"Only {quality.valid_points} usable periods; rolling metrics need "
                f"{rolling_window}"
            ),
        })

    if quality.outlier_returns > 0:
        warnings.append({
            "level": "info",
            "message": (
                f"{quality.outlier_returns} outlier return periods detected "
                f"(|return| > {OUTLIER_RETURN_THRESHOLD:.0f}%)"
            ),
        })

    if quality.flat_streaks > 0:
        warnings.append({
            "level": "info",
            "message": f"{quality.flat_streaks} flat-return streaks detected",
        })

    return warnings
