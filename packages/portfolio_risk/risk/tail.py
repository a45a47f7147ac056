"""
Tail-Risk Module

Historical Value-at-Risk, Expected Shortfall and the return histogram used to
plot them, plus a Gaussian VaR for comparison.

Sign convention: VaR and CVaR are loss magnitudes. A positive value is a
loss; the result is only negative when even the tail quantile is a gain.
Inputs are decimal period returns.
"""

from typing import List, Sequence

import numpy as np
import structlog
from scipy import stats

from .models import HistogramBin
from .stats import mean, percentile, std_dev

logger = structlog.get_logger(__name__)


def _check_confidence(confidence: float) -> None:
    if not 0 < confidence < 1:
        raise ValueError(f"Confidence must be between 0 and 1, got {confidence}")


def value_at_risk(returns: Sequence[float], confidence: float = 0.95) -> float:
    """Historical VaR: the loss at the (1 - confidence) return percentile.

    Args:
        returns: Decimal period returns
        confidence: Confidence level (e.g., 0.95 for 95% VaR)

    Returns:
        VaR as a loss magnitude (0 for an empty series)
    """
    _check_confidence(confidence)
    return -percentile(returns, 100.0 * (1.0 - confidence))


def conditional_value_at_risk(returns: Sequence[float], confidence: float = 0.95) -> float:
    """Expected Shortfall: mean loss of the returns strictly beyond VaR.

    Falls back to VaR itself when no return lies beyond the threshold, so
    CVaR >= VaR always holds.
    """
    var = value_at_risk(returns, confidence)
    tail = [r for r in returns if r < -var]
    if not tail:
        return var
    return -mean(tail)


def parametric_var(returns: Sequence[float], confidence: float = 0.95) -> float:
    """Gaussian VaR from the sample mean and standard deviation.

    VaR = -(mu + z * sigma), z = norm.ppf(1 - confidence)

    Returns:
        VaR as a loss magnitude, 0 for fewer than 2 observations
    """
    _check_confidence(confidence)
    if len(returns) < 2:
        return 0.0

    z_score = stats.norm.ppf(1 - confidence)  # e.g., -1.645 for 95% confidence
    return float(-(mean(returns) + z_score * std_dev(returns)))


def var_histogram(returns: Sequence[float], bins: int = 20) -> List[HistogramBin]:
    """Equal-width histogram of returns with the 95%/99% VaR bins flagged.

    Bins span [min, max] and are half-open ``[bin_start, bin_end)`` except the
    last, which is closed so the maximum return is counted. A VaR flag is set
    on the bin whose bounds contain the threshold return (-VaR). Bounds are
    reported in percent.

    Args:
        returns: Decimal period returns
        bins: Number of bins

    Returns:
        List of HistogramBin (empty for an empty series)
    """
    if bins < 1:
        raise ValueError(f"Bins must be >= 1, got {bins}")

    if len(returns) == 0:
        logger.warning("var_histogram: empty return series")
        return []

    data = np.asarray(returns, dtype=float)
    threshold_95 = -value_at_risk(returns, 0.95)
    threshold_99 = -value_at_risk(returns, 0.99)

    low = float(data.min())
    high = float(data.max())

    if high == low:
        # Every return identical: one zero-width bin holding everything
        return [
            HistogramBin(
                bin_start=low * 100,
                bin_end=high * 100,
                count=len(data),
                is_var95=threshold_95 == low,
                is_var99=threshold_99 == low,
            )
        ]

    edges = low + (high - low) / bins * np.arange(bins + 1)
    edges[-1] = high

    histogram = []
    for i in range(bins):
        start = float(edges[i])
        end = float(edges[i + 1])
        last = i == bins - 1

        def _inside(x: float) -> bool:
            return start <= x < end or (last and x == end)

        in_bin = (data >= start) & ((data <= end) if last else (data < end))
        histogram.append(
            HistogramBin(
                bin_start=start * 100,
                bin_end=end * 100,
                count=int(in_bin.sum()),
                is_var95=_inside(threshold_95),
                is_var99=_inside(threshold_99),
            )
        )

    return histogram
