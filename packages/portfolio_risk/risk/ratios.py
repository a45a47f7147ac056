"""
Risk-Adjusted Return Module

Beta and the Sharpe, Sortino, Information and Calmar ratios for decimal
period returns. Means are annualized linearly (x periods_per_year) and
volatilities by sqrt(periods_per_year); the default of 12 assumes monthly data.
Every ratio is zero-guarded instead of raising.
"""

from typing import List, Optional, Sequence

import numpy as np
import structlog

from .stats import check_paired, covariance, mean, std_dev, variance

logger = structlog.get_logger(__name__)

PERIODS_PER_YEAR = 12


def _check_periods(periods_per_year: int) -> None:
    if periods_per_year < 1:
        raise ValueError(f"periods_per_year must be >= 1, got {periods_per_year}")


def active_returns(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
) -> List[float]:
    """Period-by-period portfolio minus benchmark returns."""
    return [p - b for p, b in zip(portfolio_returns, benchmark_returns)]


def annualized_volatility(returns: Sequence[float], periods_per_year: int = PERIODS_PER_YEAR) -> float:
    """Sample standard deviation scaled by sqrt(periods_per_year)."""
    _check_periods(periods_per_year)
    return std_dev(returns) * float(np.sqrt(periods_per_year))


def downside_volatility(returns: Sequence[float], periods_per_year: int = PERIODS_PER_YEAR) -> float:
    """Annualized standard deviation of the negative returns only."""
    return annualized_volatility([r for r in returns if r < 0], periods_per_year)


def tracking_error(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
    periods_per_year: int = PERIODS_PER_YEAR,
    strict: Optional[bool] = None,
) -> float:
    """Annualized standard deviation of active returns; 0 on length mismatch."""
    if not check_paired("tracking_error", portfolio_returns, benchmark_returns, strict):
        return 0.0
    return annualized_volatility(active_returns(portfolio_returns, benchmark_returns), periods_per_year)


def beta(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
    strict: Optional[bool] = None,
) -> float:
    """Beta = cov(portfolio, benchmark) / var(benchmark).

    Defaults to 1 (market-like) on length mismatch or zero benchmark variance.
    ``strict`` overrides RISK_STRICT_INPUTS for the length check.
    """
    if not check_paired("beta", portfolio_returns, benchmark_returns, strict):
        return 1.0

    bench_var = variance(benchmark_returns)
    if bench_var <= 0:
        return 1.0
    return covariance(portfolio_returns, benchmark_returns, strict) / bench_var


def sharpe_ratio(
    returns: Sequence[float],
    risk_free_rate: float = 0.0,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualized Sharpe ratio.

    Args:
        returns: Decimal period returns
        risk_free_rate: Annual risk-free rate (decimal), de-annualized linearly
        periods_per_year: Annualization factor

    Returns:
        mean(excess) * N / (std * sqrt(N)), or 0 when volatility is 0
    """
    _check_periods(periods_per_year)
    vol = std_dev(returns)
    if vol == 0:
        return 0.0

    period_rf = risk_free_rate / periods_per_year
    mean_excess = mean([r - period_rf for r in returns])
    return float((mean_excess * periods_per_year) / (vol * np.sqrt(periods_per_year)))


def sortino_ratio(
    returns: Sequence[float],
    risk_free_rate: float = 0.0,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualized Sortino ratio using the deviation of negative returns.

    With no negative returns the ratio is +inf for a positive mean excess
    return and 0 otherwise. A single negative return (zero deviation) gives 0.
    """
    _check_periods(periods_per_year)
    period_rf = risk_free_rate / periods_per_year
    mean_excess = mean([r - period_rf for r in returns])

    negatives = [r for r in returns if r < 0]
    if not negatives:
        return float("inf") if mean_excess > 0 else 0.0

    downside = std_dev(negatives)
    if downside == 0:
        return 0.0
    return float((mean_excess * periods_per_year) / (downside * np.sqrt(periods_per_year)))


def information_ratio(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
    periods_per_year: int = PERIODS_PER_YEAR,
    strict: Optional[bool] = None,
) -> float:
    """Annualized active return over tracking error; 0 on mismatch or zero TE."""
    _check_periods(periods_per_year)
    if not check_paired("information_ratio", portfolio_returns, benchmark_returns, strict):
        return 0.0

    active = active_returns(portfolio_returns, benchmark_returns)
    te = std_dev(active)
    if te == 0:
        return 0.0
    return float((mean(active) * periods_per_year) / (te * np.sqrt(periods_per_year)))


def calmar_ratio(
    returns: Sequence[float],
    max_drawdown: float,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualized mean return divided by max drawdown (decimal); 0 if no drawdown."""
    _check_periods(periods_per_year)
    if max_drawdown == 0:
        return 0.0
    return (mean(returns) * periods_per_year) / max_drawdown
