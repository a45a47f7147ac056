"""Risk engine entry points.

Assembles the component modules into the result structures handed to the
presentation layer. Every entry point is a pure function of its inputs (and
the configuration it is given); nothing is cached between calls.
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog

from portfolio_risk.config import Settings, get_settings

from .concentration import concentration_metrics
from .data_quality import compute_series_quality, generate_warnings
from .drawdown import drawdown_duration, drawdown_series, max_drawdown
from .factors import decompose_factor_risk
from .models import (
    ConcentrationMetrics,
    DrawdownPoint,
    FactorData,
    FactorHolding,
    FactorRiskDecomposition,
    PortfolioRiskReport,
    ReturnPoint,
    RiskMetrics,
    RollingMetricPoint,
    StressScenario,
)
from .performance import performance_summary
from .ratios import (
    annualized_volatility,
    beta,
    calmar_ratio,
    downside_volatility,
    information_ratio,
    sharpe_ratio,
    sortino_ratio,
    tracking_error,
)
from .rolling import rolling_beta, rolling_sharpe, rolling_var
from .stress import run_stress_tests
from .tail import conditional_value_at_risk, parametric_var, value_at_risk, var_histogram

logger = structlog.get_logger(__name__)


def compute_core_risk_metrics(
    return_series: Sequence[ReturnPoint],
    settings: Optional[Settings] = None,
) -> RiskMetrics:
    """Compute VaR, drawdown, ratio, volatility and rolling metrics.

    Points with a null return are excluded before anything is computed.
    Returns in the series are percent; they are converted to decimals for
    the calculations and the results are reported back in percent (ratios,
    beta and drawdown duration are unitless).

    Args:
        return_series: Chronological ReturnPoint records
        settings: Engine settings (read from the environment when omitted)

    Returns:
        RiskMetrics; zero-valued (beta 1) for an empty series
    """
    settings = settings or get_settings()
    periods = settings.PERIODS_PER_YEAR
    window = settings.ROLLING_WINDOW
    rf = settings.RISK_FREE_RATE
    strict = settings.STRICT_INPUTS

    points = [p for p in return_series if p.is_valid]
    if not points:
        logger.warning(
            "compute_core_risk_metrics: no valid return points",
            total_points=len(return_series),
        )

    dates = [p.date for p in points]
    portfolio_returns = [p.portfolio_return / 100 for p in points]
    benchmark_returns = [p.benchmark_return / 100 for p in points]
    values = [p.portfolio_value for p in points]

    drawdowns = drawdown_series(values, dates)
    worst = max_drawdown(values, dates)

    metrics = RiskMetrics(
        var95=value_at_risk(portfolio_returns, 0.95) * 100,
        var99=value_at_risk(portfolio_returns, 0.99) * 100,
        cvar95=conditional_value_at_risk(portfolio_returns, 0.95) * 100,
        parametric_var95=parametric_var(portfolio_returns, 0.95) * 100,
        max_drawdown=worst.value * 100,
        max_drawdown_date=worst.trough_date,
        max_drawdown_peak_date=worst.peak_date,
        max_drawdown_trough_date=worst.trough_date,
        drawdown_duration=drawdown_duration(values, dates),
        current_drawdown=drawdowns[-1].drawdown * 100 if drawdowns else 0.0,
        beta=beta(portfolio_returns, benchmark_returns, strict),
        sharpe_ratio=sharpe_ratio(portfolio_returns, rf, periods),
        sortino_ratio=sortino_ratio(portfolio_returns, rf, periods),
        information_ratio=information_ratio(portfolio_returns, benchmark_returns, periods, strict),
        calmar_ratio=calmar_ratio(portfolio_returns, worst.value, periods),
        annualized_volatility=annualized_volatility(portfolio_returns, periods) * 100,
        downside_volatility=downside_volatility(portfolio_returns, periods) * 100,
        tracking_error=tracking_error(portfolio_returns, benchmark_returns, periods, strict) * 100,
        rolling_var=[
            RollingMetricPoint(date=r.date, value=r.value * 100)
            for r in rolling_var(portfolio_returns, dates, window, 0.95)
        ],
        rolling_beta=rolling_beta(portfolio_returns, benchmark_returns, dates, window, strict),
        rolling_drawdown=[
            DrawdownPoint(date=d.date, drawdown=d.drawdown * 100, peak=d.peak, value=d.value)
            for d in drawdowns
        ],
        rolling_sharpe=rolling_sharpe(portfolio_returns, dates, window, rf, periods),
        return_histogram=var_histogram(portfolio_returns, settings.HISTOGRAM_BINS),
    )

    logger.info(
        "compute_core_risk_metrics: metrics computed",
        num_points=len(points),
        var95=metrics.var95,
        max_drawdown=metrics.max_drawdown,
        sharpe_ratio=metrics.sharpe_ratio,
        beta=metrics.beta,
    )

    return metrics


def compute_factor_risk(
    factor_data: FactorData,
    portfolio_volatility: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> FactorRiskDecomposition:
    """Factor risk decomposition of a holdings snapshot.

    Args:
        factor_data: Snapshot with portfolio and benchmark factor averages
        portfolio_volatility: Annualized total volatility (decimal); the
            configured default is used when omitted

    Returns:
        FactorRiskDecomposition (percent units)
    """
    if portfolio_volatility is None:
        portfolio_volatility = (settings or get_settings()).DEFAULT_PORTFOLIO_VOLATILITY

    decomposition = decompose_factor_risk(
        factor_data.portfolio_averages,
        factor_data.benchmark_averages,
        portfolio_volatility,
    )

    logger.info(
        "compute_factor_risk: decomposition computed",
        total_volatility=portfolio_volatility,
        systematic_percent=decomposition.systematic_percent,
        top_factor=decomposition.factors[0].name if decomposition.factors else None,
    )

    return decomposition


def compute_concentration_risk(holdings: Sequence[FactorHolding]) -> ConcentrationMetrics:
    """Concentration metrics of a holdings snapshot."""
    return concentration_metrics(holdings)


def analyze_portfolio(
    return_series: Sequence[ReturnPoint],
    factor_data: Optional[FactorData] = None,
    scenarios: Optional[Sequence[StressScenario]] = None,
    settings: Optional[Settings] = None,
) -> PortfolioRiskReport:
    """Run every engine component and bundle the results.

    Factor risk uses the series' realized annualized volatility when the
    series has usable returns, else the configured default. Factor and
    concentration results are None when no factor data is given.
    """
    settings = settings or get_settings()

    quality = compute_series_quality(return_series)
    for warning in generate_warnings(quality, settings.ROLLING_WINDOW):
        logger.warning(
            "analyze_portfolio: data quality issue",
            level_hint=warning["level"],
            detail=warning["message"],
        )

    risk_metrics = compute_core_risk_metrics(return_series, settings)

    factor_risk = None
    concentration = None
    if factor_data is not None:
        volatility = (
            risk_metrics.annualized_volatility / 100
            if risk_metrics.annualized_volatility > 0
            else settings.DEFAULT_PORTFOLIO_VOLATILITY
        )
        factor_risk = compute_factor_risk(factor_data, volatility, settings)
        concentration = compute_concentration_risk(factor_data.holdings)

    report = PortfolioRiskReport(
        risk_metrics=risk_metrics,
        factor_risk=factor_risk,
        concentration=concentration,
        stress_tests=run_stress_tests(return_series, scenarios, settings.STRICT_INPUTS),
        performance=performance_summary(return_series),
        data_quality=quality,
    )

    logger.info(
        "analyze_portfolio: report built",
        num_points=quality.total_points,
        num_scenarios=len(report.stress_tests),
        has_factor_data=factor_data is not None,
    )

    return report
