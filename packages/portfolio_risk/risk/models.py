"""Pydantic models for the risk engine's inputs and results.

Attributes are snake_case; every model serializes with camelCase aliases
(``model_dump(by_alias=True)``) so results can be handed straight to the
presentation layer.  Either spelling is accepted on construction.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RiskModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class ReturnPoint(RiskModel):
    """One period of portfolio/benchmark history.

    Values are indexed levels (base 100); returns and alpha are in percent.
    A ``None`` return marks a period excluded from every statistic.
    """

    date: dt.date
    portfolio_value: float
    benchmark_value: float
    portfolio_return: float | None = None
    benchmark_return: float | None = None
    alpha: float | None = None

    @model_validator(mode="after")
    def _derive_alpha(self) -> "ReturnPoint":
        if self.alpha is None and self.is_valid:
            self.alpha = self.portfolio_return - self.benchmark_return
        return self

    @property
    def is_valid(self) -> bool:
        return self.portfolio_return is not None and self.benchmark_return is not None


class Factor(str, Enum):
    """Risk factors tracked by the factor model, in reporting order."""

    VALUE = "value"
    GROWTH = "growth"
    QUALITY = "quality"
    MOMENTUM = "momentum"
    SIZE = "size"
    VOLATILITY = "volatility"
    DEBT = "debt"
    SENTIMENT = "sentiment"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class FactorExposure(RiskModel):
    """Factor scores in standard-deviation units versus the reference universe."""

    value: float = 0.0
    growth: float = 0.0
    quality: float = 0.0
    debt: float = 0.0
    volatility: float = 0.0
    momentum: float = 0.0
    size: float = 0.0
    sentiment: float = 0.0
    mfm_score: float = 0.0  # Composite score, not a risk factor

    def get(self, factor: Factor) -> float:
        return getattr(self, factor.value)


# Fields averaged when aggregating exposures across holdings
EXPOSURE_FIELDS = tuple(FactorExposure.model_fields)


class FactorHolding(RiskModel):
    """A single holding with weights as decimal fractions."""

    ticker: str
    company: str = ""
    sector: str = "Unknown"
    country: str = "Unknown"
    region: str = "Unknown"
    portfolio_weight: float = 0.0
    benchmark_weight: float = 0.0
    active_weight: float | None = None
    factors: FactorExposure = Field(default_factory=FactorExposure)

    @model_validator(mode="after")
    def _derive_active_weight(self) -> "FactorHolding":
        if self.active_weight is None:
            self.active_weight = self.portfolio_weight - self.benchmark_weight
        return self


class SectorFactorProfile(RiskModel):
    sector: str
    count: int
    total_weight: float
    factors: FactorExposure


class FactorData(RiskModel):
    """Holdings snapshot plus its portfolio- and benchmark-weighted exposures."""

    as_of_date: dt.date | None = None
    holdings: list[FactorHolding] = Field(default_factory=list)
    portfolio_averages: FactorExposure = Field(default_factory=FactorExposure)
    benchmark_averages: FactorExposure = Field(default_factory=FactorExposure)
    sector_factors: list[SectorFactorProfile] = Field(default_factory=list)


class StressScenario(RiskModel):
    """Named historical crisis window.

    ``benchmark_return`` is a decimal historical estimate used only when the
    return series does not cover the window.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    start_date: dt.date
    end_date: dt.date
    benchmark_return: float


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class RollingMetricPoint(RiskModel):
    date: dt.date | None = None
    value: float


class DrawdownPoint(RiskModel):
    date: dt.date | None = None
    drawdown: float
    peak: float
    value: float


class MaxDrawdown(RiskModel):
    """Worst peak-to-trough decline (decimal) and where it happened."""

    value: float = 0.0
    peak_index: int = 0
    trough_index: int = 0
    peak_date: dt.date | None = None
    trough_date: dt.date | None = None
    peak_value: float = 0.0
    trough_value: float = 0.0


class HistogramBin(RiskModel):
    """Return histogram bin; bounds in percent, flags mark the VaR thresholds."""

    bin_start: float
    bin_end: float
    count: int
    is_var95: bool = False
    is_var99: bool = False


class RiskMetrics(RiskModel):
    """Return-series risk metrics.

    VaR/CVaR are loss magnitudes in percent (positive = loss).  Drawdowns,
    volatilities and tracking error are percent; ratios and beta are unitless;
    ``drawdown_duration`` is in periods.
    """

    var95: float = 0.0
    var99: float = 0.0
    cvar95: float = 0.0
    parametric_var95: float = 0.0

    max_drawdown: float = 0.0
    max_drawdown_date: dt.date | None = None
    max_drawdown_peak_date: dt.date | None = None
    max_drawdown_trough_date: dt.date | None = None
    drawdown_duration: int = 0
    current_drawdown: float = 0.0

    beta: float = 1.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    information_ratio: float = 0.0
    calmar_ratio: float = 0.0

    annualized_volatility: float = 0.0
    downside_volatility: float = 0.0
    tracking_error: float = 0.0

    rolling_var: list[RollingMetricPoint] = Field(default_factory=list)
    rolling_beta: list[RollingMetricPoint] = Field(default_factory=list)
    rolling_drawdown: list[DrawdownPoint] = Field(default_factory=list)
    rolling_sharpe: list[RollingMetricPoint] = Field(default_factory=list)
    return_histogram: list[HistogramBin] = Field(default_factory=list)


class FactorRiskContribution(RiskModel):
    """Per-factor risk; volatility and contribution in percent."""

    name: str
    exposure: float
    active_exposure: float
    volatility: float
    contribution: float
    percent_of_risk: float = 0.0


class FactorRiskDecomposition(RiskModel):
    factors: list[FactorRiskContribution] = Field(default_factory=list)
    systematic_risk: float = 0.0
    idiosyncratic_risk: float = 0.0
    total_risk: float = 0.0
    systematic_percent: float = 0.0
    idiosyncratic_percent: float = 0.0


class SectorConcentration(RiskModel):
    sector: str
    portfolio_weight: float
    benchmark_weight: float
    active_weight: float
    stock_count: int


class CountryConcentration(RiskModel):
    country: str
    portfolio_weight: float
    benchmark_weight: float
    active_weight: float
    stock_count: int


class ConcentrationMetrics(RiskModel):
    """Holdings concentration; weights in percent, ``hhi`` on the 0-10000 scale."""

    hhi: float = 0.0
    effective_stocks: float = 0.0
    top5_weight: float = 0.0
    top10_weight: float = 0.0
    max_stock_weight: float = 0.0
    max_stock_ticker: str = ""
    max_sector_weight: float = 0.0
    max_sector_name: str = ""
    max_country_weight: float = 0.0
    max_country_name: str = ""
    max_region_weight: float = 0.0
    max_region_name: str = ""
    active_share: float = 0.0
    sector_concentration: list[SectorConcentration] = Field(default_factory=list)
    country_concentration: list[CountryConcentration] = Field(default_factory=list)


class StressTestResult(RiskModel):
    """Outcome of one scenario; returns and drawdown in percent.

    ``estimated`` results carry no realized window and ``recovery_months``
    is always ``None`` for them.
    """

    scenario: StressScenario
    portfolio_return: float
    benchmark_return: float
    excess_return: float
    max_drawdown: float
    beta: float
    recovery_months: int | None = None
    estimated: bool = False
    window_start: dt.date | None = None
    window_end: dt.date | None = None


class PerformanceSummary(RiskModel):
    total_return: float = 0.0
    total_benchmark_return: float = 0.0
    excess_return: float = 0.0
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    periods: int = 0


class SeriesQuality(RiskModel):
    total_points: int = 0
    valid_points: int = 0
    null_return_points: int = 0
    duplicate_dates: int = 0
    out_of_order_dates: int = 0
    outlier_returns: int = 0
    flat_streaks: int = 0
    first_date: dt.date | None = None
    last_date: dt.date | None = None


class PortfolioRiskReport(RiskModel):
    risk_metrics: RiskMetrics
    factor_risk: FactorRiskDecomposition | None = None
    concentration: ConcentrationMetrics | None = None
    stress_tests: list[StressTestResult] = Field(default_factory=list)
    performance: PerformanceSummary = Field(default_factory=PerformanceSummary)
    data_quality: SeriesQuality = Field(default_factory=SeriesQuality)
