"""
Portfolio Risk Analytics Engine

Deterministic risk analytics over a portfolio/benchmark return series and a
factor-tagged holdings snapshot. Pure computation modules operating on plain
sequences, numpy arrays and pandas DataFrames; no I/O.

Modules:
- models: Pydantic input and result records
- stats: Mean, variance, covariance, percentile
- tail: Historical and parametric VaR, Expected Shortfall, return histogram
- drawdown: Drawdown series, maximum drawdown, drawdown duration
- ratios: Beta, Sharpe, Sortino, Information and Calmar ratios
- rolling: Fixed-window rolling metrics
- factors: Factor risk decomposition and weighted factor profiles
- concentration: HHI, top-N weight, sector/country aggregation, active share
- stress: Historical scenario replay with beta-based estimation
- performance: Indexed return series construction and rolling performance
- data_quality: Return-series data quality checks
- engine: Top-level entry points
"""

# Models
from .models import (
    ConcentrationMetrics,
    Factor,
    FactorData,
    FactorExposure,
    FactorHolding,
    FactorRiskDecomposition,
    PortfolioRiskReport,
    ReturnPoint,
    RiskMetrics,
    StressScenario,
    StressTestResult,
)

# Statistics kernel
from .stats import (
    SeriesLengthMismatchError,
    mean,
    variance,
    std_dev,
    covariance,
    percentile,
)

# Tail risk
from .tail import (
    value_at_risk,
    conditional_value_at_risk,
    parametric_var,
    var_histogram,
)

# Drawdown
from .drawdown import (
    drawdown_series,
    max_drawdown,
    drawdown_duration,
)

# Risk-adjusted returns
from .ratios import (
    beta,
    sharpe_ratio,
    sortino_ratio,
    information_ratio,
    calmar_ratio,
    tracking_error,
)

# Rolling metrics
from .rolling import (
    rolling_metric,
    rolling_beta,
    rolling_sharpe,
    rolling_var,
)

# Factor risk
from .factors import (
    decompose_factor_risk,
    weighted_factor_averages,
    sector_factor_profile,
    build_factor_data,
    FACTOR_VOLATILITIES,
)

# Concentration
from .concentration import concentration_metrics

# Stress testing
from .stress import (
    run_stress_tests,
    get_scenario,
    STRESS_SCENARIOS,
    SCENARIO_CATALOGUE_VERSION,
)

# Performance series
from .performance import (
    build_return_series,
    return_series_from_frame,
    return_series_to_frame,
    performance_summary,
    rolling_alpha,
    rolling_volatility,
    rolling_tracking_error,
)

# Data quality
from .data_quality import compute_series_quality, generate_warnings

# Entry points
from .engine import (
    compute_core_risk_metrics,
    compute_factor_risk,
    compute_concentration_risk,
    analyze_portfolio,
)

__all__ = [
    # Models
    'ConcentrationMetrics',
    'Factor',
    'FactorData',
    'FactorExposure',
    'FactorHolding',
    'FactorRiskDecomposition',
    'PortfolioRiskReport',
    'ReturnPoint',
    'RiskMetrics',
    'StressScenario',
    'StressTestResult',
    # Statistics kernel
    'SeriesLengthMismatchError',
    'mean',
    'variance',
    'std_dev',
    'covariance',
    'percentile',
    # Tail risk
    'value_at_risk',
    'conditional_value_at_risk',
    'parametric_var',
    'var_histogram',
    # Drawdown
    'drawdown_series',
    'max_drawdown',
    'drawdown_duration',
    # Risk-adjusted returns
    'beta',
    'sharpe_ratio',
    'sortino_ratio',
    'information_ratio',
    'calmar_ratio',
    'tracking_error',
    # Rolling metrics
    'rolling_metric',
    'rolling_beta',
    'rolling_sharpe',
    'rolling_var',
    # Factor risk
    'decompose_factor_risk',
    'weighted_factor_averages',
    'sector_factor_profile',
    'build_factor_data',
    'FACTOR_VOLATILITIES',
    # Concentration
    'concentration_metrics',
    # Stress testing
    'run_stress_tests',
    'get_scenario',
    'STRESS_SCENARIOS',
    'SCENARIO_CATALOGUE_VERSION',
    # Performance series
    'build_return_series',
    'return_series_from_frame',
    'return_series_to_frame',
    'performance_summary',
    'rolling_alpha',
    'rolling_volatility',
    'rolling_tracking_error',
    # Data quality
    'compute_series_quality',
    'generate_warnings',
    # Entry points
    'compute_core_risk_metrics',
    'compute_factor_risk',
    'compute_concentration_risk',
    'analyze_portfolio',
]
