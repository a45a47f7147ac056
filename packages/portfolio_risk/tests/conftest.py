"""
Shared test fixtures for the risk engine test suite.

Provides consistent test data across all test modules:
- Synthetic monthly return series (random and hand-computable)
- Factor-tagged holdings snapshots
- Engine settings isolated from the host environment
"""

import datetime as dt

import numpy as np
import pandas as pd
import pytest
import structlog

from portfolio_risk.config import Settings
from portfolio_risk.risk.models import FactorExposure, FactorHolding
from portfolio_risk.risk.performance import build_return_series


def month_starts(start: str, periods: int):
    """List of month-start dates."""
    return [d.date() for d in pd.date_range(start, periods=periods, freq="MS")]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep RISK_* variables from the host out of the tests."""
    for name in list(Settings.model_fields):
        monkeypatch.delenv(f"RISK_{name}", raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_series():
    """60 monthly points (2017-01 .. 2021-12) with a correlated benchmark.

    Returns:
        List[ReturnPoint]: Indexed series starting from 100
    """
    np.random.seed(42)
    n = 60
    benchmark = np.random.normal(0.006, 0.04, n)
    portfolio = 1.1 * benchmark + np.random.normal(0.001, 0.01, n)
    return build_return_series(month_starts("2017-01-01", n), portfolio.tolist(), benchmark.tolist())


@pytest.fixture
def alternating_returns():
    """24 monthly returns alternating +2% / -1% (decimal)."""
    return [0.02 if i % 2 == 0 else -0.01 for i in range(24)]


@pytest.fixture
def alternating_series(alternating_returns):
    """Series whose benchmark is identical to the portfolio."""
    return build_return_series(
        month_starts("2020-01-01", len(alternating_returns)),
        alternating_returns,
        alternating_returns,
    )


@pytest.fixture
def covid_series():
    """Month-end series around the COVID-19 window with a known outcome.

    Jan 2020 level 104.060401 falls 23.5% to Mar 2020 and is regained in May.
    """
    dates = [
        dt.date(2019, 10, 31),
        dt.date(2019, 11, 30),
        dt.date(2019, 12, 31),
        dt.date(2020, 1, 31),
        dt.date(2020, 2, 29),
        dt.date(2020, 3, 31),
        dt.date(2020, 4, 30),
        dt.date(2020, 5, 31),
        dt.date(2020, 6, 30),
    ]
    portfolio = [0.01, 0.01, 0.01, 0.01, -0.10, -0.15, 0.15, 0.15, 0.01]
    benchmark = [0.01, 0.01, 0.01, 0.01, -0.08, -0.12, 0.10, 0.10, 0.01]
    return build_return_series(dates, portfolio, benchmark)


@pytest.fixture
def equal_weight_holdings():
    """10 holdings at 10% each, identical to the benchmark."""
    sectors = ['Technology', 'Financials', 'Healthcare', 'Energy', 'Industrials']
    return [
        FactorHolding(
            ticker=f"STK{i}",
            sector=sectors[i % 5],
            country='US' if i < 6 else 'JP',
            region='North America' if i < 6 else 'Asia',
            portfolio_weight=0.10,
            benchmark_weight=0.10,
        )
        for i in range(10)
    ]


@pytest.fixture
def sample_holdings():
    """Active portfolio of 6 names plus 2 benchmark-only names.

    Portfolio weights sum to 1.0; benchmark weights sum to 1.0.
    """
    rows = [
        # ticker, sector, country, region, pw, bw, value, momentum, mfm
        ('AAPL', 'Technology', 'US', 'North America', 0.30, 0.20, 0.5, 1.0, 1.2),
        ('MSFT', 'Technology', 'US', 'North America', 0.20, 0.20, 0.2, 0.8, 1.0),
        ('JPM', 'Financials', 'US', 'North America', 0.15, 0.10, 1.5, -0.2, 0.6),
        ('SAP', 'Technology', 'DE', 'West Europe', 0.15, 0.10, 0.0, 0.4, 0.4),
        ('TM', 'Consumer', 'JP', 'Asia', 0.12, 0.10, 1.0, -0.5, 0.1),
        ('NVO', 'Healthcare', 'DK', 'West Europe', 0.08, 0.10, -0.5, 1.5, 0.9),
        ('XOM', 'Energy', 'US', 'North America', 0.00, 0.12, 1.2, -1.0, -0.3),
        ('HSBC', 'Financials', 'GB', 'West Europe', 0.00, 0.08, 1.8, -0.4, -0.2),
    ]
    return [
        FactorHolding(
            ticker=ticker,
            sector=sector,
            country=country,
            region=region,
            portfolio_weight=pw,
            benchmark_weight=bw,
            factors=FactorExposure(value=value, momentum=momentum, mfm_score=mfm),
        )
        for ticker, sector, country, region, pw, bw, value, momentum, mfm in rows
    ]
