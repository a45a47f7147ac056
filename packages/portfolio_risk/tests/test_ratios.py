"""
Unit tests for ratios.py - Risk-Adjusted Return Module

Tests cover:
- Beta and its market-like default
- Sharpe, Sortino, Information and Calmar ratios
- Annualized, downside and tracking volatility
"""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose

from portfolio_risk.risk.ratios import (
    active_returns,
    annualized_volatility,
    beta,
    calmar_ratio,
    downside_volatility,
    information_ratio,
    sharpe_ratio,
    sortino_ratio,
    tracking_error,
)


@pytest.fixture
def paired_returns():
    """Portfolio with a true beta of 1.5 to its benchmark."""
    np.random.seed(3)
    benchmark = np.random.normal(0.005, 0.04, 240)
    portfolio = 1.5 * benchmark + np.random.normal(0, 0.002, 240)
    return portfolio.tolist(), benchmark.tolist()


class TestBeta:
    """Tests for beta function."""

    def test_identical_series_is_one(self, alternating_returns):
        assert_allclose(beta(alternating_returns, alternating_returns), 1.0, rtol=1e-12)

    def test_recovers_true_beta(self, paired_returns):
        portfolio, benchmark = paired_returns

        assert_allclose(beta(portfolio, benchmark), 1.5, atol=0.02)

    def test_matches_cov_over_var(self, paired_returns):
        portfolio, benchmark = paired_returns
        expected = np.cov(portfolio, benchmark, ddof=1)[0, 1] / np.var(benchmark, ddof=1)

        assert_allclose(beta(portfolio, benchmark), expected, rtol=1e-10)

    def test_flat_benchmark_defaults_to_one(self):
        assert beta([0.01, 0.02, -0.01], [0.5, 0.5, 0.5]) == 1.0

    def test_length_mismatch_defaults_to_one(self):
        assert beta([0.01, 0.02, -0.01], [0.01, 0.02]) == 1.0

    def test_strict_mismatch_raises(self):
        with pytest.raises(ValueError, match="beta"):
            beta([0.01, 0.02, -0.01], [0.01, 0.02], strict=True)


class TestSharpeRatio:
    """Tests for sharpe_ratio function."""

    def test_alternating_returns(self, alternating_returns):
        """+2% / -1% alternating: mean 0.5%, hand-computed sample std."""
        std = math.sqrt(24 * 0.015 ** 2 / 23)
        expected = 0.005 * 12 / (std * math.sqrt(12))

        assert_allclose(sharpe_ratio(alternating_returns), expected, atol=1e-6)

    def test_risk_free_rate_lowers_ratio(self, alternating_returns):
        assert sharpe_ratio(alternating_returns, 0.03) < sharpe_ratio(alternating_returns, 0.0)

    def test_zero_volatility_is_zero(self):
        assert sharpe_ratio([0.25] * 12) == 0.0

    def test_empty_is_zero(self):
        assert sharpe_ratio([]) == 0.0

    def test_invalid_periods_raises(self, alternating_returns):
        with pytest.raises(ValueError, match="periods_per_year must be"):
            sharpe_ratio(alternating_returns, 0.0, 0)


class TestSortinoRatio:
    """Tests for sortino_ratio function."""

    def test_uses_negative_returns_only(self):
        returns = [0.03, -0.01, 0.02, -0.03, 0.04, -0.02]
        downside = np.std([-0.01, -0.03, -0.02], ddof=1)
        expected = np.mean(returns) * 12 / (downside * np.sqrt(12))

        assert_allclose(sortino_ratio(returns), expected, rtol=1e-10)

    def test_no_losses_positive_mean_is_infinite(self):
        assert sortino_ratio([0.01, 0.02, 0.03]) == float("inf")

    def test_no_losses_zero_mean_is_zero(self):
        assert sortino_ratio([0.0, 0.0]) == 0.0

    def test_single_loss_is_zero(self):
        """One negative return has zero sample deviation."""
        assert sortino_ratio([0.02, 0.03, -0.01]) == 0.0


class TestInformationRatio:
    """Tests for information_ratio function."""

    def test_identical_series_is_zero(self, alternating_returns):
        assert information_ratio(alternating_returns, alternating_returns) == 0.0

    def test_formula(self, paired_returns):
        portfolio, benchmark = paired_returns
        active = np.array(portfolio) - np.array(benchmark)
        expected = active.mean() * 12 / (active.std(ddof=1) * np.sqrt(12))

        assert_allclose(information_ratio(portfolio, benchmark), expected, rtol=1e-10)

    def test_length_mismatch_is_zero(self):
        assert information_ratio([0.01, 0.02], [0.01]) == 0.0


class TestCalmarRatio:
    """Tests for calmar_ratio function."""

    def test_formula(self, alternating_returns):
        assert_allclose(calmar_ratio(alternating_returns, 0.01), 6.0, rtol=1e-10)

    def test_no_drawdown_is_zero(self, alternating_returns):
        assert calmar_ratio(alternating_returns, 0.0) == 0.0


class TestVolatility:
    """Tests for annualized, downside and tracking volatility."""

    def test_annualized_volatility(self, paired_returns):
        portfolio, _ = paired_returns

        assert_allclose(
            annualized_volatility(portfolio),
            np.std(portfolio, ddof=1) * np.sqrt(12),
            rtol=1e-12,
        )

    def test_weekly_annualization(self, paired_returns):
        portfolio, _ = paired_returns

        assert_allclose(
            annualized_volatility(portfolio, 52),
            np.std(portfolio, ddof=1) * np.sqrt(52),
            rtol=1e-12,
        )

    def test_downside_volatility_ignores_gains(self):
        returns = [0.05, -0.01, 0.10, -0.03]

        assert_allclose(
            downside_volatility(returns),
            np.std([-0.01, -0.03], ddof=1) * np.sqrt(12),
            rtol=1e-12,
        )

    def test_tracking_error(self, paired_returns):
        portfolio, benchmark = paired_returns
        active = active_returns(portfolio, benchmark)

        assert_allclose(
            tracking_error(portfolio, benchmark),
            np.std(active, ddof=1) * np.sqrt(12),
            rtol=1e-12,
        )

    def test_tracking_error_mismatch_is_zero(self):
        assert tracking_error([0.01, 0.02], [0.01]) == 0.0

    def test_strict_mismatch_raises(self):
        with pytest.raises(ValueError, match="tracking_error"):
            tracking_error([0.01, 0.02], [0.01], strict=True)
        with pytest.raises(ValueError, match="information_ratio"):
            information_ratio([0.01, 0.02], [0.01], strict=True)
