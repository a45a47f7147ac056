"""
Unit tests for concentration.py - Concentration Module

Tests cover:
- HHI and effective number of stocks
- Top-N weights
- Sector/country aggregation
- Active share
"""

import pytest
from numpy.testing import assert_allclose

from portfolio_risk.risk.concentration import (
    active_share,
    concentration_metrics,
    herfindahl_index,
    top_n_weight,
)
from portfolio_risk.risk.models import ConcentrationMetrics, FactorHolding


class TestHerfindahlIndex:
    """Tests for herfindahl_index and top_n_weight."""

    def test_single_holding(self):
        assert herfindahl_index([1.0]) == 1.0

    def test_equal_weights(self):
        assert_allclose(herfindahl_index([0.25] * 4), 0.25)

    def test_top_n(self):
        weights = [0.05, 0.30, 0.10, 0.40, 0.15]

        assert_allclose(top_n_weight(weights, 2), 0.70)
        assert_allclose(top_n_weight(weights, 10), 1.0)

    def test_invalid_n_raises(self):
        with pytest.raises(ValueError, match="n must be"):
            top_n_weight([0.5, 0.5], 0)


class TestConcentrationMetrics:
    """Tests for concentration_metrics function."""

    def test_equal_weight_portfolio(self, equal_weight_holdings):
        """10 x 10% gives HHI 1000 and 10 effective stocks."""
        metrics = concentration_metrics(equal_weight_holdings)

        assert_allclose(metrics.hhi, 1000.0, rtol=1e-9)
        assert_allclose(metrics.effective_stocks, 10.0, rtol=1e-9)
        assert_allclose(metrics.top5_weight, 50.0, rtol=1e-9)
        assert_allclose(metrics.top10_weight, 100.0, rtol=1e-9)
        assert_allclose(metrics.max_stock_weight, 10.0, rtol=1e-9)

    def test_identical_to_benchmark_has_zero_active_share(self, equal_weight_holdings):
        metrics = concentration_metrics(equal_weight_holdings)

        assert metrics.active_share == 0.0
        assert all(s.active_weight == 0.0 for s in metrics.sector_concentration)

    def test_single_concentrated_holding(self):
        """One name against a 100-name benchmark approaches 100% active share."""
        holdings = [FactorHolding(ticker="AAA", portfolio_weight=1.0, benchmark_weight=0.01)]
        holdings += [
            FactorHolding(ticker=f"B{i:02d}", portfolio_weight=0.0, benchmark_weight=0.01)
            for i in range(99)
        ]

        metrics = concentration_metrics(holdings)

        assert_allclose(metrics.active_share, 99.0, rtol=1e-9)
        assert_allclose(metrics.hhi, 10000.0)
        assert metrics.effective_stocks == 1.0
        assert metrics.max_stock_ticker == "AAA"

    def test_sector_aggregation(self, sample_holdings):
        metrics = concentration_metrics(sample_holdings)
        sectors = {s.sector: s for s in metrics.sector_concentration}

        assert metrics.sector_concentration[0].sector == "Technology"
        assert_allclose(sectors["Technology"].portfolio_weight, 65.0)
        assert_allclose(sectors["Technology"].benchmark_weight, 50.0)
        assert_allclose(sectors["Technology"].active_weight, 15.0)
        assert sectors["Technology"].stock_count == 3
        assert metrics.max_sector_name == "Technology"
        assert_allclose(metrics.max_sector_weight, 65.0)

    def test_zero_weight_holdings_excluded_from_groups(self, sample_holdings):
        """Benchmark-only names do not create sectors or countries."""
        metrics = concentration_metrics(sample_holdings)

        assert "Energy" not in {s.sector for s in metrics.sector_concentration}
        assert "GB" not in {c.country for c in metrics.country_concentration}
        assert_allclose(
            sum(s.portfolio_weight for s in metrics.sector_concentration), 100.0
        )

    def test_country_and_region(self, sample_holdings):
        metrics = concentration_metrics(sample_holdings)

        assert metrics.max_country_name == "US"
        assert_allclose(metrics.max_country_weight, 65.0)
        assert metrics.max_region_name == "North America"
        assert_allclose(metrics.max_region_weight, 65.0)
        countries = [c.portfolio_weight for c in metrics.country_concentration]
        assert countries == sorted(countries, reverse=True)

    def test_active_share_spans_benchmark_only_names(self, sample_holdings):
        """|0.10| + |0.05| + |0.05| + |0.02| + |-0.02| + |-0.12| + |-0.08| = 0.44."""
        assert_allclose(active_share(sample_holdings), 22.0, rtol=1e-9)
        assert_allclose(concentration_metrics(sample_holdings).active_share, 22.0, rtol=1e-9)

    def test_hhi_bounds(self, sample_holdings):
        metrics = concentration_metrics(sample_holdings)

        assert 0 < metrics.hhi <= 10000
        assert metrics.effective_stocks >= 1

    def test_no_positive_weight_gives_zeros(self):
        holdings = [FactorHolding(ticker="X", portfolio_weight=0.0, benchmark_weight=0.5)]

        assert concentration_metrics(holdings) == ConcentrationMetrics()

    def test_empty(self):
        assert concentration_metrics([]) == ConcentrationMetrics()
