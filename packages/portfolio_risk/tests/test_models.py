"""
Unit tests for models.py - Input and Result Records
"""

import datetime as dt

import pytest
from pydantic import ValidationError

from portfolio_risk.risk.models import (
    Factor,
    FactorExposure,
    FactorHolding,
    ReturnPoint,
    StressScenario,
)


class TestReturnPoint:
    """Tests for ReturnPoint."""

    def test_alpha_derived(self):
        point = ReturnPoint(
            date=dt.date(2023, 1, 31),
            portfolio_value=102.0,
            benchmark_value=101.0,
            portfolio_return=2.0,
            benchmark_return=1.0,
        )

        assert point.alpha == 1.0
        assert point.is_valid

    def test_explicit_alpha_kept(self):
        point = ReturnPoint(
            date=dt.date(2023, 1, 31),
            portfolio_value=102.0,
            benchmark_value=101.0,
            portfolio_return=2.0,
            benchmark_return=1.0,
            alpha=0.9,
        )

        assert point.alpha == 0.9

    def test_null_return_is_invalid(self):
        point = ReturnPoint(date=dt.date(2023, 1, 31), portfolio_value=100.0, benchmark_value=100.0)

        assert not point.is_valid
        assert point.alpha is None

    def test_camel_case_input(self):
        point = ReturnPoint.model_validate(
            {
                "date": "2023-01-31",
                "portfolioValue": 102.0,
                "benchmarkValue": 101.0,
                "portfolioReturn": 2.0,
                "benchmarkReturn": 1.0,
            }
        )

        assert point.date == dt.date(2023, 1, 31)
        assert point.model_dump(by_alias=True)["portfolioReturn"] == 2.0

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            ReturnPoint(date="not-a-date", portfolio_value=100.0, benchmark_value=100.0)


class TestFactorModels:
    """Tests for Factor, FactorExposure and FactorHolding."""

    def test_factor_order_and_labels(self):
        assert [f.label for f in Factor] == [
            "Value", "Growth", "Quality", "Momentum", "Size", "Volatility", "Debt", "Sentiment",
        ]

    def test_exposure_lookup(self):
        exposure = FactorExposure(momentum=1.5)

        assert exposure.get(Factor.MOMENTUM) == 1.5
        assert exposure.get(Factor.VALUE) == 0.0

    def test_active_weight_derived(self):
        holding = FactorHolding(ticker="AAPL", portfolio_weight=0.3, benchmark_weight=0.2)

        assert holding.active_weight == pytest.approx(0.1)
        assert holding.sector == "Unknown"

    def test_holding_from_camel_case(self):
        holding = FactorHolding.model_validate(
            {
                "ticker": "MSFT",
                "portfolioWeight": 0.1,
                "benchmarkWeight": 0.1,
                "factors": {"mfmScore": 0.7},
            }
        )

        assert holding.active_weight == 0.0
        assert holding.factors.mfm_score == 0.7


class TestStressScenario:
    """Tests for StressScenario."""

    def test_frozen(self):
        scenario = StressScenario(
            id="x",
            name="X",
            start_date=dt.date(2020, 1, 31),
            end_date=dt.date(2020, 3, 31),
            benchmark_return=-0.3,
        )

        with pytest.raises(ValidationError):
            scenario.name = "Y"
