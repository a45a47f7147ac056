"""
Factor Risk Decomposition Module

Splits portfolio risk into a systematic part explained by active factor
exposures and an idiosyncratic remainder, and builds the weighted factor
profiles the decomposition consumes.

Factor variance contribution = (active exposure * factor volatility)^2
Percent-of-risk figures are variance shares so that the systematic and
idiosyncratic percentages sum to 100.
"""

import datetime as dt
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import structlog

from .models import (
    EXPOSURE_FIELDS,
    Factor,
    FactorData,
    FactorExposure,
    FactorHolding,
    FactorRiskContribution,
    FactorRiskDecomposition,
    SectorFactorProfile,
)

logger = structlog.get_logger(__name__)


# Annualized factor volatilities (decimal), estimated from historical data
FACTOR_VOLATILITIES: Dict[Factor, float] = {
    Factor.VALUE: 0.15,
    Factor.GROWTH: 0.18,
    Factor.QUALITY: 0.12,
    Factor.MOMENTUM: 0.20,
    Factor.SIZE: 0.14,
    Factor.VOLATILITY: 0.22,
    Factor.DEBT: 0.10,
    Factor.SENTIMENT: 0.16,
}

DEFAULT_FACTOR_VOLATILITY = 0.15


def decompose_factor_risk(
    portfolio_exposure: FactorExposure,
    benchmark_exposure: FactorExposure,
    total_volatility: float,
    factor_volatilities: Optional[Dict[Factor, float]] = None,
) -> FactorRiskDecomposition:
    """Decompose total portfolio variance into factor and residual parts.

    Args:
        portfolio_exposure: Portfolio-weighted factor scores
        benchmark_exposure: Benchmark-weighted factor scores
        total_volatility: Annualized total portfolio volatility (decimal)
        factor_volatilities: Per-factor annualized volatility override

    Returns:
        FactorRiskDecomposition with risks in percent, factors sorted by
        contribution descending

    Raises:
        ValueError: If total_volatility is negative
    """
    if total_volatility < 0:
        raise ValueError(f"Total volatility must be non-negative, got {total_volatility}")

    vols = FACTOR_VOLATILITIES if factor_volatilities is None else factor_volatilities

    contributions = []
    factor_variances = []
    for factor in Factor:
        exposure = portfolio_exposure.get(factor)
        active = exposure - benchmark_exposure.get(factor)
        factor_vol = vols.get(factor, DEFAULT_FACTOR_VOLATILITY)

        factor_variance = (active * factor_vol) ** 2
        factor_variances.append(factor_variance)
        contributions.append(
            FactorRiskContribution(
                name=factor.label,
                exposure=exposure,
                active_exposure=active,
                volatility=factor_vol * 100,
                contribution=float(np.sqrt(factor_variance)) * 100,
            )
        )

    total_factor_variance = float(np.sum(factor_variances))
    # Clamp: factor variance can exceed total variance through estimation noise
    idiosyncratic_variance = max(0.0, total_volatility ** 2 - total_factor_variance)
    total_variance = total_factor_variance + idiosyncratic_variance

    if total_variance > 0:
        for contribution, factor_variance in zip(contributions, factor_variances):
            contribution.percent_of_risk = factor_variance / total_variance * 100
        systematic_percent = total_factor_variance / total_variance * 100
        idiosyncratic_percent = idiosyncratic_variance / total_variance * 100
    else:
        logger.warning("decompose_factor_risk: zero total variance")
        systematic_percent = 0.0
        idiosyncratic_percent = 0.0

    contributions.sort(key=lambda c: c.contribution, reverse=True)

    return FactorRiskDecomposition(
        factors=contributions,
        systematic_risk=float(np.sqrt(total_factor_variance)) * 100,
        idiosyncratic_risk=float(np.sqrt(idiosyncratic_variance)) * 100,
        total_risk=float(np.sqrt(total_variance)) * 100,
        systematic_percent=systematic_percent,
        idiosyncratic_percent=idiosyncratic_percent,
    )


def _exposure_frame(holdings: Sequence[FactorHolding]) -> pd.DataFrame:
    """One row per holding: sector, both weights and every exposure field."""
    return pd.DataFrame(
        [
            {
                "sector": h.sector,
                "portfolio_weight": h.portfolio_weight,
                "benchmark_weight": h.benchmark_weight,
                **h.factors.model_dump(),
            }
            for h in holdings
        ],
        columns=["sector", "portfolio_weight", "benchmark_weight", *EXPOSURE_FIELDS],
    )


def weighted_factor_averages(
    holdings: Sequence[FactorHolding],
    weight: str = "portfolio",
) -> FactorExposure:
    """Weight-averaged factor exposures across holdings.

    Args:
        holdings: Factor-tagged holdings
        weight: 'portfolio' or 'benchmark' weights

    Returns:
        FactorExposure (all zeros when the total weight is 0)
    """
    if weight not in ("portfolio", "benchmark"):
        raise ValueError(f"Weight must be 'portfolio' or 'benchmark', got {weight!r}")

    frame = _exposure_frame(holdings)
    weights = frame[f"{weight}_weight"]
    total_weight = float(weights.sum())

    if total_weight == 0:
        logger.warning("weighted_factor_averages: zero total weight", weight=weight)
        return FactorExposure()

    averages = frame[list(EXPOSURE_FIELDS)].mul(weights, axis=0).sum() / total_weight
    return FactorExposure(**{name: float(averages[name]) for name in EXPOSURE_FIELDS})


def sector_factor_profile(holdings: Sequence[FactorHolding]) -> List[SectorFactorProfile]:
    """Portfolio-weighted factor scores per sector, heaviest sector first."""
    if not holdings:
        return []

    frame = _exposure_frame(holdings)
    profiles = []
    for sector, group in frame.groupby("sector", sort=False):
        total_weight = float(group["portfolio_weight"].sum())
        if total_weight > 0:
            scores = group[list(EXPOSURE_FIELDS)].mul(group["portfolio_weight"], axis=0).sum() / total_weight
            factors = FactorExposure(**{name: float(scores[name]) for name in EXPOSURE_FIELDS})
        else:
            factors = FactorExposure()

        profiles.append(
            SectorFactorProfile(
                sector=str(sector),
                count=len(group),
                total_weight=total_weight,
                factors=factors,
            )
        )

    profiles.sort(key=lambda p: p.total_weight, reverse=True)
    return profiles


def build_factor_data(
    holdings: Sequence[FactorHolding],
    as_of_date: Optional[dt.date] = None,
) -> FactorData:
    """Assemble a FactorData snapshot from holdings alone."""
    factor_data = FactorData(
        as_of_date=as_of_date,
        holdings=list(holdings),
        portfolio_averages=weighted_factor_averages(holdings, "portfolio"),
        benchmark_averages=weighted_factor_averages(holdings, "benchmark"),
        sector_factors=sector_factor_profile(holdings),
    )

    logger.info(
        "build_factor_data: snapshot built",
        num_holdings=len(factor_data.holdings),
        num_sectors=len(factor_data.sector_factors),
        portfolio_mfm=factor_data.portfolio_averages.mfm_score,
    )

    return factor_data
