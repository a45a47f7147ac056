"""
Concentration Module

Holdings concentration: HHI, effective number of names, top-N weight,
sector/country/region aggregation and active share. Holding weights are
decimal fractions; reported weights are percentages.
"""

from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
import structlog

from .models import (
    ConcentrationMetrics,
    CountryConcentration,
    FactorHolding,
    SectorConcentration,
)

logger = structlog.get_logger(__name__)


def herfindahl_index(weights: Sequence[float]) -> float:
    """Sum of squared decimal weights (0-1 scale)."""
    w = np.asarray(weights, dtype=float)
    return float(np.sum(w ** 2))


def top_n_weight(weights: Sequence[float], n: int) -> float:
    """Cumulative weight of the n largest weights (same units as input)."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    ordered = np.sort(np.asarray(weights, dtype=float))[::-1]
    return float(np.sum(ordered[:n]))


def active_share(holdings: Sequence[FactorHolding]) -> float:
    """Half the sum of absolute active weights, in percent.

    Benchmark-only names (zero portfolio weight) count too: an underweight
    is as much a departure from the benchmark as an overweight.
    """
    return float(sum(abs(h.active_weight) for h in holdings) / 2 * 100)


def _aggregate(frame: pd.DataFrame, key: str) -> pd.DataFrame:
    """Group holdings by *key*, heaviest portfolio weight first.

    Groups keep first-appearance order among equal weights.
    """
    grouped = frame.groupby(key, sort=False).agg(
        portfolio=("portfolio_weight", "sum"),
        benchmark=("benchmark_weight", "sum"),
        stock_count=("ticker", "size"),
    )
    return grouped.sort_values("portfolio", ascending=False, kind="stable")


def _largest(grouped: pd.DataFrame) -> Tuple[str, float]:
    if grouped.empty:
        return "", 0.0
    return str(grouped.index[0]), float(grouped["portfolio"].iloc[0]) * 100


def concentration_metrics(holdings: Sequence[FactorHolding]) -> ConcentrationMetrics:
    """Compute concentration metrics for a holdings snapshot.

    Only holdings with a positive portfolio weight are considered, except
    for active share which spans the whole snapshot: benchmark-only names
    (zero portfolio weight) add their benchmark weight to it. Active share
    is therefore larger than a sum restricted to held names whenever the
    benchmark holds names the portfolio does not.

    Args:
        holdings: Factor-tagged holdings (decimal weights)

    Returns:
        ConcentrationMetrics; a zero-valued structure when no holding has
        positive portfolio weight
    """
    held = [h for h in holdings if h.portfolio_weight > 0]

    if not held:
        logger.warning(
            "concentration_metrics: no holdings with positive weight",
            num_holdings=len(holdings),
        )
        return ConcentrationMetrics()

    frame = pd.DataFrame(
        {
            "ticker": [h.ticker for h in held],
            "sector": [h.sector for h in held],
            "country": [h.country for h in held],
            "region": [h.region for h in held],
            "portfolio_weight": [h.portfolio_weight for h in held],
            "benchmark_weight": [h.benchmark_weight for h in held],
        }
    )

    weights = frame["portfolio_weight"].to_numpy()
    hhi = herfindahl_index(weights)
    effective_stocks = 1 / hhi if hhi > 0 else 0.0

    by_weight = frame.sort_values("portfolio_weight", ascending=False, kind="stable")
    max_stock = by_weight.iloc[0]

    sectors = _aggregate(frame, "sector")
    countries = _aggregate(frame, "country")
    regions = _aggregate(frame, "region")

    sector_concentration: List[SectorConcentration] = [
        SectorConcentration(
            sector=str(name),
            portfolio_weight=row.portfolio * 100,
            benchmark_weight=row.benchmark * 100,
            active_weight=(row.portfolio - row.benchmark) * 100,
            stock_count=int(row["stock_count"]),
        )
        for name, row in sectors.iterrows()
    ]
    country_concentration: List[CountryConcentration] = [
        CountryConcentration(
            country=str(name),
            portfolio_weight=row.portfolio * 100,
            benchmark_weight=row.benchmark * 100,
            active_weight=(row.portfolio - row.benchmark) * 100,
            stock_count=int(row["stock_count"]),
        )
        for name, row in countries.iterrows()
    ]

    max_sector_name, max_sector_weight = _largest(sectors)
    max_country_name, max_country_weight = _largest(countries)
    max_region_name, max_region_weight = _largest(regions)

    metrics = ConcentrationMetrics(
        hhi=hhi * 10000,
        effective_stocks=effective_stocks,
        top5_weight=top_n_weight(weights, 5) * 100,
        top10_weight=top_n_weight(weights, 10) * 100,
        max_stock_weight=float(max_stock["portfolio_weight"]) * 100,
        max_stock_ticker=str(max_stock["ticker"]),
        max_sector_weight=max_sector_weight,
        max_sector_name=max_sector_name,
        max_country_weight=max_country_weight,
        max_country_name=max_country_name,
        max_region_weight=max_region_weight,
        max_region_name=max_region_name,
        active_share=active_share(holdings),
        sector_concentration=sector_concentration,
        country_concentration=country_concentration,
    )

    logger.info(
        "concentration_metrics: metrics computed",
        num_holdings=len(held),
        hhi=metrics.hhi,
        effective_stocks=metrics.effective_stocks,
        active_share=metrics.active_share,
    )

    return metrics
