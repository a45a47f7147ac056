"""
Stress Testing Module

Historical replay of named crisis windows against the portfolio's own return
history. Windows covered by the data give realized returns, drawdown, beta
and recovery time; windows outside the data fall back to a beta-scaled
estimate of the scenario's historical benchmark return.
"""

import datetime as dt
from typing import List, Optional, Sequence, Tuple

import structlog

from .drawdown import max_drawdown
from .models import ReturnPoint, StressScenario, StressTestResult
from .ratios import beta

logger = structlog.get_logger(__name__)


SCENARIO_CATALOGUE_VERSION = "2024.1"

# Month-end dates to match monthly performance data. benchmark_return is a
# historical estimate used only when the series does not cover the window.
STRESS_SCENARIOS: Tuple[StressScenario, ...] = (
    StressScenario(
        id="gfc-2008",
        name="2008 Financial Crisis",
        description="Global Financial Crisis - Lehman Brothers collapse and credit freeze",
        start_date=dt.date(2008, 8, 31),
        end_date=dt.date(2009, 2, 28),
        benchmark_return=-0.502,
    ),
    StressScenario(
        id="covid-2020",
        name="COVID-19 Crash",
        description="Rapid market decline due to COVID-19 pandemic",
        start_date=dt.date(2020, 1, 31),
        end_date=dt.date(2020, 3, 31),
        benchmark_return=-0.339,
    ),
    StressScenario(
        id="rate-shock-2022",
        name="2022 Rate Shock",
        description="Fed rate hikes and inflation concerns",
        start_date=dt.date(2021, 12, 31),
        end_date=dt.date(2022, 9, 30),
        benchmark_return=-0.254,
    ),
    StressScenario(
        id="q4-2018-selloff",
        name="Q4 2018 Selloff",
        description="Growth scare and Fed tightening into year end",
        start_date=dt.date(2018, 9, 30),
        end_date=dt.date(2018, 12, 31),
        benchmark_return=-0.134,
    ),
)


def get_scenario(scenario_id: str) -> StressScenario:
    """Look up a catalogued scenario by id."""
    for scenario in STRESS_SCENARIOS:
        if scenario.id == scenario_id:
            return scenario
    raise ValueError(f"Unknown scenario: {scenario_id}")


def find_closest_point(
    points: Sequence[ReturnPoint],
    target: dt.date,
    direction: str = "closest",
) -> Optional[int]:
    """Index of the point nearest *target*.

    Args:
        points: Return series
        target: Date to match
        direction: 'before' (on or before), 'after' (on or after) or 'closest'

    Returns:
        Index into points, or None if no point qualifies. Ties go to the
        earlier point.
    """
    if direction not in ("before", "after", "closest"):
        raise ValueError(f"Direction must be 'before', 'after' or 'closest', got {direction!r}")

    best_idx = None
    best_diff = None
    for i, point in enumerate(points):
        if direction == "before" and point.date > target:
            continue
        if direction == "after" and point.date < target:
            continue

        diff = abs((point.date - target).days)
        if best_diff is None or diff < best_diff:
            best_idx = i
            best_diff = diff

    return best_idx


def resolve_window(
    points: Sequence[ReturnPoint],
    scenario: StressScenario,
) -> Optional[Tuple[int, int]]:
    """Map a scenario's dates onto the series.

    The start prefers the last point on or before start_date and the end the
    first point on or after end_date; either falls back to the closest point
    in any direction. Inverted results are swapped.

    Returns:
        (start_idx, end_idx), or None when no distinct pair of dates spans
        the window
    """
    start_idx = find_closest_point(points, scenario.start_date, "before")
    if start_idx is None:
        start_idx = find_closest_point(points, scenario.start_date, "closest")

    end_idx = find_closest_point(points, scenario.end_date, "after")
    if end_idx is None:
        end_idx = find_closest_point(points, scenario.end_date, "closest")

    if start_idx is None or end_idx is None:
        return None

    if points[start_idx].date > points[end_idx].date:
        start_idx, end_idx = end_idx, start_idx

    if points[start_idx].date == points[end_idx].date:
        return None

    return start_idx, end_idx


def _estimated_result(scenario: StressScenario, overall_beta: float) -> StressTestResult:
    estimated_return = overall_beta * scenario.benchmark_return

    logger.warning(
        "stress_test_scenario: no data spans scenario, using beta estimate",
        scenario=scenario.name,
        beta=overall_beta,
        estimated_return_pct=estimated_return * 100,
    )

    return StressTestResult(
        scenario=scenario,
        portfolio_return=estimated_return * 100,
        benchmark_return=scenario.benchmark_return * 100,
        excess_return=(estimated_return - scenario.benchmark_return) * 100,
        max_drawdown=abs(estimated_return) * 100,
        beta=overall_beta,
        recovery_months=None,
        estimated=True,
    )


def stress_test_scenario(
    points: Sequence[ReturnPoint],
    scenario: StressScenario,
    overall_beta: float,
    strict: Optional[bool] = None,
) -> StressTestResult:
    """Replay one scenario against a cleaned (null-free) return series.

    Args:
        points: Chronological return series with no null returns
        scenario: Scenario to replay
        overall_beta: Full-history beta used for estimation and as the
            fallback when the window holds fewer than 2 points
        strict: Length-check mode for the window beta (None reads the
            environment)

    Returns:
        StressTestResult in percent; ``estimated`` is set when the series
        does not cover the window
    """
    window = resolve_window(points, scenario)
    if window is None:
        return _estimated_result(scenario, overall_beta)

    start_idx, end_idx = window
    start = points[start_idx]
    end = points[end_idx]

    portfolio_return = (
        (end.portfolio_value - start.portfolio_value) / start.portfolio_value
        if start.portfolio_value != 0 else 0.0
    )
    benchmark_return = (
        (end.benchmark_value - start.benchmark_value) / start.benchmark_value
        if start.benchmark_value != 0 else 0.0
    )

    in_window = [p for p in points if start.date <= p.date <= end.date]

    if len(in_window) >= 2:
        drawdown = max_drawdown(
            [p.portfolio_value for p in in_window],
            [p.date for p in in_window],
        ).value
        scenario_beta = beta(
            [p.portfolio_return / 100 for p in in_window],
            [p.benchmark_return / 100 for p in in_window],
            strict,
        )
    else:
        drawdown = abs(portfolio_return)
        scenario_beta = overall_beta

    # Periods after the window until the portfolio regains its pre-crisis level
    recovery_months = None
    for i in range(end_idx + 1, len(points)):
        if points[i].portfolio_value >= start.portfolio_value:
            recovery_months = i - end_idx
            break

    result = StressTestResult(
        scenario=scenario,
        portfolio_return=portfolio_return * 100,
        benchmark_return=benchmark_return * 100,
        excess_return=(portfolio_return - benchmark_return) * 100,
        max_drawdown=drawdown * 100,
        beta=scenario_beta,
        recovery_months=recovery_months,
        estimated=False,
        window_start=start.date,
        window_end=end.date,
    )

    logger.info(
        "stress_test_scenario: complete",
        scenario=scenario.name,
        window_start=str(start.date),
        window_end=str(end.date),
        portfolio_return_pct=result.portfolio_return,
        recovery_months=recovery_months,
    )

    return result


def run_stress_tests(
    return_series: Sequence[ReturnPoint],
    scenarios: Optional[Sequence[StressScenario]] = None,
    strict: Optional[bool] = None,
) -> List[StressTestResult]:
    """Run every scenario against the return series.

    Points with a null return are dropped first. The full-history beta is
    computed once and shared by all scenarios.

    Args:
        return_series: Chronological ReturnPoint records (returns in percent)
        scenarios: Scenarios to run (defaults to STRESS_SCENARIOS)
        strict: Length-check mode for the overall beta (None reads the
            environment)

    Returns:
        One StressTestResult per scenario, in scenario order
    """
    if scenarios is None:
        scenarios = STRESS_SCENARIOS

    points = [p for p in return_series if p.is_valid]
    overall_beta = beta(
        [p.portfolio_return / 100 for p in points],
        [p.benchmark_return / 100 for p in points],
        strict,
    )

    logger.info(
        "run_stress_tests: starting all scenarios",
        num_scenarios=len(scenarios),
        num_points=len(points),
        overall_beta=overall_beta,
    )

    results = [stress_test_scenario(points, scenario, overall_beta, strict) for scenario in scenarios]

    logger.info(
        "run_stress_tests: complete",
        realized=sum(1 for r in results if not r.estimated),
        estimated=sum(1 for r in results if r.estimated),
    )

    return results
