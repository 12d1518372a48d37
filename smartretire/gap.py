"""Actual vs. target portfolio comparison."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .engine import YearlyResult, run_projection
from .portfolio import PortfolioStatistics, portfolio_statistics
from .schema import DEFAULT_LIFE_EXPECTANCY, CalculationParams, ManualOverride

CONSERVATIVE_YIELD_PCT = 4.5


@dataclass(slots=True, frozen=True)
class GapAnalysis:
    shortfall: float
    suggested_makeup_amount: float
    assumed_conservative_yield: float


def future_value(stats: PortfolioStatistics, years: float) -> float:
    growth = (stats.weighted_return_pct + stats.weighted_yield_pct) / 100.0
    return stats.total_value * (1.0 + growth) ** years


def analyze_gap(
    actual: PortfolioStatistics,
    target: PortfolioStatistics,
    years_to_retirement: float,
    conservative_yield_pct: float = CONSERVATIVE_YIELD_PCT,
) -> GapAnalysis:
    """Size the present-day amount, parked at a conservative yield, that closes the gap.

    A positive shortfall means the target portfolio ends ahead of the actual one.
    """
    shortfall = future_value(target, years_to_retirement) - future_value(actual, years_to_retirement)
    suggested = 0.0
    if shortfall > 0:
        suggested = shortfall / (1.0 + conservative_yield_pct / 100.0) ** years_to_retirement
    return GapAnalysis(
        shortfall=shortfall,
        suggested_makeup_amount=suggested,
        assumed_conservative_yield=conservative_yield_pct,
    )


def analyze_params_gap(params: CalculationParams) -> GapAnalysis:
    years = max(0, params.retirement_age - params.current_age)
    return analyze_gap(
        portfolio_statistics(params.holdings),
        portfolio_statistics(params.simulated_holdings),
        years,
    )


def target_params(params: CalculationParams) -> CalculationParams:
    """Parameters for projecting the target portfolio from its own value and statistics."""
    return replace(
        params,
        holdings=list(params.simulated_holdings),
        initial_principal=portfolio_statistics(params.simulated_holdings).total_value,
        manual_override=ManualOverride(enabled=False),
    )


def project_target_portfolio(
    params: CalculationParams,
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY,
) -> list[YearlyResult]:
    return run_projection(target_params(params), [], life_expectancy)
