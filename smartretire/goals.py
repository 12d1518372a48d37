"""Passive-income goal tracking."""

from __future__ import annotations

from dataclasses import dataclass

from .engine import YearlyResult
from .portfolio import PortfolioStatistics

GOAL_EXCELLENT = "excellent"
GOAL_GOOD = "good"
GOAL_WARNING = "warning"
GOAL_DANGER = "danger"

# (progress % strictly below, status), checked in order.
GOAL_THRESHOLDS = (
    (50.0, GOAL_DANGER),
    (80.0, GOAL_WARNING),
    (100.0, GOAL_GOOD),
)


@dataclass(slots=True, frozen=True)
class PassiveIncomeProgress:
    monthly_passive_income: float
    required_capital: float
    progress_pct: float
    remaining_capital: float


@dataclass(slots=True, frozen=True)
class RetirementGoal:
    age: int
    monthly_passive_income: float
    progress_pct: float
    status: str


def required_capital(target_monthly_income: float, annual_yield_pct: float) -> float:
    """Principal whose yield pays ``target_monthly_income`` (the FIRE number)."""
    if annual_yield_pct <= 0:
        return 0.0
    return (target_monthly_income * 12.0) / (annual_yield_pct / 100.0)


def passive_income_progress(
    stats: PortfolioStatistics,
    target_monthly_income: float,
    target_annual_yield: float,
) -> PassiveIncomeProgress:
    monthly_passive = stats.total_value * (stats.weighted_yield_pct / 100.0) / 12.0
    # Without a target yield the portfolio's own yield sizes the capital.
    calc_yield = target_annual_yield if target_annual_yield > 0 else stats.weighted_yield_pct
    capital = required_capital(target_monthly_income, calc_yield)
    progress = 0.0
    if target_monthly_income > 0:
        progress = min(monthly_passive / target_monthly_income * 100.0, 100.0)
    return PassiveIncomeProgress(
        monthly_passive_income=monthly_passive,
        required_capital=capital,
        progress_pct=progress,
        remaining_capital=max(0.0, capital - stats.total_value),
    )


def goal_status(final: YearlyResult, target_monthly_income: float) -> RetirementGoal:
    """Rate the last projected year's passive income against the monthly target."""
    monthly_passive = final.yearly_passive_income / 12.0
    progress = monthly_passive / target_monthly_income * 100.0 if target_monthly_income > 0 else 0.0
    status = GOAL_EXCELLENT
    for threshold, label in GOAL_THRESHOLDS:
        if progress < threshold:
            status = label
            break
    return RetirementGoal(
        age=final.age,
        monthly_passive_income=monthly_passive,
        progress_pct=progress,
        status=status,
    )
