"""Stress-test scenario catalog and runner."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable

from .engine import YearlyResult, first_negative_age, run_projection
from .schema import (
    DEFAULT_LIFE_EXPECTANCY,
    EVENT_MARKET_CRASH,
    EVENT_ONE_TIME_EXPENSE,
    EVENT_RECURRING_EXPENSE,
    EVENT_RETURN_REDUCTION,
    EVENT_STOP_CONTRIBUTIONS,
    CalculationParams,
    LifecycleEvent,
)

logger = logging.getLogger(__name__)

STATUS_SAFE = "safe"
STATUS_WARNING = "warning"
STATUS_DANGER = "danger"
STRESS_STATUSES = {STATUS_SAFE, STATUS_WARNING, STATUS_DANGER}

DANGER_RATIO = 0.5
WARNING_RATIO = 0.8


@dataclass(slots=True)
class StressScenario:
    id: str
    title: str
    description: str
    events: list[LifecycleEvent] = field(default_factory=list)
    early_retirement_offset_years: float = 0.0
    life_expectancy: int | None = None
    # Long-horizon scenarios are expected to end lower than the baseline.
    safe_if_solvent: bool = False


@dataclass(slots=True, frozen=True)
class StressTestOutcome:
    scenario: StressScenario
    final_balance: int
    baseline_final_balance: int
    difference: int
    bankrupt: bool
    bankrupt_age: int | None
    status: str


def default_scenarios(params: CalculationParams) -> list[StressScenario]:
    retirement_age = params.retirement_age
    current_age = params.current_age
    return [
        StressScenario(
            id="unemployment",
            title="Mid-career job loss",
            description="Out of work for 2 years from age 40: no contributions and living costs drawn from savings.",
            events=[
                LifecycleEvent(start_age=40, duration_years=2, kind=EVENT_STOP_CONTRIBUTIONS, magnitude=0),
                LifecycleEvent(start_age=40, duration_years=2, kind=EVENT_RECURRING_EXPENSE, magnitude=300_000),
            ],
        ),
        StressScenario(
            id="illness",
            title="Serious illness",
            description="A major illness at 50 with a one-off medical bill of 1.5 million.",
            events=[LifecycleEvent(start_age=50, kind=EVENT_ONE_TIME_EXPENSE, magnitude=1_500_000)],
        ),
        StressScenario(
            id="crash",
            title="Crash at retirement",
            description="A financial crisis in the retirement year wipes 40% off the portfolio.",
            events=[LifecycleEvent(start_age=retirement_age, kind=EVENT_MARKET_CRASH, magnitude=40)],
        ),
        StressScenario(
            id="care",
            title="Long-term care",
            description="Long-term care from 75 costs an extra 480,000 a year until 85.",
            events=[LifecycleEvent(start_age=75, duration_years=10, kind=EVENT_RECURRING_EXPENSE, magnitude=480_000)],
        ),
        StressScenario(
            id="early_retire",
            title="Forced early retirement",
            description="Layoffs or family needs force retirement 5 years early, shortening the accumulation phase.",
            early_retirement_offset_years=5,
        ),
        StressScenario(
            id="low_return",
            title="Prolonged low returns",
            description="Global stagnation cuts annualised returns by 30% for the long run.",
            events=[LifecycleEvent(start_age=current_age, duration_years=50, kind=EVENT_RETURN_REDUCTION, magnitude=30)],
        ),
        StressScenario(
            id="inflation",
            title="Runaway inflation",
            description="Purchasing power erodes, modelled as returns reduced by 20%.",
            events=[LifecycleEvent(start_age=current_age, duration_years=50, kind=EVENT_RETURN_REDUCTION, magnitude=20)],
        ),
        StressScenario(
            id="longevity",
            title="Longevity (age 100)",
            description="Living to 100: can the nest egg fund 15 extra years?",
            life_expectancy=100,
            safe_if_solvent=True,
        ),
        StressScenario(
            id="perfect_storm",
            title="Perfect storm",
            description="Early retirement, a crash at retirement and a serious illness combined.",
            events=[
                LifecycleEvent(start_age=retirement_age - 5, kind=EVENT_MARKET_CRASH, magnitude=30),
                LifecycleEvent(start_age=60, kind=EVENT_ONE_TIME_EXPENSE, magnitude=1_000_000),
            ],
            early_retirement_offset_years=5,
        ),
    ]


def _final_balance(results: list[YearlyResult]) -> int:
    return results[-1].total_balance if results else 0


def classify(final_balance: float, baseline_final_balance: float, bankrupt: bool, safe_if_solvent: bool = False) -> str:
    ratio = final_balance / baseline_final_balance if baseline_final_balance > 0 else 0.0

    if bankrupt or final_balance <= 0 or ratio < DANGER_RATIO:
        status = STATUS_DANGER
    elif ratio < WARNING_RATIO:
        status = STATUS_WARNING
    else:
        status = STATUS_SAFE

    if safe_if_solvent and final_balance > 0:
        status = STATUS_SAFE
    return status


def run_scenario(
    params: CalculationParams,
    scenario: StressScenario,
    baseline_final_balance: int,
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY,
) -> StressTestOutcome:
    results = run_projection(
        params,
        scenario.events,
        scenario.life_expectancy or life_expectancy,
        early_retirement_offset_years=scenario.early_retirement_offset_years,
    )
    final_balance = _final_balance(results)
    bankrupt_age = first_negative_age(results)
    bankrupt = bankrupt_age is not None
    status = classify(final_balance, baseline_final_balance, bankrupt, scenario.safe_if_solvent)
    logger.debug("scenario %s: final %d vs baseline %d -> %s", scenario.id, final_balance, baseline_final_balance, status)
    return StressTestOutcome(
        scenario=scenario,
        final_balance=final_balance,
        baseline_final_balance=baseline_final_balance,
        difference=final_balance - baseline_final_balance,
        bankrupt=bankrupt,
        bankrupt_age=bankrupt_age,
        status=status,
    )


def run_stress_tests(
    params: CalculationParams,
    scenarios: Iterable[StressScenario] | None = None,
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY,
) -> list[StressTestOutcome]:
    """Run every scenario and classify it against an event-free baseline."""
    baseline_final_balance = _final_balance(run_projection(params, [], life_expectancy))
    catalog = default_scenarios(params) if scenarios is None else list(scenarios)
    return [run_scenario(params, scenario, baseline_final_balance, life_expectancy) for scenario in catalog]
