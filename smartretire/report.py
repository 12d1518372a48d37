"""CSV and text export of projection, simulation and stress-test results."""

from __future__ import annotations

import csv
from dataclasses import asdict, fields
import io
from pathlib import Path
from typing import Final, Iterable, Mapping

from .benchmark import BenchmarkComparison
from .engine import YearlyResult, first_negative_age
from .gap import GapAnalysis
from .goals import GOAL_DANGER, GOAL_EXCELLENT, GOAL_GOOD, GOAL_WARNING, PassiveIncomeProgress, goal_status
from .schema import Holding
from .simulation import MonteCarloResult, SimulationPercentiles
from .stress import STATUS_DANGER, STATUS_SAFE, STATUS_WARNING, StressTestOutcome

STATUS_LABELS: Final[dict[str, str]] = {
    STATUS_SAFE: "Safe",
    STATUS_WARNING: "Warning",
    STATUS_DANGER: "Danger",
}

STRESS_HEADERS: Final[list[str]] = [
    "Scenario",
    "Description",
    "Final Balance",
    "Difference From Baseline",
    "Status",
    "Bankruptcy Age",
]

NO_BANKRUPTCY: Final[str] = "-"

GOAL_LABELS: Final[dict[str, str]] = {
    GOAL_EXCELLENT: "Excellent",
    GOAL_GOOD: "Good",
    GOAL_WARNING: "Warning",
    GOAL_DANGER: "Danger",
}


def _money(value: float) -> str:
    return f"${value:,.0f}"


def _render_rows(header: list[str], rows: Iterable[list[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def render_projection_csv(results: list[YearlyResult]) -> str:
    header = [f.name for f in fields(YearlyResult)]
    return _render_rows(header, ([getattr(row, name) for name in header] for row in results))


def render_percentiles_csv(percentiles: list[SimulationPercentiles]) -> str:
    header = [f.name for f in fields(SimulationPercentiles)]
    return _render_rows(header, (list(asdict(row).values()) for row in percentiles))


def render_stress_csv(
    outcomes: list[StressTestOutcome],
    labels: Mapping[str, str] = STATUS_LABELS,
) -> str:
    rows = (
        [
            outcome.scenario.title,
            outcome.scenario.description,
            outcome.final_balance,
            outcome.difference,
            labels.get(outcome.status, outcome.status),
            outcome.bankrupt_age if outcome.bankrupt_age is not None else NO_BANKRUPTCY,
        ]
        for outcome in outcomes
    )
    return _render_rows(STRESS_HEADERS, rows)


def render_gap_csv(gap: GapAnalysis) -> str:
    header = [f.name for f in fields(GapAnalysis)]
    return _render_rows(header, [[round(getattr(gap, name), 2) for name in header]])


def projection_summary(
    results: list[YearlyResult],
    target_monthly_income: float = 0.0,
    goal_labels: Mapping[str, str] = GOAL_LABELS,
) -> list[str]:
    if not results:
        return ["No projection possible: life expectancy is not after the current age."]
    first = results[0]
    last = results[-1]
    lines = [
        f"Ages: {first.age}-{last.age}",
        f"Ending balance: {_money(last.total_balance)} ({_money(last.total_balance_real)} real)",
        f"Ending net worth: {_money(last.net_worth)}",
        f"Yearly passive income: {_money(last.yearly_passive_income)}",
    ]
    if target_monthly_income > 0:
        goal = goal_status(last, target_monthly_income)
        lines.append(
            f"Retirement goal at age {goal.age}: {goal_labels.get(goal.status, goal.status)} "
            f"({_money(goal.monthly_passive_income)}/month, {goal.progress_pct:.1f}% of target)"
        )
    negative = first_negative_age(results)
    if negative is not None:
        lines.append(f"Balance first negative at age {negative}")
    return lines


def household_summary(progress: PassiveIncomeProgress, comparison: BenchmarkComparison) -> list[str]:
    return [
        f"Passive income: {_money(progress.monthly_passive_income)}/month ({progress.progress_pct:.1f}% of target)",
        f"Required capital: {_money(progress.required_capital)} ({_money(progress.remaining_capital)} remaining)",
        f"Peers aged {comparison.benchmark.age_range}: income {comparison.income_rank}, assets {comparison.asset_rank}",
    ]


def gap_summary(gap: GapAnalysis, target_results: list[YearlyResult], holdings: Iterable[Holding]) -> list[str]:
    lines = [
        f"Shortfall: {gap.shortfall:,.0f}",
        f"Suggested make-up amount: {gap.suggested_makeup_amount:,.0f} at {gap.assumed_conservative_yield:g}%",
    ]
    if target_results:
        last = target_results[-1]
        lines.append(f"Target portfolio at age {last.age}: {_money(last.total_balance)}")
    for holding in holdings:
        lines.append(f"Allocation {holding.name}: {holding.allocation_pct or 0.0:.1f}%")
    return lines


def monte_carlo_summary(result: MonteCarloResult) -> list[str]:
    lines = [f"Trials: {result.trial_count}"]
    if result.percentiles:
        last = result.percentiles[-1]
        lines.append(f"Age {last.age}: p10 {_money(last.p10)}, p50 {_money(last.p50)}, p90 {_money(last.p90)}")
    return lines


def stress_summary(outcomes: list[StressTestOutcome], labels: Mapping[str, str] = STATUS_LABELS) -> list[str]:
    return [
        f"{outcome.scenario.title}: {labels.get(outcome.status, outcome.status)} ({_money(outcome.final_balance)})"
        for outcome in outcomes
    ]


def write_report(path: str | Path, content: str) -> None:
    Path(path).write_text(content, encoding="utf-8")
