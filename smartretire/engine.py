"""Core year-by-year, month-by-month projection engine."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Iterable

from .mortgage import MortgageState, amortize_month, redirected_payment, start_mortgage
from .portfolio import portfolio_statistics
from .schema import (
    DEFAULT_LIFE_EXPECTANCY,
    EVENT_EARLY_RETIREMENT,
    EVENT_MARKET_CRASH,
    EVENT_ONE_TIME_EXPENSE,
    EVENT_RECURRING_EXPENSE,
    EVENT_RETURN_REDUCTION,
    EVENT_STOP_CONTRIBUTIONS,
    CalculationParams,
    LifecycleEvent,
)

logger = logging.getLogger(__name__)

EXPENSE_KINDS = {EVENT_ONE_TIME_EXPENSE, EVENT_RECURRING_EXPENSE}


class EventError(ValueError):
    """Raised when lifecycle events cannot be resolved unambiguously."""


@dataclass(slots=True)
class ProjectionState:
    """Unrounded running totals carried from one year into the next."""

    balance: float
    contributed: float
    appreciation: float
    dividends: float
    mortgage: MortgageState


@dataclass(slots=True, frozen=True)
class YearlyResult:
    year_index: int
    age: int
    total_principal: int
    total_appreciation: int
    total_dividends: int
    total_balance: int
    total_liabilities: int
    net_worth: int
    yearly_passive_income: int
    total_principal_real: int
    total_appreciation_real: int
    total_dividends_real: int
    total_balance_real: int
    total_liabilities_real: int
    net_worth_real: int
    yearly_passive_income_real: int


def _whole(value: float) -> int:
    # Half-up rounding to whole currency units.
    return int(math.floor(value + 0.5))


def annual_rates(params: CalculationParams) -> tuple[float, float]:
    """Return (price appreciation %, dividend yield %) used for the projection."""
    if params.manual_override.enabled:
        return params.manual_override.return_rate, params.manual_override.dividend_yield
    stats = portfolio_statistics(params.holdings)
    return stats.weighted_return_pct, stats.weighted_yield_pct


def effective_retirement_age(
    retirement_age: float,
    events: Iterable[LifecycleEvent] = (),
    early_retirement_offset_years: float = 0.0,
) -> float:
    sources = [event.magnitude for event in events if event.kind == EVENT_EARLY_RETIREMENT]
    if early_retirement_offset_years:
        sources.append(early_retirement_offset_years)
    if len(sources) > 1:
        raise EventError("at most one early retirement offset may be supplied")
    return retirement_age - (sources[0] if sources else 0.0)


def _snapshot(state: ProjectionState, *, year_index: int, age: int, yield_pct: float, deflator: float) -> YearlyResult:
    liabilities = state.mortgage.balance
    passive_income = state.balance * (yield_pct / 100.0)

    total_balance = _whole(state.balance)
    total_liabilities = _whole(liabilities)
    total_balance_real = _whole(state.balance * deflator)
    total_liabilities_real = _whole(liabilities * deflator)
    return YearlyResult(
        year_index=year_index,
        age=age,
        total_principal=_whole(state.contributed),
        total_appreciation=_whole(state.appreciation),
        total_dividends=_whole(state.dividends),
        total_balance=total_balance,
        total_liabilities=total_liabilities,
        net_worth=total_balance - total_liabilities,
        yearly_passive_income=_whole(passive_income),
        total_principal_real=_whole(state.contributed * deflator),
        total_appreciation_real=_whole(state.appreciation * deflator),
        total_dividends_real=_whole(state.dividends * deflator),
        total_balance_real=total_balance_real,
        total_liabilities_real=total_liabilities_real,
        net_worth_real=total_balance_real - total_liabilities_real,
        yearly_passive_income_real=_whole(passive_income * deflator),
    )


def _simulate_year(
    state: ProjectionState,
    *,
    appreciation_pct: float,
    yield_pct: float,
    monthly_contribution: float,
    annual_contribution: float,
    year_events: list[LifecycleEvent],
) -> float:
    """Advance ``state`` by one year and return the yield rate in effect."""
    for event in year_events:
        if event.kind == EVENT_MARKET_CRASH:
            state.balance *= 1.0 - event.magnitude / 100.0

    for event in year_events:
        if event.kind == EVENT_RETURN_REDUCTION:
            appreciation_pct *= 1.0 - event.magnitude / 100.0
            yield_pct *= 1.0 - event.magnitude / 100.0

    for event in year_events:
        if event.kind in EXPENSE_KINDS:
            state.balance -= event.magnitude

    if any(event.kind == EVENT_STOP_CONTRIBUTIONS for event in year_events):
        monthly_contribution = 0.0
        annual_contribution = 0.0

    monthly_appreciation = appreciation_pct / 100.0 / 12.0
    monthly_dividend = yield_pct / 100.0 / 12.0

    for _ in range(12):
        extra = 0.0
        if state.mortgage.in_term:
            amortize_month(state.mortgage)
        else:
            extra = redirected_payment(state.mortgage)

        monthly_input = monthly_contribution + extra
        state.balance += monthly_input
        state.contributed += monthly_input

        appreciation = state.balance * monthly_appreciation
        dividends = state.balance * monthly_dividend
        state.appreciation += appreciation
        state.dividends += dividends
        state.balance += appreciation + dividends

    state.balance += annual_contribution
    state.contributed += annual_contribution
    return yield_pct


def run_projection(
    params: CalculationParams,
    events: Iterable[LifecycleEvent] = (),
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY,
    *,
    early_retirement_offset_years: float = 0.0,
) -> list[YearlyResult]:
    """Project balances from ``params.current_age`` to ``life_expectancy`` inclusive.

    Returns one record per integer age, starting with the initial state. An
    empty list means no projection is possible (life expectancy not after the
    current age). Balances may go negative; that is a representable outcome,
    not an error.
    """
    event_list = list(events)
    years_to_simulate = life_expectancy - params.current_age
    if years_to_simulate <= 0:
        return []

    retirement_age = effective_retirement_age(params.retirement_age, event_list, early_retirement_offset_years)
    appreciation_pct, yield_pct = annual_rates(params)
    logger.debug(
        "projection: %d years, retirement age %s, appreciation %.3f%%, yield %.3f%%, %d events",
        years_to_simulate,
        retirement_age,
        appreciation_pct,
        yield_pct,
        len(event_list),
    )

    state = ProjectionState(
        balance=params.initial_principal,
        contributed=params.initial_principal,
        appreciation=0.0,
        dividends=0.0,
        mortgage=start_mortgage(params.mortgage),
    )
    results = [_snapshot(state, year_index=0, age=params.current_age, yield_pct=yield_pct, deflator=1.0)]

    for year in range(1, years_to_simulate + 1):
        age = params.current_age + year
        retired = age >= retirement_age
        year_events = [event for event in event_list if event.is_active(age)]

        effective_yield = _simulate_year(
            state,
            appreciation_pct=appreciation_pct,
            yield_pct=yield_pct,
            monthly_contribution=0.0 if retired else params.monthly_contribution,
            annual_contribution=0.0 if retired else params.annual_extra_contribution,
            year_events=year_events,
        )

        deflator = (1.0 + params.inflation_rate / 100.0) ** (-year)
        results.append(_snapshot(state, year_index=year, age=age, yield_pct=effective_yield, deflator=deflator))

    return results


def first_negative_age(results: Iterable[YearlyResult]) -> int | None:
    for row in results:
        if row.total_balance < 0:
            return row.age
    return None
