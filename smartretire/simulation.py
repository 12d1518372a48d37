"""Monte Carlo simulation of pre-retirement balances."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import random
from typing import Callable, Iterable

from .engine import annual_rates
from .portfolio import portfolio_statistics
from .schema import DEFAULT_TRIAL_COUNT, CalculationParams

logger = logging.getLogger(__name__)

UniformSource = Callable[[], float]

PERCENTILES = (0.10, 0.50, 0.90)


@dataclass(slots=True, frozen=True)
class SimulationPercentiles:
    year_index: int
    age: int
    p10: int
    p50: int
    p90: int


@dataclass(slots=True)
class MonteCarloResult:
    seed: int | None
    trial_count: int
    percentiles: list[SimulationPercentiles]


def standard_normal(uniform: UniformSource) -> float:
    """Box-Muller transform of two uniform(0, 1) draws."""
    u = 0.0
    v = 0.0
    while u == 0.0:
        u = uniform()
    while v == 0.0:
        v = uniform()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def annual_contribution(params: CalculationParams) -> float:
    return params.monthly_contribution * 12.0 + params.annual_extra_contribution


def trial_path(initial_balance: float, contribution: float, returns: Iterable[float]) -> list[float]:
    """Balances for one trajectory, starting with ``initial_balance`` at index 0."""
    balance = initial_balance
    path = [balance]
    for realized in returns:
        balance = balance * (1.0 + realized) + contribution
        if balance < 0:
            balance = 0.0
        path.append(balance)
    return path


def _percentile_value(ordered: list[float], pct: float) -> int:
    value = ordered[int(math.floor(len(ordered) * pct))]
    return int(math.floor(value + 0.5))


def run_monte_carlo(
    params: CalculationParams,
    trial_count: int = DEFAULT_TRIAL_COUNT,
    *,
    uniform: UniformSource | None = None,
    seed: int | None = None,
) -> MonteCarloResult:
    """Run ``trial_count`` independent trajectories up to the retirement age.

    Percentile bands are cross-sectional: each year's balances are sorted on
    their own, so a band is not necessarily a path any single trial followed.
    Contributions are flat and ignore lifecycle events and the mortgage.
    """
    if trial_count < 1:
        raise ValueError("trial_count must be at least 1")
    if uniform is not None and seed is not None:
        raise ValueError("pass either a uniform source or a seed, not both")

    if uniform is None:
        if seed is None:
            seed = random.randint(1, 2**31 - 1)
        uniform = random.Random(seed).random

    appreciation_pct, yield_pct = annual_rates(params)
    mean = (appreciation_pct + yield_pct) / 100.0
    volatility = portfolio_statistics(params.holdings).weighted_volatility_pct / 100.0
    contribution = annual_contribution(params)

    years = params.retirement_age - params.current_age
    if years < 0:
        return MonteCarloResult(seed=seed, trial_count=trial_count, percentiles=[])
    balances_by_year: list[list[float]] = [[] for _ in range(years + 1)]
    logger.debug("monte carlo: %d trials over %d years, mean %.4f, sigma %.4f", trial_count, years, mean, volatility)

    for _ in range(trial_count):
        returns = (mean + volatility * standard_normal(uniform) for _ in range(years))
        for idx, balance in enumerate(trial_path(params.initial_principal, contribution, returns)):
            balances_by_year[idx].append(balance)

    percentiles: list[SimulationPercentiles] = []
    for idx, balances in enumerate(balances_by_year):
        ordered = sorted(balances)
        p10, p50, p90 = (_percentile_value(ordered, pct) for pct in PERCENTILES)
        percentiles.append(
            SimulationPercentiles(
                year_index=idx,
                age=params.current_age + idx,
                p10=p10,
                p50=p50,
                p90=p90,
            )
        )

    return MonteCarloResult(seed=seed, trial_count=trial_count, percentiles=percentiles)
