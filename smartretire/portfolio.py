"""Value-weighted portfolio statistics."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping

from .currency import EXCHANGE_RATES, to_base
from .schema import Holding


@dataclass(slots=True, frozen=True)
class PortfolioStatistics:
    weighted_return_pct: float = 0.0
    weighted_yield_pct: float = 0.0
    weighted_volatility_pct: float = 0.0
    total_value: float = 0.0


@dataclass(slots=True, frozen=True)
class PortfolioAggregate:
    statistics: PortfolioStatistics
    holdings: list[Holding]


def base_value(holding: Holding, rates: Mapping[str, float] = EXCHANGE_RATES) -> float:
    return to_base(holding.local_value, holding.currency, rates)


def aggregate_portfolio(
    holdings: Iterable[Holding],
    rates: Mapping[str, float] = EXCHANGE_RATES,
) -> PortfolioAggregate:
    """Return weighted statistics and copies of ``holdings`` annotated with ``allocation_pct``.

    The inputs are left untouched. An empty or all-zero portfolio yields zero
    statistics rather than dividing by zero.
    """
    items = list(holdings)
    values = [base_value(holding, rates) for holding in items]
    total = sum(values)

    if total == 0:
        return PortfolioAggregate(
            statistics=PortfolioStatistics(),
            holdings=[replace(holding, allocation_pct=0.0) for holding in items],
        )

    weighted_return = 0.0
    weighted_yield = 0.0
    weighted_volatility = 0.0
    annotated: list[Holding] = []
    for holding, value in zip(items, values):
        weight = value / total
        weighted_return += holding.expected_return_pct * weight
        weighted_yield += holding.dividend_yield_pct * weight
        weighted_volatility += holding.volatility_pct * weight
        annotated.append(replace(holding, allocation_pct=round(weight * 100.0, 1)))

    return PortfolioAggregate(
        statistics=PortfolioStatistics(
            weighted_return_pct=weighted_return,
            weighted_yield_pct=weighted_yield,
            weighted_volatility_pct=weighted_volatility,
            total_value=total,
        ),
        holdings=annotated,
    )


def portfolio_statistics(
    holdings: Iterable[Holding],
    rates: Mapping[str, float] = EXCHANGE_RATES,
) -> PortfolioStatistics:
    return aggregate_portfolio(holdings, rates).statistics
