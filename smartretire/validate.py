"""Semantic validation for calculation parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .currency import EXCHANGE_RATES
from .schema import (
    EVENT_EARLY_RETIREMENT,
    EVENT_KINDS,
    EVENT_MARKET_CRASH,
    EVENT_RETURN_REDUCTION,
    HOLDING_CATEGORIES,
    CalculationParams,
    Holding,
)

PERCENT_KINDS = {EVENT_MARKET_CRASH, EVENT_RETURN_REDUCTION}


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_enum(result: ValidationResult, path: str, value: str, allowed: Iterable[str]) -> None:
    allowed_set = set(allowed)
    if value not in allowed_set:
        expected = ", ".join(sorted(allowed_set))
        result.errors.append(f"{path}: '{value}' is not valid; expected one of [{expected}]")


def _check_min(result: ValidationResult, path: str, value: float, minimum: float) -> None:
    if value < minimum:
        result.errors.append(f"{path}: must be >= {minimum:g}")


def _check_holdings(
    result: ValidationResult,
    base: str,
    holdings: list[Holding],
    rates: Mapping[str, float],
) -> None:
    identifiers: set[str] = set()
    for idx, holding in enumerate(holdings):
        path = f"{base}[{idx}]"
        if holding.identifier in identifiers:
            result.errors.append(f"{path}.identifier: duplicate holding identifier '{holding.identifier}'")
        identifiers.add(holding.identifier)
        _check_enum(result, f"{path}.category", holding.category, HOLDING_CATEGORIES)
        _check_min(result, f"{path}.quantity", holding.quantity, 0)
        _check_min(result, f"{path}.unit_price", holding.unit_price, 0)
        _check_min(result, f"{path}.volatility_pct", holding.volatility_pct, 0)
        if holding.currency not in rates:
            result.warnings.append(
                f"{path}.currency: '{holding.currency}' has no exchange rate; valued 1:1 in base currency"
            )


def validate_params(params: CalculationParams, rates: Mapping[str, float] = EXCHANGE_RATES) -> ValidationResult:
    result = ValidationResult()

    _check_min(result, "current_age", params.current_age, 0)
    if params.retirement_age < params.current_age:
        result.warnings.append("retirement_age: already past retirement age; no contributions will be projected")
    _check_min(result, "initial_principal", params.initial_principal, 0)
    _check_min(result, "monthly_contribution", params.monthly_contribution, 0)
    _check_min(result, "annual_extra_contribution", params.annual_extra_contribution, 0)
    if params.inflation_rate <= -100:
        result.errors.append("inflation_rate: must be > -100")
    _check_min(result, "target_monthly_income", params.target_monthly_income, 0)
    _check_min(result, "target_annual_yield", params.target_annual_yield, 0)

    _check_holdings(result, "holdings", params.holdings, rates)
    _check_holdings(result, "simulated_holdings", params.simulated_holdings, rates)
    if not params.manual_override.enabled and not any(h.local_value > 0 for h in params.holdings):
        result.warnings.append("holdings: portfolio has no value; projected returns will be zero")

    mortgage = params.mortgage
    if mortgage.active:
        _check_min(result, "mortgage.remaining_principal", mortgage.remaining_principal, 0)
        _check_min(result, "mortgage.annual_rate_pct", mortgage.annual_rate_pct, 0)
        _check_min(result, "mortgage.remaining_term_months", mortgage.remaining_term_months, 0)
        _check_min(result, "mortgage.monthly_payment", mortgage.monthly_payment, 0)
        if mortgage.remaining_principal > 0 and mortgage.remaining_term_months <= 0:
            result.errors.append("mortgage.remaining_term_months: must be > 0 while principal remains")

    projection = params.projection
    if projection.life_expectancy <= params.current_age:
        result.warnings.append("projection.life_expectancy: not after current_age; projection will be empty")
    _check_min(result, "projection.early_retirement_offset_years", projection.early_retirement_offset_years, 0)

    early_sources = 1 if projection.early_retirement_offset_years else 0
    for idx, event in enumerate(projection.events):
        path = f"projection.events[{idx}]"
        _check_enum(result, f"{path}.kind", event.kind, EVENT_KINDS)
        _check_min(result, f"{path}.duration_years", event.duration_years, 1)
        if event.kind in PERCENT_KINDS and not 0 <= event.magnitude <= 100:
            result.errors.append(f"{path}.magnitude: must be between 0 and 100 for '{event.kind}'")
        if event.kind == EVENT_EARLY_RETIREMENT:
            early_sources += 1
    if early_sources > 1:
        result.errors.append("projection: at most one early retirement offset may be supplied")

    if params.monte_carlo.trials < 1:
        result.errors.append("monte_carlo.trials: must be >= 1")

    return result
