"""Mortgage amortization helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .schema import Mortgage


@dataclass(slots=True)
class MortgageState:
    balance: float
    monthly_payment: float
    months_remaining: int
    monthly_rate: float
    reinvest_after_payoff: bool

    @property
    def in_term(self) -> bool:
        return self.months_remaining > 0


def periodic_payment(annual_rate_pct: float, num_periods: int, principal: float) -> float:
    """Fixed monthly payment that retires ``principal`` over ``num_periods`` months.

    ``num_periods`` must be positive; callers validate the term first.
    """
    if annual_rate_pct == 0:
        return principal / num_periods
    monthly_rate = annual_rate_pct / 100.0 / 12.0
    return (principal * monthly_rate) / (1.0 - (1.0 + monthly_rate) ** (-num_periods))


def scheduled_payment(mortgage: Mortgage) -> float:
    if not mortgage.active or mortgage.remaining_principal <= 0 or mortgage.remaining_term_months <= 0:
        return 0.0
    if mortgage.monthly_payment > 0:
        return mortgage.monthly_payment
    return periodic_payment(mortgage.annual_rate_pct, mortgage.remaining_term_months, mortgage.remaining_principal)


def start_mortgage(mortgage: Mortgage) -> MortgageState:
    return MortgageState(
        balance=mortgage.remaining_principal if mortgage.active else 0.0,
        monthly_payment=scheduled_payment(mortgage),
        months_remaining=mortgage.remaining_term_months if mortgage.active else 0,
        monthly_rate=mortgage.annual_rate_pct / 100.0 / 12.0,
        reinvest_after_payoff=mortgage.active and mortgage.reinvest_after_payoff,
    )


def amortize_month(state: MortgageState) -> tuple[float, float]:
    """Apply one scheduled payment. Return (principal_paid, interest_paid)."""
    if not state.in_term:
        return 0.0, 0.0

    interest_component = state.balance * state.monthly_rate
    principal_component = state.monthly_payment - interest_component
    if state.balance > principal_component:
        state.balance -= principal_component
    else:
        principal_component = state.balance
        state.balance = 0.0
    state.months_remaining -= 1
    return principal_component, interest_component


def redirected_payment(state: MortgageState) -> float:
    """Former payment available for reinvestment once the term has run out."""
    if state.in_term or not state.reinvest_after_payoff:
        return 0.0
    return state.monthly_payment
