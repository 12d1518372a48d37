import pytest

from smartretire.mortgage import (
    MortgageState,
    amortize_month,
    periodic_payment,
    redirected_payment,
    scheduled_payment,
    start_mortgage,
)
from smartretire.schema import Mortgage


@pytest.mark.parametrize("periods", [1, 12, 240, 360])
def test_zero_rate_payment_is_straight_line(periods):
    assert periodic_payment(0, periods, 4_000_000) == 4_000_000 / periods


def test_fixed_payment_formula():
    assert periodic_payment(3.5, 240, 4_000_000) == pytest.approx(23198.4, abs=1.0)


def test_payment_retires_principal_over_term():
    state = MortgageState(
        balance=100_000.0,
        monthly_payment=periodic_payment(6.0, 24, 100_000.0),
        months_remaining=24,
        monthly_rate=0.005,
        reinvest_after_payoff=False,
    )
    for _ in range(23):
        amortize_month(state)
    assert state.balance == pytest.approx(state.monthly_payment / 1.005, rel=1e-9)

    amortize_month(state)
    assert state.balance == pytest.approx(0.0, abs=1e-6)
    assert not state.in_term


@pytest.mark.parametrize("rate", [0.0, 4.0])
def test_zero_periods_is_an_unguarded_precondition(rate):
    with pytest.raises(ZeroDivisionError):
        periodic_payment(rate, 0, 100_000)


def test_payoff_floors_balance_at_zero():
    state = start_mortgage(Mortgage(active=True, remaining_principal=1000, remaining_term_months=12, monthly_payment=600))

    paid = [amortize_month(state)[0] for _ in range(3)]

    assert [round(p, 2) for p in paid] == [600.0, 400.0, 0.0]
    assert state.balance == 0.0
    assert state.months_remaining == 9


def test_scheduled_payment_derives_when_not_supplied():
    derived = Mortgage(active=True, remaining_principal=12_000, remaining_term_months=12)
    supplied = Mortgage(active=True, remaining_principal=12_000, remaining_term_months=12, monthly_payment=1500)

    assert scheduled_payment(derived) == 1000.0
    assert scheduled_payment(supplied) == 1500.0
    assert scheduled_payment(Mortgage(active=False, remaining_principal=12_000, remaining_term_months=12)) == 0.0


def test_inactive_mortgage_starts_empty():
    state = start_mortgage(Mortgage(remaining_principal=500_000, remaining_term_months=120, reinvest_after_payoff=True))

    assert state.balance == 0.0
    assert state.monthly_payment == 0.0
    assert not state.in_term
    assert redirected_payment(state) == 0.0


def test_payment_is_redirected_only_after_term_and_when_enabled():
    mortgage = Mortgage(active=True, remaining_principal=1200, remaining_term_months=2, reinvest_after_payoff=True)
    state = start_mortgage(mortgage)

    assert redirected_payment(state) == 0.0
    amortize_month(state)
    amortize_month(state)
    assert redirected_payment(state) == 600.0

    mortgage.reinvest_after_payoff = False
    kept = start_mortgage(mortgage)
    amortize_month(kept)
    amortize_month(kept)
    assert redirected_payment(kept) == 0.0
