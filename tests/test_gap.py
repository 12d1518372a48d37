import pytest

from smartretire.engine import run_projection
from smartretire.gap import (
    CONSERVATIVE_YIELD_PCT,
    analyze_gap,
    analyze_params_gap,
    future_value,
    project_target_portfolio,
    target_params,
)
from smartretire.portfolio import PortfolioStatistics, portfolio_statistics
from smartretire.schema import ManualOverride, load_params
from tests.helpers import make_holding, make_params, write_params


def _stats(total, return_pct=0.0, yield_pct=0.0):
    return PortfolioStatistics(weighted_return_pct=return_pct, weighted_yield_pct=yield_pct, total_value=total)


def test_future_value_compounds_return_and_yield():
    assert future_value(_stats(100.0, 6.0, 4.0), 2) == pytest.approx(121.0)
    assert future_value(_stats(100.0, 6.0, 4.0), 0) == 100.0


def test_identical_portfolios_have_no_gap():
    stats = _stats(500_000.0, 5.0, 2.0)
    gap = analyze_gap(stats, stats, 20)

    assert gap.shortfall == 0.0
    assert gap.suggested_makeup_amount == 0.0
    assert gap.assumed_conservative_yield == CONSERVATIVE_YIELD_PCT


def test_shortfall_is_discounted_at_conservative_yield():
    gap = analyze_gap(_stats(100.0), _stats(100.0, 10.0), 2)

    assert gap.shortfall == pytest.approx(21.0)
    assert gap.suggested_makeup_amount == pytest.approx(21.0 / 1.045**2)
    assert gap.suggested_makeup_amount == pytest.approx(19.23, abs=0.01)


def test_actual_ahead_of_target_needs_no_makeup():
    gap = analyze_gap(_stats(100.0, 10.0), _stats(100.0), 5)

    assert gap.shortfall < 0
    assert gap.suggested_makeup_amount == 0.0


def test_params_gap_uses_years_to_retirement(tmp_path, sample_params_dict):
    params = load_params(write_params(tmp_path, sample_params_dict))
    gap = analyze_params_gap(params)

    assert gap.shortfall == pytest.approx(
        future_value(portfolio_statistics(params.simulated_holdings), 35)
        - future_value(portfolio_statistics(params.holdings), 35)
    )


def test_params_gap_after_retirement_age_compares_present_values():
    params = make_params(
        current_age=70,
        retirement_age=65,
        holdings=[make_holding(value=100.0)],
        simulated_holdings=[make_holding(value=150.0, expected_return_pct=8)],
    )
    gap = analyze_params_gap(params)

    assert gap.shortfall == pytest.approx(50.0)
    assert gap.suggested_makeup_amount == pytest.approx(50.0)


def test_target_projection_ignores_manual_override():
    params = make_params(
        holdings=[make_holding(value=100_000.0, expected_return_pct=2)],
        simulated_holdings=[make_holding("sim", value=200_000.0, expected_return_pct=12)],
        manual_override=ManualOverride(enabled=True, return_rate=0, dividend_yield=0),
    )

    target = target_params(params)
    assert target.initial_principal == 200_000.0
    assert not target.manual_override.enabled
    assert params.manual_override.enabled

    results = project_target_portfolio(params, 31)
    assert results[1].total_balance == round(200_000 * 1.01**12)
    assert results == run_projection(target, [], 31)
