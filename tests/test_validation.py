import pytest

from smartretire.schema import load_params
from smartretire.validate import validate_params
from tests.helpers import clone_params, make_holding, make_params, write_params


def _run_validation(tmp_path, sample_params_dict, mutator):
    data = clone_params(sample_params_dict)
    mutator(data)
    path = write_params(tmp_path, data)
    return validate_params(load_params(path))


def test_sample_params_validate(tmp_path, sample_params_dict):
    result = _run_validation(tmp_path, sample_params_dict, lambda d: None)
    assert result.errors == []
    assert result.warnings == []
    assert result.is_valid


@pytest.mark.parametrize(
    ("mutator", "expected_error"),
    [
        (lambda d: d.update({"current_age": -1}), "current_age: must be >= 0"),
        (lambda d: d.update({"initial_principal": -5}), "initial_principal: must be >= 0"),
        (lambda d: d.update({"monthly_contribution": -100}), "monthly_contribution: must be >= 0"),
        (lambda d: d.update({"inflation_rate": -100}), "inflation_rate: must be > -100"),
        (
            lambda d: d["holdings"][1].update({"identifier": "1"}),
            "holdings[1].identifier: duplicate holding identifier '1'",
        ),
        (
            lambda d: d["holdings"][0].update({"category": "stocks"}),
            "holdings[0].category: 'stocks' is not valid; expected one of "
            "[bond, cash, commodity, crypto, equity, real_estate]",
        ),
        (lambda d: d["holdings"][3].update({"quantity": -1}), "holdings[3].quantity: must be >= 0"),
        (
            lambda d: d["simulated_holdings"][0].update({"volatility_pct": -2}),
            "simulated_holdings[0].volatility_pct: must be >= 0",
        ),
        (
            lambda d: d["mortgage"].update({"remaining_term_months": 0}),
            "mortgage.remaining_term_months: must be > 0 while principal remains",
        ),
        (lambda d: d["mortgage"].update({"annual_rate_pct": -1}), "mortgage.annual_rate_pct: must be >= 0"),
        (
            lambda d: d["projection"]["events"][0].update({"kind": "lottery_win"}),
            "projection.events[0].kind: 'lottery_win' is not valid; expected one of "
            "[early_retirement, market_crash, one_time_expense, recurring_expense, "
            "return_reduction, stop_contributions]",
        ),
        (
            lambda d: d["projection"]["events"][0].update({"duration_years": 0}),
            "projection.events[0].duration_years: must be >= 1",
        ),
        (
            lambda d: d["projection"]["events"][0].update({"kind": "market_crash", "magnitude": 140}),
            "projection.events[0].magnitude: must be between 0 and 100 for 'market_crash'",
        ),
        (
            lambda d: d["projection"].update(
                {
                    "early_retirement_offset_years": 3,
                    "events": [{"start_age": 60, "kind": "early_retirement", "magnitude": 2}],
                }
            ),
            "projection: at most one early retirement offset may be supplied",
        ),
        (lambda d: d["monte_carlo"].update({"trials": 0}), "monte_carlo.trials: must be >= 1"),
    ],
)
def test_validation_errors(tmp_path, sample_params_dict, mutator, expected_error):
    result = _run_validation(tmp_path, sample_params_dict, mutator)
    assert expected_error in result.errors
    assert not result.is_valid


def test_inactive_mortgage_is_not_checked(tmp_path, sample_params_dict):
    def mutator(data):
        data["mortgage"].update({"active": False, "remaining_term_months": 0})

    result = _run_validation(tmp_path, sample_params_dict, mutator)
    assert result.errors == []


def test_unknown_currency_is_a_warning():
    params = make_params(holdings=[make_holding(currency="CHF")])
    result = validate_params(params)

    assert result.is_valid
    assert result.warnings == ["holdings[0].currency: 'CHF' has no exchange rate; valued 1:1 in base currency"]


def test_empty_portfolio_and_short_horizon_warn():
    params = make_params(current_age=90, retirement_age=65, holdings=[])
    result = validate_params(params)

    assert result.is_valid
    assert "retirement_age: already past retirement age; no contributions will be projected" in result.warnings
    assert "holdings: portfolio has no value; projected returns will be zero" in result.warnings
    assert "projection.life_expectancy: not after current_age; projection will be empty" in result.warnings


def test_custom_rate_table_controls_currency_warnings():
    params = make_params(holdings=[make_holding(currency="CHF")])
    assert validate_params(params, {"HKD": 1.0, "CHF": 8.9}).warnings == []
