import copy
import json
from pathlib import Path

from smartretire.schema import CalculationParams, Holding


def write_params(tmp_path: Path, data: dict, filename: str = "params.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_params(data: dict) -> dict:
    return copy.deepcopy(data)


def make_holding(
    identifier: str = "h1",
    *,
    value: float = 100000.0,
    currency: str = "HKD",
    category: str = "equity",
    expected_return_pct: float = 0.0,
    dividend_yield_pct: float = 0.0,
    volatility_pct: float = 0.0,
) -> Holding:
    return Holding(
        identifier=identifier,
        name=identifier,
        category=category,
        currency=currency,
        quantity=1.0,
        unit_price=value,
        expected_return_pct=expected_return_pct,
        dividend_yield_pct=dividend_yield_pct,
        volatility_pct=volatility_pct,
    )


def make_params(**overrides) -> CalculationParams:
    values = {
        "current_age": 30,
        "retirement_age": 65,
        "initial_principal": 100000.0,
        "holdings": [make_holding()],
    }
    values.update(overrides)
    return CalculationParams(**values)
