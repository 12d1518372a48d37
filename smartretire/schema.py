"""Parameter schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

HOLDING_CATEGORIES = {"equity", "bond", "cash", "crypto", "real_estate", "commodity"}

EVENT_STOP_CONTRIBUTIONS = "stop_contributions"
EVENT_ONE_TIME_EXPENSE = "one_time_expense"
EVENT_RECURRING_EXPENSE = "recurring_expense"
EVENT_MARKET_CRASH = "market_crash"
EVENT_RETURN_REDUCTION = "return_reduction"
EVENT_EARLY_RETIREMENT = "early_retirement"

EVENT_KINDS = {
    EVENT_STOP_CONTRIBUTIONS,
    EVENT_ONE_TIME_EXPENSE,
    EVENT_RECURRING_EXPENSE,
    EVENT_MARKET_CRASH,
    EVENT_RETURN_REDUCTION,
    EVENT_EARLY_RETIREMENT,
}

DEFAULT_LIFE_EXPECTANCY = 85
DEFAULT_TRIAL_COUNT = 500


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    return float(value)


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise SchemaError(f"{path}: expected string")
    return value


@dataclass(slots=True)
class Holding:
    identifier: str
    name: str
    category: str
    currency: str
    quantity: float
    unit_price: float
    expected_return_pct: float
    dividend_yield_pct: float
    volatility_pct: float
    symbol: str | None = None
    region: str | None = None
    allocation_pct: float | None = None

    @property
    def local_value(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "Holding":
        return cls(
            identifier=str(_require(data, "identifier", path)),
            name=_optional(data, "name") or str(data.get("identifier", "")),
            category=_string(_require(data, "category", path), f"{path}.category"),
            currency=_string(_optional(data, "currency", "HKD"), f"{path}.currency"),
            quantity=_number(_optional(data, "quantity", 0), f"{path}.quantity"),
            unit_price=_number(_require(data, "unit_price", path), f"{path}.unit_price"),
            expected_return_pct=_number(_require(data, "expected_return_pct", path), f"{path}.expected_return_pct"),
            dividend_yield_pct=_number(_optional(data, "dividend_yield_pct", 0), f"{path}.dividend_yield_pct"),
            volatility_pct=_number(_optional(data, "volatility_pct", 0), f"{path}.volatility_pct"),
            symbol=_optional(data, "symbol"),
            region=_optional(data, "region"),
        )


@dataclass(slots=True)
class Mortgage:
    active: bool = False
    remaining_principal: float = 0.0
    annual_rate_pct: float = 0.0
    remaining_term_months: int = 0
    # 0 means the payment is derived from principal, rate and term.
    monthly_payment: float = 0.0
    reinvest_after_payoff: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "mortgage") -> "Mortgage":
        return cls(
            active=bool(_optional(data, "active", False)),
            remaining_principal=_number(_optional(data, "remaining_principal", 0), f"{path}.remaining_principal"),
            annual_rate_pct=_number(_optional(data, "annual_rate_pct", 0), f"{path}.annual_rate_pct"),
            remaining_term_months=int(_number(_optional(data, "remaining_term_months", 0), f"{path}.remaining_term_months")),
            monthly_payment=_number(_optional(data, "monthly_payment", 0), f"{path}.monthly_payment"),
            reinvest_after_payoff=bool(_optional(data, "reinvest_after_payoff", False)),
        )


@dataclass(slots=True)
class LifecycleEvent:
    start_age: int
    kind: str
    magnitude: float
    duration_years: int = 1
    name: str | None = None

    def is_active(self, age: int) -> bool:
        return self.start_age <= age < self.start_age + self.duration_years

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "LifecycleEvent":
        return cls(
            start_age=int(_number(_require(data, "start_age", path), f"{path}.start_age")),
            kind=_string(_require(data, "kind", path), f"{path}.kind"),
            magnitude=_number(_optional(data, "magnitude", 0), f"{path}.magnitude"),
            duration_years=int(_number(_optional(data, "duration_years", 1), f"{path}.duration_years")),
            name=_optional(data, "name"),
        )


@dataclass(slots=True)
class ManualOverride:
    enabled: bool = False
    return_rate: float = 0.0
    dividend_yield: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "manual_override") -> "ManualOverride":
        return cls(
            enabled=bool(_optional(data, "enabled", False)),
            return_rate=_number(_optional(data, "return_rate", 0), f"{path}.return_rate"),
            dividend_yield=_number(_optional(data, "dividend_yield", 0), f"{path}.dividend_yield"),
        )


@dataclass(slots=True)
class ProjectionSettings:
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY
    early_retirement_offset_years: float = 0.0
    events: list[LifecycleEvent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "projection") -> "ProjectionSettings":
        return cls(
            life_expectancy=int(_number(_optional(data, "life_expectancy", DEFAULT_LIFE_EXPECTANCY), f"{path}.life_expectancy")),
            early_retirement_offset_years=_number(
                _optional(data, "early_retirement_offset_years", 0), f"{path}.early_retirement_offset_years"
            ),
            events=[
                LifecycleEvent.from_dict(_expect_dict(item, f"{path}.events[{idx}]"), f"{path}.events[{idx}]")
                for idx, item in enumerate(_expect_list(_optional(data, "events", []), f"{path}.events"))
            ],
        )


@dataclass(slots=True)
class MonteCarloSettings:
    trials: int = DEFAULT_TRIAL_COUNT
    seed: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "monte_carlo") -> "MonteCarloSettings":
        seed = _optional(data, "seed")
        return cls(
            trials=int(_number(_optional(data, "trials", DEFAULT_TRIAL_COUNT), f"{path}.trials")),
            seed=int(seed) if seed is not None else None,
        )


@dataclass(slots=True)
class CalculationParams:
    current_age: int
    retirement_age: int
    initial_principal: float
    holdings: list[Holding]
    monthly_contribution: float = 0.0
    annual_extra_contribution: float = 0.0
    inflation_rate: float = 0.0
    manual_override: ManualOverride = field(default_factory=ManualOverride)
    mortgage: Mortgage = field(default_factory=Mortgage)
    simulated_holdings: list[Holding] = field(default_factory=list)
    monthly_income: float = 0.0
    target_monthly_income: float = 0.0
    target_annual_yield: float = 0.0
    projection: ProjectionSettings = field(default_factory=ProjectionSettings)
    monte_carlo: MonteCarloSettings = field(default_factory=MonteCarloSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalculationParams":
        return cls(
            current_age=int(_number(_require(data, "current_age", "params"), "current_age")),
            retirement_age=int(_number(_require(data, "retirement_age", "params"), "retirement_age")),
            initial_principal=_number(_require(data, "initial_principal", "params"), "initial_principal"),
            holdings=[
                Holding.from_dict(_expect_dict(item, f"holdings[{idx}]"), f"holdings[{idx}]")
                for idx, item in enumerate(_expect_list(_require(data, "holdings", "params"), "holdings"))
            ],
            monthly_contribution=_number(_optional(data, "monthly_contribution", 0), "monthly_contribution"),
            annual_extra_contribution=_number(_optional(data, "annual_extra_contribution", 0), "annual_extra_contribution"),
            inflation_rate=_number(_optional(data, "inflation_rate", 0), "inflation_rate"),
            manual_override=ManualOverride.from_dict(
                _expect_dict(_optional(data, "manual_override", {}), "manual_override")
            ),
            mortgage=Mortgage.from_dict(_expect_dict(_optional(data, "mortgage", {}), "mortgage")),
            simulated_holdings=[
                Holding.from_dict(_expect_dict(item, f"simulated_holdings[{idx}]"), f"simulated_holdings[{idx}]")
                for idx, item in enumerate(
                    _expect_list(_optional(data, "simulated_holdings", []), "simulated_holdings")
                )
            ],
            monthly_income=_number(_optional(data, "monthly_income", 0), "monthly_income"),
            target_monthly_income=_number(_optional(data, "target_monthly_income", 0), "target_monthly_income"),
            target_annual_yield=_number(_optional(data, "target_annual_yield", 0), "target_annual_yield"),
            projection=ProjectionSettings.from_dict(_expect_dict(_optional(data, "projection", {}), "projection")),
            monte_carlo=MonteCarloSettings.from_dict(_expect_dict(_optional(data, "monte_carlo", {}), "monte_carlo")),
        )


def load_params(path: str | Path) -> CalculationParams:
    """Load a parameter JSON file into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("params: root must be a JSON object")
    return CalculationParams.from_dict(raw)
