"""Static exchange rates and base-currency conversion."""

from __future__ import annotations

from typing import Final, Mapping

BASE_CURRENCY: Final[str] = "HKD"

# Units of base currency per unit of the keyed currency.
EXCHANGE_RATES: Final[dict[str, float]] = {
    "HKD": 1.0,
    "USD": 7.80,
    "CNY": 1.08,
    "JPY": 0.052,
    "GBP": 9.85,
    "EUR": 8.45,
}


def rate_for(currency: str, rates: Mapping[str, float] = EXCHANGE_RATES) -> float:
    # Unknown codes are treated as already in base currency.
    return rates.get(currency) or 1.0


def to_base(amount: float, currency: str, rates: Mapping[str, float] = EXCHANGE_RATES) -> float:
    return amount * rate_for(currency, rates)
