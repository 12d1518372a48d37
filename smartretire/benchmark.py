"""Hong Kong peer benchmarks by age bracket."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence

from .schema import CalculationParams


@dataclass(slots=True, frozen=True)
class AgeBenchmark:
    age_range: str
    min_age: int
    max_age: int
    median_income: float
    median_assets: float
    top10_income: float
    top10_assets: float


@dataclass(slots=True, frozen=True)
class BenchmarkComparison:
    benchmark: AgeBenchmark
    income_ratio: float
    asset_ratio: float
    income_rank: str
    asset_rank: str


# Monthly income and total assets in HKD, estimated from census and wealth reports.
HK_BENCHMARKS: Final[tuple[AgeBenchmark, ...]] = (
    AgeBenchmark("20-24", 20, 24, 16_500, 80_000, 28_000, 350_000),
    AgeBenchmark("25-29", 25, 29, 21_500, 250_000, 45_000, 1_200_000),
    AgeBenchmark("30-34", 30, 34, 25_800, 600_000, 65_000, 2_500_000),
    AgeBenchmark("35-39", 35, 39, 30_500, 1_200_000, 85_000, 5_000_000),
    AgeBenchmark("40-44", 40, 44, 33_000, 2_200_000, 95_000, 8_000_000),
    AgeBenchmark("45-49", 45, 49, 34_500, 3_500_000, 100_000, 12_000_000),
    AgeBenchmark("50-59", 50, 59, 32_000, 4_500_000, 90_000, 15_000_000),
    AgeBenchmark("60+", 60, 100, 20_000, 5_000_000, 60_000, 20_000_000),
)

# (ratio to median strictly above, label), checked in order.
RANK_THRESHOLDS: Final[tuple[tuple[float, str], ...]] = (
    (2.5, "top_5"),
    (1.8, "top_10"),
    (1.2, "above_average"),
    (0.8, "average"),
)


def benchmark_for_age(age: int, table: Sequence[AgeBenchmark] = HK_BENCHMARKS) -> AgeBenchmark:
    for row in table:
        if row.min_age <= age <= row.max_age:
            return row
    return table[-1]


def rank_label(ratio: float) -> str:
    for threshold, label in RANK_THRESHOLDS:
        if ratio > threshold:
            return label
    return "below_average"


def compare_to_benchmark(
    params: CalculationParams,
    table: Sequence[AgeBenchmark] = HK_BENCHMARKS,
) -> BenchmarkComparison:
    benchmark = benchmark_for_age(params.current_age, table)
    income_ratio = params.monthly_income / benchmark.median_income
    asset_ratio = params.initial_principal / benchmark.median_assets
    return BenchmarkComparison(
        benchmark=benchmark,
        income_ratio=income_ratio,
        asset_ratio=asset_ratio,
        income_rank=rank_label(income_ratio),
        asset_rank=rank_label(asset_ratio),
    )
