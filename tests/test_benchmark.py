import pytest

from smartretire.benchmark import HK_BENCHMARKS, AgeBenchmark, benchmark_for_age, compare_to_benchmark, rank_label
from smartretire.schema import load_params
from tests.helpers import make_params, write_params


@pytest.mark.parametrize(
    "age, bracket",
    [(20, "20-24"), (34, "30-34"), (50, "50-59"), (59, "50-59"), (60, "60+"), (100, "60+")],
)
def test_benchmark_for_age_picks_bracket(age, bracket):
    assert benchmark_for_age(age).age_range == bracket


def test_ages_outside_table_fall_back_to_last_bracket():
    assert benchmark_for_age(18) == HK_BENCHMARKS[-1]
    assert benchmark_for_age(105) == HK_BENCHMARKS[-1]


@pytest.mark.parametrize(
    "ratio, label",
    [
        (3.0, "top_5"),
        (2.5, "top_10"),
        (1.9, "top_10"),
        (1.8, "above_average"),
        (1.0, "average"),
        (0.8, "below_average"),
        (0.0, "below_average"),
    ],
)
def test_rank_thresholds_are_strict(ratio, label):
    assert rank_label(ratio) == label


def test_sample_household_ranking(tmp_path, sample_params_dict):
    params = load_params(write_params(tmp_path, sample_params_dict))
    comparison = compare_to_benchmark(params)

    assert comparison.benchmark.age_range == "30-34"
    assert comparison.income_ratio == pytest.approx(35_000 / 25_800)
    assert comparison.income_rank == "above_average"
    assert comparison.asset_ratio == pytest.approx(1_115_000 / 600_000)
    assert comparison.asset_rank == "top_10"


def test_custom_benchmark_table():
    table = [AgeBenchmark("any", 0, 120, 10_000, 100_000, 20_000, 400_000)]
    params = make_params(monthly_income=30_000, initial_principal=50_000.0)
    comparison = compare_to_benchmark(params, table)

    assert comparison.income_rank == "top_5"
    assert comparison.asset_rank == "below_average"
