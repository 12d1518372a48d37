"""CLI entry point for SmartRetire."""

from __future__ import annotations

import argparse
import logging
import sys

from .benchmark import compare_to_benchmark
from .engine import EventError, run_projection
from .gap import analyze_params_gap, project_target_portfolio
from .goals import passive_income_progress
from .portfolio import aggregate_portfolio, portfolio_statistics
from .report import (
    gap_summary,
    household_summary,
    monte_carlo_summary,
    projection_summary,
    render_gap_csv,
    render_percentiles_csv,
    render_projection_csv,
    render_stress_csv,
    stress_summary,
    write_report,
)
from .schema import CalculationParams, SchemaError, load_params
from .simulation import run_monte_carlo
from .stress import run_stress_tests
from .validate import validate_params

logger = logging.getLogger(__name__)

MODES = ["projection", "monte_carlo", "stress", "gap"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SmartRetire retirement projection calculator")
    parser.add_argument("params", help="Path to parameter JSON file")
    parser.add_argument("--mode", choices=MODES, default="projection", help="Calculation to run (default: projection)")
    parser.add_argument("-o", "--output", help="Output CSV path (default: stdout)")
    parser.add_argument("--runs", type=int, help="Override Monte Carlo trial count")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--life-expectancy", type=int, help="Override projection life expectancy")
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def _run_mode(params: CalculationParams, args: argparse.Namespace) -> tuple[str, list[str]]:
    life_expectancy = args.life_expectancy or params.projection.life_expectancy

    if args.mode == "projection":
        results = run_projection(
            params,
            params.projection.events,
            life_expectancy,
            early_retirement_offset_years=params.projection.early_retirement_offset_years,
        )
        progress = passive_income_progress(
            portfolio_statistics(params.holdings),
            params.target_monthly_income,
            params.target_annual_yield,
        )
        summary = projection_summary(results, params.target_monthly_income)
        summary += household_summary(progress, compare_to_benchmark(params))
        return render_projection_csv(results), summary

    if args.mode == "monte_carlo":
        trials = args.runs if args.runs is not None else params.monte_carlo.trials
        seed = args.seed if args.seed is not None else params.monte_carlo.seed
        result = run_monte_carlo(params, trials, seed=seed)
        return render_percentiles_csv(result.percentiles), monte_carlo_summary(result) + [f"Seed: {result.seed}"]

    if args.mode == "stress":
        outcomes = run_stress_tests(params, life_expectancy=life_expectancy)
        return render_stress_csv(outcomes), stress_summary(outcomes)

    gap = analyze_params_gap(params)
    target_results = project_target_portfolio(params, life_expectancy)
    allocations = aggregate_portfolio(params.holdings).holdings
    return render_gap_csv(gap), gap_summary(gap, target_results, allocations)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.runs is not None and args.runs < 1:
        print("--runs must be >= 1", file=sys.stderr)
        return 2

    try:
        params = load_params(args.params)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load params: {exc}", file=sys.stderr)
        return 2

    validation = validate_params(params)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Parameters are valid.")
        return 0

    logger.info("Running %s for %s", args.mode, args.params)
    try:
        content, summary = _run_mode(params, args)
    except EventError as exc:
        print(f"Invalid events: {exc}", file=sys.stderr)
        return 1

    if args.output:
        write_report(args.output, content)
        print(f"Wrote {args.mode} results to {args.output}")
    else:
        sys.stdout.write(content)

    if args.summary:
        for line in summary:
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
