#!/usr/bin/env python3
"""CLI script to evaluate recorded extractions against the ground-truth dataset.

Usage:
    flight-eval --sample 10
    flight-eval --all --output report.json
    flight-eval --all --extractions evaluation_outputs --policy policy.json
"""

import argparse
import json
import logging
import sys

from ..config import get_settings
from ..exceptions import FlightEvalError
from ..services.dataset import FlightDatasetLoader, sample_test_cases
from ..services.extraction_store import ExtractionStore
from ..services.providers import create_provider
from .evaluator import Evaluator
from .policy import load_scoring_policy
from .types import EvaluationReport, FieldName

logger = logging.getLogger(__name__)


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def print_results(report: EvaluationReport, show_details: bool = True) -> None:
    """Pretty print an evaluation report.

    Args:
        report: Report to display
        show_details: Whether to show per-case grades
    """
    if not report.cases:
        print("No results to display.")
        return

    print("\n" + "=" * 80)
    print("EVALUATION RESULTS")
    print("=" * 80 + "\n")

    if show_details:
        for index, case in enumerate(report.cases, start=1):
            print(f"[{index}] {case.query} ({case.elapsed_seconds:.2f}s)")
            for field in FieldName:
                comparison = case.comparison[field]
                grade = "N/A" if comparison.grade is None else f"{comparison.grade:.1f}"
                extracted = case.extracted.get(field) or "null"
                expected = case.ground_truth.get(field) or "null"
                print(f"   {field.value:<22} {expected:<16} {extracted:<16} {grade}")
            if case.flags:
                print(f"   Flags: {', '.join(sorted(flag.value for flag in case.flags))}")
            if case.error:
                print(f"   Error: {case.error}")
            print()

    print("-" * 80)
    print("FIELD METRICS")
    print("-" * 80)
    for field, metrics in report.field_metrics.items():
        print(
            f"{field.value:<22} P={_pct(metrics.precision):>6}  R={_pct(metrics.recall):>6}  "
            f"F1={_pct(metrics.f1):>6}  ({metrics.correct_count}/{metrics.extracted_count}"
            f"/{metrics.total})"
        )
    print()

    summary = report.summary
    print("-" * 80)
    print("SUMMARY")
    print("-" * 80)
    print(f"Weighted F1:       {_pct(report.overall_score)}")
    print(f"Weighted grade:    {_pct(report.weighted_grade)}")
    print(f"Average grade:     {_pct(summary.avg_grade)}")
    print(f"Perfect matches:   {summary.perfect_matches}/{summary.total_cases}")
    print(f"Cases with data:   {summary.with_data}/{summary.total_cases}")
    print(f"Flagged for review: {summary.flagged_count}/{summary.total_cases}")
    print()


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Evaluate recorded flight extractions against the ground-truth dataset"
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--sample",
        type=int,
        default=settings.default_sample_size,
        help=f"Evaluate a random sample of N flights (default: {settings.default_sample_size})",
    )
    group.add_argument("--all", action="store_true", help="Evaluate every flight in the dataset")

    parser.add_argument("--seed", type=int, help="Random seed for sampling")
    parser.add_argument("--dataset", default=settings.dataset_path, help="Flights JSON file")
    parser.add_argument("--airports", default=settings.airports_path, help="Airports JSON file")
    parser.add_argument("--airlines", default=settings.airlines_path, help="Airlines JSON file")
    parser.add_argument(
        "--extractions",
        default=settings.extraction_store_dir,
        help="Directory of recorded extraction outputs",
    )
    parser.add_argument("--policy", default=settings.scoring_policy_path, help="Scoring policy JSON")
    parser.add_argument(
        "--workers", type=int, default=settings.evaluation_max_workers, help="Concurrent cases"
    )
    parser.add_argument("--output", type=str, help="Save the report to a JSON file")
    parser.add_argument("--quiet", action="store_true", help="Suppress per-case output")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = build_parser().parse_args(argv)

    try:
        policy = load_scoring_policy(args.policy)
        loader = FlightDatasetLoader(args.dataset, args.airports, args.airlines)
        test_cases = loader.load()
        if not args.all:
            test_cases = sample_test_cases(test_cases, args.sample, seed=args.seed)

        print(f"\n🚀 Evaluating {len(test_cases)} flight(s)...\n")

        provider = create_provider("recorded", store=ExtractionStore(args.extractions))
        evaluator = Evaluator(provider, policy)
        report = evaluator.run(test_cases, max_workers=args.workers)

        print_results(report, show_details=not args.quiet)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(report.model_dump(mode="json", by_alias=True), f, indent=2)
            print(f"✅ Results saved to {args.output}")

        print("\n✅ Evaluation complete!")
        return 0

    except FlightEvalError as e:
        logger.error(f"Evaluation failed: {e.message}", extra={"details": e.details})
        print(f"\n❌ Evaluation failed: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
