"""Run test cases through an extraction provider and score the results.

This module handles:
- Invoking the extraction provider per test case (timed)
- Turning provider failures into an all-missing record, so failures score
  as wrong answers instead of aborting the batch
- Comparing every field and deriving review flags
- Aggregating the batch into an EvaluationReport
"""

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ..exceptions import ExtractionProviderError
from ..services.dataset import TestCase
from ..services.providers import ExtractionProvider
from .comparator import compare_all_fields
from .metrics import build_report, flag_for_review
from .policy import DEFAULT_POLICY, ScoringPolicy
from .types import EvaluationCase, EvaluationReport, FlightRecord

logger = logging.getLogger(__name__)


def build_case(
    case_id: str,
    query: str,
    ground_truth: FlightRecord,
    extracted: FlightRecord,
    elapsed_seconds: float = 0.0,
    error: str | None = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> EvaluationCase:
    """Compare an extracted record with its ground truth and flag anomalies.

    Args:
        case_id: Identifier of the test case
        query: Query that was sent to the provider
        ground_truth: Verified flight record
        extracted: Provider output
        elapsed_seconds: Time the provider took
        error: Provider error message, if extraction failed
        policy: Scoring policy

    Returns:
        Immutable EvaluationCase with 7 comparisons and its review flags
    """
    case = EvaluationCase(
        case_id=case_id,
        query=query,
        ground_truth=ground_truth,
        extracted=extracted,
        comparison=compare_all_fields(extracted, ground_truth, policy),
        elapsed_seconds=elapsed_seconds,
        error=error,
    )
    return case.model_copy(update={"flags": flag_for_review(case, policy)})


class Evaluator:
    """Orchestrate evaluation of an extraction provider against ground truth.

    Examples:
        >>> evaluator = Evaluator(provider)
        >>> cases = evaluator.evaluate_batch(test_cases)
        >>> report = evaluator.build_report(cases)
        >>> print(f"{report.overall_score:.1%}")
    """

    def __init__(self, provider: ExtractionProvider, policy: ScoringPolicy | None = None):
        """Initialize evaluator.

        Args:
            provider: Source of extracted flight records
            policy: Scoring policy (defaults to DEFAULT_POLICY)
        """
        self.provider = provider
        self.policy = policy or DEFAULT_POLICY

    def evaluate_case(self, test_case: TestCase) -> EvaluationCase:
        """Run one test case through the provider and score it.

        Provider errors are logged and recorded on the case; the case is
        scored against an empty record.
        """
        start_time = time.perf_counter()
        error = None

        try:
            extracted = self.provider.extract(test_case.query)
        except ExtractionProviderError as e:
            logger.error(f"Extraction failed for {test_case.case_id}: {e.message}")
            extracted = FlightRecord.empty()
            error = e.message
        except Exception as e:
            logger.error(f"Unexpected provider error for {test_case.case_id}: {e}", exc_info=True)
            extracted = FlightRecord.empty()
            error = f"{type(e).__name__}: {e}"

        elapsed = time.perf_counter() - start_time

        case = build_case(
            case_id=test_case.case_id,
            query=test_case.query,
            ground_truth=test_case.ground_truth,
            extracted=extracted,
            elapsed_seconds=elapsed,
            error=error,
            policy=self.policy,
        )

        logger.info(
            f"Evaluated {case.case_id} in {elapsed:.2f}s "
            f"(flags={sorted(flag.value for flag in case.flags)})"
        )
        return case

    def evaluate_batch(
        self, test_cases: Sequence[TestCase], max_workers: int = 1
    ) -> list[EvaluationCase]:
        """Evaluate several test cases.

        Args:
            test_cases: Cases to run
            max_workers: Number of concurrent provider calls (1 = sequential)

        Returns:
            EvaluationCases in the same order as ``test_cases``
        """
        logger.info(f"Evaluating {len(test_cases)} test cases (workers={max_workers})")

        if max_workers <= 1 or len(test_cases) <= 1:
            return [self.evaluate_case(test_case) for test_case in test_cases]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.evaluate_case, test_cases))

    def build_report(self, cases: Sequence[EvaluationCase]) -> EvaluationReport:
        """Aggregate a complete batch into metrics."""
        return build_report(cases, self.policy)

    def run(self, test_cases: Sequence[TestCase], max_workers: int = 1) -> EvaluationReport:
        """Evaluate all test cases, then aggregate."""
        return self.build_report(self.evaluate_batch(test_cases, max_workers=max_workers))
