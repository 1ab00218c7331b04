"""Unit tests for the evaluation driver."""

from unittest.mock import MagicMock

import pytest

from flight_eval.evaluation.evaluator import Evaluator, build_case
from flight_eval.evaluation.policy import ScoringPolicy
from flight_eval.evaluation.types import FieldName, FlightRecord, ReviewFlag
from flight_eval.exceptions import ExtractionProviderError
from flight_eval.services.dataset import TestCase
from flight_eval.services.providers import ExtractionProvider, StaticExtractionProvider


@pytest.fixture
def test_case(ground_truth):
    """Southwest LAS -> ABQ test case."""
    return TestCase(
        case_id="WN1234-16-12-2025",
        query="Las Vegas to Albuquerque on 16-12-2025 with Southwest",
        ground_truth=ground_truth,
        airline_name="Southwest",
        origin="Las Vegas",
        destination="Albuquerque",
    )


@pytest.fixture
def mock_provider():
    """Mock provider spec'd on the abstract interface."""
    provider = MagicMock(spec=ExtractionProvider)
    provider.name = "mock"
    return provider


class TestBuildCase:
    """Test case construction."""

    def test_compares_all_fields_and_flags(self, ground_truth):
        extracted = FlightRecord(airline_code="WN", flight_time="01:30")

        case = build_case("c1", "query", ground_truth, extracted)

        assert set(case.comparison) == set(FieldName)
        assert ReviewFlag.AIRCRAFT_MISSING in case.flags
        assert ReviewFlag.LOW_QUALITY in case.flags

    def test_records_error_and_timing(self, ground_truth):
        case = build_case(
            "c1", "query", ground_truth, FlightRecord.empty(), elapsed_seconds=1.5, error="boom"
        )

        assert case.error == "boom"
        assert case.elapsed_seconds == 1.5

    def test_uses_policy(self, ground_truth):
        extracted = FlightRecord(aircraft_name="Boeing 737MAX")
        policy = ScoringPolicy(family_grade=0.5)

        case = build_case("c1", "query", ground_truth, extracted, policy=policy)

        assert case.comparison[FieldName.AIRCRAFT_NAME].grade == 0.5


class TestEvaluateCase:
    """Test single-case evaluation."""

    def test_successful_extraction(self, test_case, mock_provider, extracted_record):
        mock_provider.extract.return_value = extracted_record
        evaluator = Evaluator(mock_provider)

        case = evaluator.evaluate_case(test_case)

        mock_provider.extract.assert_called_once_with(test_case.query)
        assert case.case_id == test_case.case_id
        assert case.extracted == extracted_record
        assert case.error is None
        assert case.elapsed_seconds >= 0.0
        assert case.comparison[FieldName.FLIGHT_TIME].grade == 0.7

    def test_provider_error_scores_empty_record(self, test_case, mock_provider):
        """A failed extraction is scored as all-missing, not raised."""
        mock_provider.extract.side_effect = ExtractionProviderError("rate limited")
        evaluator = Evaluator(mock_provider)

        case = evaluator.evaluate_case(test_case)

        assert case.error == "rate limited"
        assert case.extracted == FlightRecord.empty()
        assert all(c.grade in (None, 0.0) for c in case.comparison.values())
        assert ReviewFlag.LOW_QUALITY in case.flags

    def test_unexpected_error_is_recorded(self, test_case, mock_provider):
        mock_provider.extract.side_effect = RuntimeError("socket closed")
        evaluator = Evaluator(mock_provider)

        case = evaluator.evaluate_case(test_case)

        assert case.error == "RuntimeError: socket closed"


class TestEvaluateBatch:
    """Test batch evaluation."""

    def _cases(self, test_case, count):
        return [
            test_case.model_copy(update={"case_id": f"case-{i}", "query": f"query {i}"})
            for i in range(count)
        ]

    def test_sequential_preserves_order(self, test_case, perfect_fields):
        cases = self._cases(test_case, 3)
        provider = StaticExtractionProvider({c.query: perfect_fields for c in cases})

        results = Evaluator(provider).evaluate_batch(cases)

        assert [r.case_id for r in results] == ["case-0", "case-1", "case-2"]

    def test_concurrent_preserves_order(self, test_case, perfect_fields):
        cases = self._cases(test_case, 8)
        provider = StaticExtractionProvider({c.query: perfect_fields for c in cases})

        results = Evaluator(provider).evaluate_batch(cases, max_workers=4)

        assert [r.case_id for r in results] == [c.case_id for c in cases]

    def test_one_failure_does_not_abort_batch(self, test_case, perfect_fields):
        cases = self._cases(test_case, 3)
        provider = StaticExtractionProvider({cases[0].query: perfect_fields})

        results = Evaluator(provider).evaluate_batch(cases)

        assert len(results) == 3
        assert results[0].error is None
        assert results[1].error is not None

    def test_run_builds_report(self, test_case, perfect_fields):
        cases = self._cases(test_case, 2)
        provider = StaticExtractionProvider({c.query: perfect_fields for c in cases})

        report = Evaluator(provider).run(cases)

        assert report.summary.total_cases == 2
        assert report.summary.perfect_matches == 2
        assert report.overall_score == 1.0
