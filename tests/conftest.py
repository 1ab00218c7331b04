"""Pytest configuration and shared fixtures."""

import pytest

from flight_eval.config import Settings
from flight_eval.evaluation.evaluator import build_case
from flight_eval.evaluation.types import FlightRecord


@pytest.fixture
def mock_settings(tmp_path):
    """Create a Settings instance pointing at temporary paths."""
    return Settings(
        dataset_path=str(tmp_path / "flights.json"),
        airports_path=None,
        extraction_store_dir=str(tmp_path / "extractions"),
        scoring_policy_path=None,
    )


@pytest.fixture
def ground_truth():
    """Verified record for the Las Vegas -> Albuquerque Southwest flight."""
    return FlightRecord(
        flight_number="1234",
        airline_code="WN",
        departure_airport_code="LAS",
        arrival_airport_code="ABQ",
        flight_date="16-12-2025",
        aircraft_name="Boeing 737NG",
        flight_time="01:30",
    )


@pytest.fixture
def extracted_record():
    """Extraction with a same-family aircraft and a 20 minute duration error."""
    return FlightRecord(
        airline_code="WN",
        departure_airport_code="LAS",
        arrival_airport_code="ABQ",
        flight_date="16-12-2025",
        aircraft_name="Boeing 737MAX",
        flight_time="01:50",
    )


@pytest.fixture
def make_case(ground_truth):
    """Factory building a scored EvaluationCase from extracted field overrides."""

    def _make_case(case_id="WN1234-16-12-2025", truth=None, **extracted_fields):
        truth = truth or ground_truth
        extracted = FlightRecord(**extracted_fields)
        return build_case(
            case_id=case_id,
            query="Las Vegas to Albuquerque on 16-12-2025 with Southwest",
            ground_truth=truth,
            extracted=extracted,
        )

    return _make_case


@pytest.fixture
def perfect_fields():
    """Extracted fields identical to the ground truth fixture."""
    return {
        "flight_number": "1234",
        "airline_code": "WN",
        "departure_airport_code": "LAS",
        "arrival_airport_code": "ABQ",
        "flight_date": "16-12-2025",
        "aircraft_name": "Boeing 737NG",
        "flight_time": "01:30",
    }
