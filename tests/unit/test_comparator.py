"""Unit tests for field comparison."""

import pytest

from flight_eval.evaluation.comparator import (
    compare_all_fields,
    compare_field,
    duration_to_minutes,
    format_minutes,
    minutes_difference,
)
from flight_eval.evaluation.policy import ScoringPolicy
from flight_eval.evaluation.types import FieldComparison, FieldName, FlightRecord

SCORED_FIELDS = [f for f in FieldName if f is not FieldName.FLIGHT_NUMBER]
EXACT_FIELDS = [
    FieldName.AIRLINE_CODE,
    FieldName.DEPARTURE_AIRPORT_CODE,
    FieldName.ARRIVAL_AIRPORT_CODE,
    FieldName.FLIGHT_DATE,
]


class TestDurationParsing:
    """Test HH:MM duration helpers."""

    def test_parses_padded_duration(self):
        assert duration_to_minutes("01:30") == 90

    def test_parses_single_digit_hours(self):
        assert duration_to_minutes("2:05") == 125

    @pytest.mark.parametrize("value", [None, "", "1h30", "01:75", "abc", 90])
    def test_invalid_returns_none(self, value):
        """Unparsable durations return None instead of raising."""
        assert duration_to_minutes(value) is None

    def test_minutes_difference_is_absolute(self):
        assert minutes_difference("01:30", "02:00") == 30
        assert minutes_difference("02:00", "01:30") == 30

    def test_minutes_difference_none_when_unparsable(self):
        assert minutes_difference("01:30", "garbage") is None

    def test_format_minutes(self):
        assert format_minutes(90) == "01:30"
        assert format_minutes(605) == "10:05"


class TestMissingValues:
    """Missing extracted values always score 0.0."""

    @pytest.mark.parametrize("field", SCORED_FIELDS)
    def test_null_extracted_scores_zero(self, field):
        result = compare_field(field, None, "anything")

        assert result.match is False
        assert result.grade == 0.0

    @pytest.mark.parametrize("sentinel", ["", "null", "NOT FOUND", "  none "])
    def test_sentinels_count_as_missing(self, sentinel):
        result = compare_field(FieldName.AIRLINE_CODE, sentinel, "WN")

        assert result == FieldComparison.miss()


class TestExcludedField:
    """Flight number is never scored."""

    @pytest.mark.parametrize(
        "extracted,truth", [("1234", "1234"), ("1234", "9999"), (None, "1234"), (None, None)]
    )
    def test_flight_number_excluded(self, extracted, truth):
        result = compare_field(FieldName.FLIGHT_NUMBER, extracted, truth)

        assert result.match is None
        assert result.grade is None
        assert result.is_excluded


class TestExactFields:
    """Exact string equality fields."""

    @pytest.mark.parametrize("field", EXACT_FIELDS)
    def test_equal_values_score_one(self, field):
        result = compare_field(field, "LAS", "LAS")

        assert result.match is True
        assert result.grade == 1.0

    @pytest.mark.parametrize("field", EXACT_FIELDS)
    def test_different_values_score_zero(self, field):
        result = compare_field(field, "LAS", "ABQ")

        assert result.match is False
        assert result.grade == 0.0

    def test_surrounding_whitespace_ignored(self):
        assert compare_field("airlineCode", "  WN ", "WN").grade == 1.0

    def test_case_sensitive(self):
        assert compare_field("airlineCode", "wn", "WN").grade == 0.0

    def test_accepts_wire_name_string(self):
        assert compare_field("flightDate", "16-12-2025", "16-12-2025").grade == 1.0


class TestAircraftField:
    """Aircraft names get partial credit within a family."""

    def test_exact_match(self):
        result = compare_field("aircraftName", "Boeing 737NG", "Boeing 737NG")

        assert result.match is True
        assert result.grade == 1.0

    def test_same_family(self):
        result = compare_field("aircraftName", "Boeing 737MAX", "Boeing 737NG")

        assert result.match is True
        assert result.grade == 0.8

    def test_same_family_is_symmetric(self):
        forward = compare_field("aircraftName", "Boeing 737NG", "Boeing 737MAX")
        backward = compare_field("aircraftName", "Boeing 737MAX", "Boeing 737NG")

        assert forward == backward

    def test_different_family(self):
        result = compare_field("aircraftName", "Airbus A320", "Boeing 737NG")

        assert result.match is False
        assert result.grade == 0.0

    def test_unlisted_name_only_matches_itself(self):
        assert compare_field("aircraftName", "Fokker 100", "Fokker 100").grade == 1.0
        assert compare_field("aircraftName", "Fokker 100", "Fokker 70").grade == 0.0


class TestDurationField:
    """Duration tolerance tiers, boundaries inclusive."""

    @pytest.mark.parametrize(
        "extracted,expected_grade",
        [
            ("01:30", 1.0),
            ("01:45", 1.0),  # 15 minutes
            ("01:15", 1.0),
            ("01:46", 0.7),
            ("02:00", 0.7),  # 30 minutes
            ("02:01", 0.0),  # 31 minutes
            ("00:59", 0.0),
        ],
    )
    def test_tolerance_tiers(self, extracted, expected_grade):
        assert compare_field("flightTime", extracted, "01:30").grade == expected_grade

    def test_partial_credit_is_a_match(self):
        assert compare_field("flightTime", "02:00", "01:30").match is True

    def test_unparsable_duration_is_wrong(self):
        result = compare_field("flightTime", "about 2 hours", "01:30")

        assert result == FieldComparison.miss()

    def test_custom_thresholds(self):
        policy = ScoringPolicy(
            duration_full_credit_minutes=5,
            duration_partial_credit_minutes=10,
            duration_partial_grade=0.5,
        )

        assert compare_field("flightTime", "01:35", "01:30", policy).grade == 1.0
        assert compare_field("flightTime", "01:40", "01:30", policy).grade == 0.5
        assert compare_field("flightTime", "01:41", "01:30", policy).grade == 0.0


class TestUnknownField:
    """Unknown field names never raise."""

    def test_unknown_field_scores_zero(self, caplog):
        result = compare_field("seatPitch", "31in", "31in")

        assert result == FieldComparison.miss()
        assert "Unknown field" in caplog.text


class TestCompareAllFields:
    """Test whole-record comparison."""

    def test_returns_all_seven_fields_in_order(self, ground_truth, extracted_record):
        result = compare_all_fields(extracted_record, ground_truth)

        assert list(result) == list(FieldName)

    def test_end_to_end_grades(self, ground_truth, extracted_record):
        result = compare_all_fields(extracted_record, ground_truth)

        grades = [result[f].grade for f in SCORED_FIELDS]
        assert grades == [1.0, 1.0, 1.0, 1.0, 0.8, 0.7]
        assert result[FieldName.FLIGHT_NUMBER].is_excluded

    def test_empty_record_scores_zero_everywhere(self, ground_truth):
        result = compare_all_fields(FlightRecord.empty(), ground_truth)

        assert all(result[f].grade == 0.0 for f in SCORED_FIELDS)
