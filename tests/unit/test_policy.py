"""Unit tests for the scoring policy."""

import json

import pytest
from pydantic import ValidationError

from flight_eval.evaluation.policy import (
    DEFAULT_POLICY,
    MatchRule,
    ScoringPolicy,
    load_scoring_policy,
)
from flight_eval.evaluation.types import FieldName
from flight_eval.exceptions import ScoringPolicyError


@pytest.fixture
def policy_file(tmp_path):
    """Write a policy JSON file and return its path."""

    def _write(data):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


class TestDefaultPolicy:
    """Test the built-in rule table."""

    def test_flight_number_excluded(self):
        assert DEFAULT_POLICY.rule_for(FieldName.FLIGHT_NUMBER) is MatchRule.EXCLUDED

    def test_scored_fields_in_order(self):
        assert DEFAULT_POLICY.scored_fields() == [
            FieldName.AIRLINE_CODE,
            FieldName.DEPARTURE_AIRPORT_CODE,
            FieldName.ARRIVAL_AIRPORT_CODE,
            FieldName.FLIGHT_DATE,
            FieldName.AIRCRAFT_NAME,
            FieldName.FLIGHT_TIME,
        ]

    def test_weights(self):
        assert DEFAULT_POLICY.weight_for(FieldName.AIRLINE_CODE) == 0.5
        assert DEFAULT_POLICY.weight_for(FieldName.AIRCRAFT_NAME) == 1.5
        assert DEFAULT_POLICY.weight_for(FieldName.FLIGHT_TIME) == 1.5

    def test_unweighted_field_uses_default_weight(self):
        assert DEFAULT_POLICY.weight_for(FieldName.FLIGHT_NUMBER) == 1.0

    def test_duration_error_threshold_matches_cutoff(self):
        assert DEFAULT_POLICY.duration_error_minutes == 30

    def test_policy_is_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_POLICY.family_grade = 0.5


class TestPolicyValidation:
    """Test policy consistency checks."""

    def test_rules_must_cover_every_field(self):
        with pytest.raises(ValidationError, match="field_rules"):
            ScoringPolicy(field_rules={FieldName.AIRLINE_CODE: MatchRule.EXACT})

    def test_full_credit_window_cannot_exceed_partial(self):
        with pytest.raises(ValidationError):
            ScoringPolicy(duration_full_credit_minutes=40, duration_partial_credit_minutes=30)

    def test_grades_bounded(self):
        with pytest.raises(ValidationError):
            ScoringPolicy(family_grade=1.5)

    def test_member_in_two_families_rejected(self):
        with pytest.raises(ValidationError, match="both"):
            ScoringPolicy(aircraft_families={"A": ["Boeing 737NG"], "B": ["Boeing 737NG"]})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            ScoringPolicy(tolerance=5)


class TestLoadScoringPolicy:
    """Test loading policies from JSON."""

    def test_none_returns_default(self):
        assert load_scoring_policy(None) is DEFAULT_POLICY

    def test_overrides_merge_over_defaults(self, policy_file):
        path = policy_file({"family_grade": 0.5, "field_weights": {"flightTime": 3.0}})

        policy = load_scoring_policy(path)

        assert policy.family_grade == 0.5
        assert policy.weight_for(FieldName.FLIGHT_TIME) == 3.0
        # Untouched entries keep their defaults
        assert policy.weight_for(FieldName.AIRCRAFT_NAME) == 1.5
        assert policy.duration_partial_grade == 0.7

    def test_rule_override(self, policy_file):
        path = policy_file({"field_rules": {"flightNumber": "exact"}})

        policy = load_scoring_policy(path)

        assert policy.rule_for(FieldName.FLIGHT_NUMBER) is MatchRule.EXACT
        assert FieldName.FLIGHT_NUMBER in policy.scored_fields()

    def test_families_replace_defaults(self, policy_file):
        path = policy_file({"aircraft_families": {"Narrowbody": ["Airbus A320", "Boeing 737NG"]}})

        policy = load_scoring_policy(path)

        assert policy.aircraft_families == {"Narrowbody": ["Airbus A320", "Boeing 737NG"]}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ScoringPolicyError, match="Failed to read"):
            load_scoring_policy(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ScoringPolicyError):
            load_scoring_policy(path)

    def test_non_object_raises(self, policy_file):
        with pytest.raises(ScoringPolicyError, match="JSON object"):
            load_scoring_policy(policy_file([1, 2, 3]))

    def test_invalid_values_raise_with_details(self, policy_file):
        path = policy_file({"family_grade": 2.0})

        with pytest.raises(ScoringPolicyError) as exc_info:
            load_scoring_policy(path)

        assert exc_info.value.details["path"] == str(path)
        assert exc_info.value.details["errors"]
