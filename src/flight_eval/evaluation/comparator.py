"""Field-level comparison of extracted flight data against ground truth.

Each field is compared with the rule the scoring policy assigns to it:

- excluded: never scored (flight number; a route + date can have several)
- exact: string equality
- aircraft_family: exact name, else same family for partial credit
- duration: ``HH:MM`` durations within a minute tolerance

Comparisons never raise. Missing or garbled values score as wrong answers,
because an unusable field is exactly what the evaluation measures.
"""

import logging
import re

from .aircraft import is_same_family
from .policy import DEFAULT_POLICY, MatchRule, ScoringPolicy
from .types import FieldComparison, FieldName, FlightRecord, is_missing

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d{1,3}):([0-5]\d)\s*$")


def duration_to_minutes(value) -> int | None:
    """Parse an ``HH:MM`` duration into minutes.

    Args:
        value: Duration string such as "01:30" (single-digit hours allowed)

    Returns:
        Total minutes, or None if the value is missing or not a duration

    Examples:
        >>> duration_to_minutes("01:30")
        90
        >>> duration_to_minutes("1h30") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = _DURATION_RE.match(value)
    if match is None:
        return None
    hours, minutes = match.groups()
    return int(hours) * 60 + int(minutes)


def minutes_difference(first, second) -> int | None:
    """Absolute difference in minutes between two durations, None if either is unparsable."""
    first_minutes = duration_to_minutes(first)
    second_minutes = duration_to_minutes(second)
    if first_minutes is None or second_minutes is None:
        return None
    return abs(first_minutes - second_minutes)


def format_minutes(minutes: int) -> str:
    """Format minutes as a zero-padded ``HH:MM`` duration (90 -> "01:30")."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def _compare_exact(extracted: str, ground_truth, policy: ScoringPolicy) -> FieldComparison:
    if extracted == ground_truth:
        return FieldComparison.hit(policy.exact_grade)
    return FieldComparison.miss()


def _compare_aircraft(extracted: str, ground_truth, policy: ScoringPolicy) -> FieldComparison:
    if extracted == ground_truth:
        return FieldComparison.hit(policy.exact_grade)
    if is_same_family(extracted, ground_truth, policy.aircraft_families):
        return FieldComparison.hit(policy.family_grade)
    return FieldComparison.miss()


def _compare_duration(extracted: str, ground_truth, policy: ScoringPolicy) -> FieldComparison:
    diff = minutes_difference(extracted, ground_truth)
    if diff is None:
        return FieldComparison.miss()
    if diff <= policy.duration_full_credit_minutes:
        return FieldComparison.hit(policy.exact_grade)
    if diff <= policy.duration_partial_credit_minutes:
        return FieldComparison.hit(policy.duration_partial_grade)
    return FieldComparison.miss()


_RULE_HANDLERS = {
    MatchRule.EXACT: _compare_exact,
    MatchRule.AIRCRAFT_FAMILY: _compare_aircraft,
    MatchRule.DURATION: _compare_duration,
}


def compare_field(
    field: FieldName | str,
    extracted,
    ground_truth,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> FieldComparison:
    """Compare one extracted field value against its ground truth.

    Args:
        field: Field name (e.g. FieldName.FLIGHT_TIME or "flightTime")
        extracted: Value produced by the extraction provider (may be missing)
        ground_truth: Verified value for the test case
        policy: Scoring policy supplying the rule and thresholds

    Returns:
        FieldComparison with match verdict and grade

    Examples:
        >>> compare_field("aircraftName", "Boeing 737MAX", "Boeing 737NG").grade
        0.8
        >>> compare_field("flightTime", "01:30", "02:00").grade
        0.7
    """
    try:
        field = FieldName(field)
    except ValueError:
        logger.warning(f"Unknown field {field!r}, scoring as mismatch")
        return FieldComparison.miss()

    rule = policy.rule_for(field)
    if rule is MatchRule.EXCLUDED:
        return FieldComparison.exclude()

    if is_missing(extracted):
        return FieldComparison.miss()

    if isinstance(extracted, str):
        extracted = extracted.strip()
    if isinstance(ground_truth, str):
        ground_truth = ground_truth.strip()

    return _RULE_HANDLERS[rule](extracted, ground_truth, policy)


def compare_all_fields(
    extracted: FlightRecord,
    ground_truth: FlightRecord,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> dict[FieldName, FieldComparison]:
    """Compare every field of a record, keyed by field name in canonical order."""
    return {
        field: compare_field(field, extracted.get(field), ground_truth.get(field), policy)
        for field in FieldName
    }
