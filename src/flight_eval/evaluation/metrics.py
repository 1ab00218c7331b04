"""Aggregate metrics for a batch of evaluated flight cases.

This module reduces per-case comparisons into:
- Per-field precision / recall / F1
- A weighted overall F1 (query-provided fields weigh less than searched ones)
- A weighted partial-credit grade
- Summary statistics (perfect matches, cases with data, mean grade)
- Review flags for human triage

Divisions by zero (no cases, no extractions) yield 0.0 so degenerate batches
still produce a valid report.
"""

from collections.abc import Mapping, Sequence

import numpy as np

from .comparator import minutes_difference
from .policy import DEFAULT_POLICY, ScoringPolicy
from .types import (
    EvaluationCase,
    EvaluationReport,
    FieldMetrics,
    FieldName,
    ReviewFlag,
    SummaryStats,
)


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_field_metrics(cases: Sequence[EvaluationCase], field: FieldName) -> FieldMetrics:
    """Calculate precision, recall and F1 for one field.

    Precision is measured over cases where the field was extracted, recall over
    all cases.

    Args:
        cases: Evaluated cases
        field: Field to measure

    Returns:
        FieldMetrics (all ratios 0.0 for an empty batch)
    """
    field = FieldName(field)
    total = len(cases)
    extracted_count = sum(1 for case in cases if case.extracted.get(field) is not None)
    correct_count = sum(
        1
        for case in cases
        if field in case.comparison and case.comparison[field].match is True
    )

    precision = _safe_ratio(correct_count, extracted_count)
    recall = _safe_ratio(correct_count, total)
    f1 = _safe_ratio(2 * precision * recall, precision + recall)

    return FieldMetrics(
        field=field,
        total=total,
        extracted_count=extracted_count,
        correct_count=correct_count,
        precision=precision,
        recall=recall,
        f1=f1,
    )


def compute_all_metrics(
    cases: Sequence[EvaluationCase], policy: ScoringPolicy = DEFAULT_POLICY
) -> dict[FieldName, FieldMetrics]:
    """Field metrics for every scored (non-excluded) field."""
    return {field: compute_field_metrics(cases, field) for field in policy.scored_fields()}


def compute_overall_score(
    field_metrics: Mapping[FieldName, FieldMetrics],
    weights: Mapping[FieldName, float] | None = None,
    default_weight: float = 1.0,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> float:
    """Weighted mean of per-field F1 scores.

    Args:
        field_metrics: Metrics keyed by field
        weights: Per-field weights (defaults to the policy's weight table)
        default_weight: Weight for a field absent from ``weights``
        policy: Supplies the weights and the set of excluded fields

    Returns:
        sum(weight * f1) / sum(weight), or 0.0 when the weights sum to zero
    """
    if weights is None:
        weights = policy.field_weights
        default_weight = policy.default_weight

    scored = set(policy.scored_fields())
    weighted_sum = 0.0
    total_weight = 0.0
    for field, metrics in field_metrics.items():
        field = FieldName(field)
        if field not in scored:
            continue
        weight = weights.get(field, default_weight)
        weighted_sum += weight * metrics.f1
        total_weight += weight

    return _safe_ratio(weighted_sum, total_weight)


def compute_case_weighted_grade(
    case: EvaluationCase, policy: ScoringPolicy = DEFAULT_POLICY
) -> float:
    """Weighted mean of one case's grades, using the policy weight table."""
    weighted_sum = 0.0
    total_weight = 0.0
    for field, comparison in case.comparison.items():
        if comparison.grade is None:
            continue
        weight = policy.weight_for(field)
        weighted_sum += weight * comparison.grade
        total_weight += weight
    return _safe_ratio(weighted_sum, total_weight)


def compute_weighted_grade(
    cases: Sequence[EvaluationCase], policy: ScoringPolicy = DEFAULT_POLICY
) -> float:
    """Mean of per-case weighted grades (partial credit view of the batch)."""
    if not cases:
        return 0.0
    return float(np.mean([compute_case_weighted_grade(case, policy) for case in cases]))


def is_perfect_match(case: EvaluationCase) -> bool:
    """Every scored field matched."""
    scored = [c for c in case.comparison.values() if not c.is_excluded]
    return bool(scored) and all(c.match is True for c in scored)


def has_data(case: EvaluationCase) -> bool:
    """At least one field was extracted."""
    return len(case.extracted.missing_fields()) < len(FieldName)


def compute_summary_stats(cases: Sequence[EvaluationCase]) -> SummaryStats:
    """Summary counts and the mean of all defined grades."""
    grades = [grade for case in cases for grade in case.grades()]
    avg_grade = float(np.mean(grades)) if grades else 0.0

    return SummaryStats(
        total_cases=len(cases),
        perfect_matches=sum(1 for case in cases if is_perfect_match(case)),
        with_data=sum(1 for case in cases if has_data(case)),
        flagged_count=sum(1 for case in cases if case.flags),
        avg_grade=avg_grade,
    )


def flag_for_review(
    case: EvaluationCase, policy: ScoringPolicy = DEFAULT_POLICY
) -> frozenset[ReviewFlag]:
    """Tag anomalies worth a human look, independent of the numeric score.

    - aircraft_missing: no aircraft although a duration was found
    - aircraft_mismatch: an aircraft was given but graded 0.0
    - duration_error: a duration was given but is off by more than the
      zero-credit cutoff (or cannot be parsed)
    - low_quality: too many fields missing
    """
    extracted = case.extracted
    aircraft = extracted.get(FieldName.AIRCRAFT_NAME)
    duration = extracted.get(FieldName.FLIGHT_TIME)
    flags = set()

    if aircraft is None and duration is not None:
        flags.add(ReviewFlag.AIRCRAFT_MISSING)

    aircraft_comparison = case.comparison.get(FieldName.AIRCRAFT_NAME)
    if (
        aircraft is not None
        and aircraft_comparison is not None
        and aircraft_comparison.grade == 0.0
    ):
        flags.add(ReviewFlag.AIRCRAFT_MISMATCH)

    if duration is not None:
        diff = minutes_difference(duration, case.ground_truth.get(FieldName.FLIGHT_TIME))
        if diff is None or diff > policy.duration_error_minutes:
            flags.add(ReviewFlag.DURATION_ERROR)

    if len(extracted.missing_fields()) >= policy.low_quality_missing_fields:
        flags.add(ReviewFlag.LOW_QUALITY)

    return frozenset(flags)


def build_report(
    cases: Sequence[EvaluationCase], policy: ScoringPolicy = DEFAULT_POLICY
) -> EvaluationReport:
    """Reduce a complete batch of cases into an EvaluationReport."""
    field_metrics = compute_all_metrics(cases, policy)
    return EvaluationReport(
        field_metrics=field_metrics,
        overall_score=compute_overall_score(field_metrics, policy=policy),
        weighted_grade=compute_weighted_grade(cases, policy),
        summary=compute_summary_stats(cases),
        cases=list(cases),
    )
