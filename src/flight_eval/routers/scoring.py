"""Scoring API endpoints.

This module exposes the comparison engine over HTTP so extraction pipelines
can score their output without importing this package.

Endpoints:
    GET /api/v1/scoring/policy - Active scoring policy
    POST /api/v1/scoring/compare - Compare one field value
    POST /api/v1/scoring/cases - Score one extracted record (comparisons + flags)
    POST /api/v1/scoring/report - Score a batch and aggregate metrics

Scoring is stateless: nothing posted here is stored.
"""

import logging

from fastapi import APIRouter

from ..dependencies import PolicyDep
from ..evaluation.comparator import compare_field
from ..evaluation.evaluator import build_case
from ..evaluation.metrics import build_report
from ..evaluation.policy import ScoringPolicy
from ..evaluation.types import EvaluationCase, EvaluationReport, FieldComparison
from ..schemas.requests import CompareFieldRequest, EvaluateCaseRequest, ScoreBatchRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scoring", tags=["scoring"])


def _score_case(request: EvaluateCaseRequest, policy: ScoringPolicy) -> EvaluationCase:
    return build_case(
        case_id=request.case_id,
        query=request.query,
        ground_truth=request.ground_truth,
        extracted=request.extracted,
        elapsed_seconds=request.elapsed_seconds,
        error=request.error,
        policy=policy,
    )


@router.get(
    "/policy",
    response_model=ScoringPolicy,
    summary="Get the active scoring policy",
)
def get_policy(policy: PolicyDep) -> ScoringPolicy:
    """Return the rule table, thresholds, weights and aircraft families in use."""
    return policy


@router.post(
    "/compare",
    response_model=FieldComparison,
    summary="Compare one field",
    description="Compare an extracted value against ground truth using the field's rule",
)
def compare(request: CompareFieldRequest, policy: PolicyDep) -> FieldComparison:
    """Compare a single field.

    Returns:
        FieldComparison. ``match`` and ``grade`` are null for excluded fields.
    """
    return compare_field(request.field, request.extracted, request.ground_truth, policy)


@router.post(
    "/cases",
    response_model=EvaluationCase,
    summary="Score one extracted record",
)
def score_case(request: EvaluateCaseRequest, policy: PolicyDep) -> EvaluationCase:
    """Compare all seven fields of a record and derive its review flags."""
    case = _score_case(request, policy)
    logger.info(f"Scored case {case.case_id} (flags={sorted(f.value for f in case.flags)})")
    return case


@router.post(
    "/report",
    response_model=EvaluationReport,
    summary="Score a batch of records",
    description="Score every case, then aggregate per-field P/R/F1, weighted scores and summary",
)
def score_report(request: ScoreBatchRequest, policy: PolicyDep) -> EvaluationReport:
    """Score and aggregate a complete batch.

    An empty batch yields a report with all metrics at 0.0.
    """
    cases = [_score_case(item, policy) for item in request.cases]
    report = build_report(cases, policy)

    logger.info(
        f"Scored batch of {len(cases)} cases "
        f"(overall={report.overall_score:.3f}, weighted_grade={report.weighted_grade:.3f})"
    )

    if not request.include_cases:
        report = report.model_copy(update={"cases": []})
    return report
