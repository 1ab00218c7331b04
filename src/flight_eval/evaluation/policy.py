"""Scoring policy: the per-field rule table, thresholds, weights and families.

The comparator and scorer read every number from a ``ScoringPolicy`` so that
tolerances, weights and aircraft groupings can be changed from a JSON file
without touching the matching code.
"""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..exceptions import ScoringPolicyError
from .aircraft import DEFAULT_AIRCRAFT_FAMILIES
from .types import FieldName

logger = logging.getLogger(__name__)


class MatchRule(str, Enum):
    """How a field is compared against ground truth."""

    EXCLUDED = "excluded"
    EXACT = "exact"
    AIRCRAFT_FAMILY = "aircraft_family"
    DURATION = "duration"


DEFAULT_FIELD_RULES: dict[FieldName, MatchRule] = {
    # A route + date can have several valid flight numbers
    FieldName.FLIGHT_NUMBER: MatchRule.EXCLUDED,
    FieldName.AIRLINE_CODE: MatchRule.EXACT,
    FieldName.DEPARTURE_AIRPORT_CODE: MatchRule.EXACT,
    FieldName.ARRIVAL_AIRPORT_CODE: MatchRule.EXACT,
    FieldName.FLIGHT_DATE: MatchRule.EXACT,
    FieldName.AIRCRAFT_NAME: MatchRule.AIRCRAFT_FAMILY,
    FieldName.FLIGHT_TIME: MatchRule.DURATION,
}

DEFAULT_FIELD_WEIGHTS: dict[FieldName, float] = {
    # Provided in the query
    FieldName.AIRLINE_CODE: 0.5,
    FieldName.DEPARTURE_AIRPORT_CODE: 0.5,
    FieldName.ARRIVAL_AIRPORT_CODE: 0.5,
    FieldName.FLIGHT_DATE: 0.5,
    # Found by the extraction provider
    FieldName.AIRCRAFT_NAME: 1.5,
    FieldName.FLIGHT_TIME: 1.5,
}


class ScoringPolicy(BaseModel):
    """Immutable scoring configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    field_rules: dict[FieldName, MatchRule] = Field(
        default_factory=lambda: dict(DEFAULT_FIELD_RULES)
    )
    exact_grade: float = Field(default=1.0, ge=0.0, le=1.0)
    family_grade: float = Field(default=0.8, ge=0.0, le=1.0)
    duration_full_credit_minutes: int = Field(default=15, ge=0)
    duration_partial_credit_minutes: int = Field(default=30, ge=0)
    duration_partial_grade: float = Field(default=0.7, ge=0.0, le=1.0)
    field_weights: dict[FieldName, float] = Field(
        default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS)
    )
    default_weight: float = Field(default=1.0, ge=0.0)
    aircraft_families: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_AIRCRAFT_FAMILIES.items()}
    )
    low_quality_missing_fields: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def check_consistency(self) -> "ScoringPolicy":
        missing = set(FieldName) - set(self.field_rules)
        if missing:
            raise ValueError(
                f"field_rules must cover every field, missing: {sorted(m.value for m in missing)}"
            )
        if self.duration_full_credit_minutes > self.duration_partial_credit_minutes:
            raise ValueError(
                "duration_full_credit_minutes must not exceed duration_partial_credit_minutes"
            )
        if any(weight < 0 for weight in self.field_weights.values()):
            raise ValueError("field weights must be non-negative")

        seen: dict[str, str] = {}
        for family, members in self.aircraft_families.items():
            for member in members:
                if member in seen and seen[member] != family:
                    raise ValueError(
                        f"{member!r} is listed in both {seen[member]!r} and {family!r}"
                    )
                seen[member] = family
        return self

    @property
    def duration_error_minutes(self) -> int:
        """Minute difference above which a duration is flagged for review.

        Same boundary as the comparator's zero-credit cutoff.
        """
        return self.duration_partial_credit_minutes

    def rule_for(self, field: FieldName) -> MatchRule:
        return self.field_rules[FieldName(field)]

    def scored_fields(self) -> list[FieldName]:
        """Fields that contribute to metrics, in canonical order."""
        return [f for f in FieldName if self.field_rules[f] is not MatchRule.EXCLUDED]

    def weight_for(self, field: FieldName) -> float:
        return self.field_weights.get(FieldName(field), self.default_weight)


DEFAULT_POLICY = ScoringPolicy()


def load_scoring_policy(path: str | Path | None) -> ScoringPolicy:
    """Load a scoring policy from a JSON file.

    Keys missing from the file keep their default values. Dictionary settings
    (``field_rules``, ``field_weights``) are merged over the defaults;
    ``aircraft_families`` replaces the default table when given.

    Args:
        path: Path to a JSON file, or None for the default policy

    Returns:
        ScoringPolicy

    Raises:
        ScoringPolicyError: If the file cannot be read or fails validation
    """
    if path is None:
        return DEFAULT_POLICY

    policy_path = Path(path)
    try:
        with open(policy_path, "r", encoding="utf-8") as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ScoringPolicyError(
            f"Failed to read scoring policy: {e}", {"path": str(policy_path)}
        ) from e

    if not isinstance(overrides, dict):
        raise ScoringPolicyError(
            "Scoring policy must be a JSON object", {"path": str(policy_path)}
        )

    data = DEFAULT_POLICY.model_dump(mode="json")
    for key, value in overrides.items():
        if key in ("field_rules", "field_weights") and isinstance(value, dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value

    try:
        policy = ScoringPolicy.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise ScoringPolicyError(
            f"Invalid scoring policy: {e.error_count()} error(s)",
            {"path": str(policy_path), "errors": errors},
        ) from e

    logger.info(f"Loaded scoring policy from {policy_path}")
    return policy
