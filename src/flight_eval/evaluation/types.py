"""Core data types shared by the comparator, scorer and evaluation driver.

A ``FlightRecord`` is the shape of both the ground truth and the extraction
provider's output. Field names follow Python conventions internally and accept
the camelCase names used on the wire (``departureAirportCode`` etc.).
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

# Literal values the extraction provider uses for "not found"
MISSING_SENTINELS = frozenset({"", "null", "none", "not found"})


def is_missing(value) -> bool:
    """Return True for None and for the provider's "no value" sentinels."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in MISSING_SENTINELS
    return False


class FieldName(str, Enum):
    """The seven fields of a flight record, by wire name."""

    FLIGHT_NUMBER = "flightNumber"
    AIRLINE_CODE = "airlineCode"
    DEPARTURE_AIRPORT_CODE = "departureAirportCode"
    ARRIVAL_AIRPORT_CODE = "arrivalAirportCode"
    FLIGHT_DATE = "flightDate"
    AIRCRAFT_NAME = "aircraftName"
    FLIGHT_TIME = "flightTime"

    @property
    def attribute(self) -> str:
        """Attribute name on ``FlightRecord`` (snake_case)."""
        return self.name.lower()


class ReviewFlag(str, Enum):
    """Qualitative tags that mark a case for human review."""

    AIRCRAFT_MISSING = "aircraft_missing"
    AIRCRAFT_MISMATCH = "aircraft_mismatch"
    DURATION_ERROR = "duration_error"
    LOW_QUALITY = "low_quality"


class FlightRecord(BaseModel):
    """Flight details, either ground truth or extracted.

    Every field is optional. Sentinels such as ``"null"`` or ``"NOT FOUND"``
    are stored as ``None``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    flight_number: str | None = None
    airline_code: str | None = None
    departure_airport_code: str | None = None
    arrival_airport_code: str | None = None
    flight_date: str | None = None
    aircraft_name: str | None = None
    flight_time: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def normalize_missing(cls, value):
        """Collapse missing sentinels to None and strip surrounding whitespace."""
        if is_missing(value):
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            # Flight numbers often arrive as JSON integers
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    def get(self, field: FieldName) -> str | None:
        """Value of ``field`` (None when absent)."""
        return getattr(self, FieldName(field).attribute)

    def missing_fields(self) -> list[FieldName]:
        """Fields with no value, in canonical order."""
        return [name for name in FieldName if self.get(name) is None]

    @classmethod
    def empty(cls) -> "FlightRecord":
        """Record with every field missing (used when extraction fails)."""
        return cls()


class FieldComparison(BaseModel):
    """Verdict for one field: ``match`` is True, False or None (excluded).

    ``grade`` carries partial credit in [0.0, 1.0] and is None exactly when the
    field is excluded from scoring.
    """

    model_config = ConfigDict(frozen=True)

    match: bool | None
    grade: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_grade_defined(self) -> "FieldComparison":
        if (self.match is None) != (self.grade is None):
            raise ValueError("grade must be set if and only if the field is scored")
        return self

    @property
    def is_excluded(self) -> bool:
        return self.match is None

    @classmethod
    def exclude(cls) -> "FieldComparison":
        return cls(match=None, grade=None)

    @classmethod
    def miss(cls) -> "FieldComparison":
        return cls(match=False, grade=0.0)

    @classmethod
    def hit(cls, grade: float) -> "FieldComparison":
        return cls(match=True, grade=grade)


class EvaluationCase(BaseModel):
    """One evaluated test case: inputs, per-field verdicts and review flags."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    case_id: str
    query: str
    ground_truth: FlightRecord
    extracted: FlightRecord
    comparison: dict[FieldName, FieldComparison]
    flags: frozenset[ReviewFlag] = frozenset()
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    error: str | None = None

    @model_validator(mode="after")
    def check_all_fields_compared(self) -> "EvaluationCase":
        missing = set(FieldName) - set(self.comparison)
        if missing:
            names = sorted(name.value for name in missing)
            raise ValueError(f"comparison is missing fields: {names}")
        return self

    @field_serializer("flags")
    def serialize_flags(self, flags: frozenset[ReviewFlag]) -> list[str]:
        return sorted(flag.value for flag in flags)

    def grades(self) -> list[float]:
        """Defined (non-excluded) grades for this case."""
        return [c.grade for c in self.comparison.values() if c.grade is not None]


class FieldMetrics(BaseModel):
    """Precision / recall / F1 for one field across a batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    field: FieldName
    total: int = 0
    extracted_count: int = 0
    correct_count: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0


class SummaryStats(BaseModel):
    """Batch-level counts and the mean grade."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    total_cases: int = 0
    perfect_matches: int = 0
    with_data: int = 0
    flagged_count: int = 0
    avg_grade: float = 0.0


class EvaluationReport(BaseModel):
    """Everything the scorer produces for one batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    field_metrics: dict[FieldName, FieldMetrics]
    overall_score: float
    weighted_grade: float
    summary: SummaryStats
    cases: list[EvaluationCase] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
