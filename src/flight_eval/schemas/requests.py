"""Request schemas for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..evaluation.types import FieldName, FlightRecord


class CompareFieldRequest(BaseModel):
    """Request to compare a single field value against ground truth."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    field: FieldName = Field(..., description="Field name, e.g. aircraftName")
    extracted: str | None = Field(None, description="Value produced by the extraction provider")
    ground_truth: str | None = Field(None, description="Verified value")


class EvaluateCaseRequest(BaseModel):
    """Request to score one extracted record against its ground truth."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    case_id: str = Field(default="case", min_length=1, description="Test case identifier")
    query: str = Field(default="", description="Query sent to the extraction provider")
    ground_truth: FlightRecord
    extracted: FlightRecord
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    error: str | None = Field(None, description="Provider error message, if extraction failed")


class ScoreBatchRequest(BaseModel):
    """Request to score a batch of cases and aggregate them into a report."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cases: list[EvaluateCaseRequest] = Field(default_factory=list)
    include_cases: bool = Field(default=True, description="Include per-case results in the report")
