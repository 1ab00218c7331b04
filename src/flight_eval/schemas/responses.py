"""Response schemas for API endpoints."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AircraftResponse(BaseModel):
    """Canonical aircraft name for an ICAO type designator."""

    code: str = Field(..., description="Normalized ICAO type designator")
    name: str = Field(..., description="Canonical display name")
    family: str | None = Field(None, description="Aircraft family used for partial credit")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict = Field(default_factory=dict, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow)
