"""Aircraft lookup endpoints."""

from fastapi import APIRouter, Path

from ..dependencies import PolicyDep
from ..evaluation.aircraft import get_aircraft_family, map_aircraft_code
from ..schemas.responses import AircraftResponse

router = APIRouter(prefix="/api/v1/aircraft", tags=["aircraft"])


@router.get(
    "/{code}",
    response_model=AircraftResponse,
    summary="Resolve an ICAO aircraft code",
    responses={
        200: {"description": "Canonical name and family"},
        400: {"description": "Unrecognized aircraft code"},
    },
)
def get_aircraft(
    policy: PolicyDep,
    code: str = Path(..., description="ICAO type designator (e.g. B738)", min_length=2, max_length=4),
) -> AircraftResponse:
    """Map an ICAO type designator to its canonical display name.

    Unrecognized codes raise UnrecognizedAircraftCodeError, which the error
    middleware turns into a 400 response.
    """
    name = map_aircraft_code(code)
    return AircraftResponse(
        code=code.strip().upper(),
        name=name.value,
        family=get_aircraft_family(name.value, policy.aircraft_families),
    )
