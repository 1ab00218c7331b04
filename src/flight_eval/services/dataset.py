"""Ground-truth dataset loading and test case construction.

The raw dataset is a JSON list of flights keyed by IATA codes. Two layouts
are supported:

- enriched: ``enriched.duration`` (minutes) and
  ``enriched.dep_time_scheduled`` ("YYYY-MM-DD HH:MM")
- simple: ``scheduled_flight_date`` ("DD.MM.YYYY") and ``duration`` ("HH:MM")

Each flight becomes a ``TestCase``: a natural-language query plus a
normalized ground-truth ``FlightRecord`` (date "DD-MM-YYYY", duration
"HH:MM", canonical aircraft name).
"""

import json
import logging
import random
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..evaluation.aircraft import map_aircraft_code
from ..evaluation.comparator import format_minutes
from ..evaluation.types import FlightRecord
from ..exceptions import DatasetLoadError, UnrecognizedAircraftCodeError

logger = logging.getLogger(__name__)

# Fallback IATA airline names when no airlines file is supplied
AIRLINE_NAMES = {
    "WN": "Southwest",
    "IB": "Iberia",
    "EI": "Aer Lingus",
    "KL": "KLM",
    "B6": "JetBlue",
    "AZ": "ITA Airways",
    "UA": "United",
    "AA": "American Airlines",
    "DL": "Delta",
    "BA": "British Airways",
    "LH": "Lufthansa",
    "AF": "Air France",
    "NH": "ANA",
    "QR": "Qatar Airways",
    "EK": "Emirates",
    "SQ": "Singapore Airlines",
    "CX": "Cathay Pacific",
    "TK": "Turkish Airlines",
    "QF": "Qantas",
    "VA": "Virgin Atlantic",
    "AC": "Air Canada",
    "FR": "Ryanair",
    "U2": "easyJet",
    "MH": "Malaysia Airlines",
    "AV": "Avianca",
}


class TestCase(BaseModel):
    """A query to send to the extraction provider and its ground truth."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    case_id: str
    query: str
    ground_truth: FlightRecord
    airline_name: str
    origin: str
    destination: str


def generate_query(origin: str, destination: str, date: str, airline_name: str) -> str:
    """Build the natural-language query for a flight.

    Examples:
        >>> generate_query("Las Vegas", "Albuquerque", "16-12-2025", "Southwest")
        'Las Vegas to Albuquerque on 16-12-2025 with Southwest'
    """
    return f"{origin} to {destination} on {date} with {airline_name}"


def format_scheduled_date(timestamp: str) -> str:
    """Convert "2025-12-16 10:00" (or "2025-12-16") to "16-12-2025"."""
    date = timestamp.strip().split(" ")[0]
    year, month, day = date.split("-")
    return f"{int(day):02d}-{int(month):02d}-{year}"


def format_dotted_date(value: str) -> str:
    """Convert "16.12.2025" to "16-12-2025"."""
    day, month, year = value.strip().split(".")
    return f"{int(day):02d}-{int(month):02d}-{year}"


def _read_json(path: Path, label: str) -> Any:
    if not path.exists():
        raise DatasetLoadError(f"{label} not found: {path}", {"path": str(path)})
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DatasetLoadError(f"Failed to read {label}: {e}", {"path": str(path)}) from e


class FlightDatasetLoader:
    """Load the raw flight dataset and build test cases.

    Examples:
        >>> loader = FlightDatasetLoader("data/sample-flights.json", "data/airports.json")
        >>> cases = loader.load()
        >>> cases[0].query
        'Las Vegas to Albuquerque on 16-12-2025 with Southwest'
    """

    def __init__(
        self,
        dataset_path: str | Path,
        airports_path: str | Path | None = None,
        airlines_path: str | Path | None = None,
        strict: bool = False,
    ):
        """Initialize the loader.

        Args:
            dataset_path: Raw flights JSON (list of objects)
            airports_path: Optional airports JSON (``code``, ``city``, ``name``)
            airlines_path: Optional airlines JSON (``code``, ``name``)
            strict: Raise on unusable flights instead of skipping them
        """
        self.dataset_path = Path(dataset_path)
        self.airports: dict[str, dict] = {}
        self.airlines: dict[str, str] = dict(AIRLINE_NAMES)
        self.strict = strict

        if airports_path:
            airports = _read_json(Path(airports_path), "Airports file")
            self.airports = {a["code"]: a for a in airports if "code" in a}
        if airlines_path:
            airlines = _read_json(Path(airlines_path), "Airlines file")
            self.airlines.update({a["code"]: a["name"] for a in airlines if "code" in a and "name" in a})

    def airport_city(self, code: str) -> str:
        airport = self.airports.get(code) or {}
        return airport.get("city") or airport.get("name") or code

    def airline_name(self, code: str) -> str:
        return self.airlines.get(code, code)

    def load(self) -> list[TestCase]:
        """Read the dataset and build test cases.

        Returns:
            Test cases in dataset order

        Raises:
            DatasetLoadError: If the file is missing, unreadable or not a list
                (or, in strict mode, if any flight cannot be converted)
        """
        raw = _read_json(self.dataset_path, "Dataset")
        if not isinstance(raw, list):
            raise DatasetLoadError(
                "Dataset must be a JSON list of flights", {"path": str(self.dataset_path)}
            )

        cases = []
        skipped = 0
        for index, flight in enumerate(raw):
            try:
                cases.append(self.build_test_case(flight, index))
            except UnrecognizedAircraftCodeError as e:
                if self.strict:
                    raise
                logger.warning(f"Skipping flight #{index}: {e.message}")
                skipped += 1
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                if self.strict:
                    raise DatasetLoadError(
                        f"Malformed flight #{index}: {e}", {"index": index}
                    ) from e
                logger.warning(f"Skipping malformed flight #{index}: {e}")
                skipped += 1

        logger.info(
            f"Loaded {len(cases)} test cases from {self.dataset_path} (skipped {skipped})"
        )
        return cases

    def build_test_case(self, flight: dict, index: int = 0) -> TestCase:
        """Convert one raw flight into a TestCase.

        Raises:
            UnrecognizedAircraftCodeError: If the aircraft code has no canonical name
            KeyError: If a required key is missing
        """
        airline_code = flight["airline_iata"]
        dep_code = flight["dep_iata"]
        arr_code = flight["arr_iata"]

        enriched = flight.get("enriched")
        if enriched:
            date = format_scheduled_date(enriched["dep_time_scheduled"])
            duration = format_minutes(enriched["duration"])
        else:
            date = format_dotted_date(flight["scheduled_flight_date"])
            duration = flight["duration"]

        aircraft = map_aircraft_code(flight["aircraft_icao"])

        ground_truth = FlightRecord(
            flight_number=flight.get("flight_number"),
            airline_code=airline_code,
            departure_airport_code=dep_code,
            arrival_airport_code=arr_code,
            flight_date=date,
            aircraft_name=aircraft.value,
            flight_time=duration,
        )

        airline_name = self.airline_name(airline_code)
        origin = self.airport_city(dep_code)
        destination = self.airport_city(arr_code)
        flight_number = ground_truth.flight_number or str(index)

        return TestCase(
            case_id=f"{airline_code}{flight_number}-{date}",
            query=generate_query(origin, destination, date, airline_name),
            ground_truth=ground_truth,
            airline_name=airline_name,
            origin=origin,
            destination=destination,
        )


def sample_test_cases(
    cases: Sequence[TestCase], count: int | None, seed: int | None = None
) -> list[TestCase]:
    """Random sample of up to ``count`` cases (all cases, in order, if count is None)."""
    if count is None or count >= len(cases):
        return list(cases)
    rng = random.Random(seed)
    return rng.sample(list(cases), max(count, 0))
