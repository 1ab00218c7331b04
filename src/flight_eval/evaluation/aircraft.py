"""Canonical aircraft names, ICAO code mapping and family grouping.

Ground truth datasets carry ICAO type designators (``B738``, ``A20N``...). The
evaluation compares display names at family granularity, so codes are mapped
onto a closed set of canonical names before scoring. Families group display
names that are interchangeable answers for a route (e.g. 737NG vs 737MAX).
"""

from collections.abc import Mapping, Sequence
from enum import Enum

from ..exceptions import UnrecognizedAircraftCodeError


class AircraftName(str, Enum):
    """Canonical aircraft display names."""

    AIRBUS_A220 = "Airbus A220"
    AIRBUS_A319 = "Airbus A319"
    AIRBUS_A320 = "Airbus A320"
    AIRBUS_A321 = "Airbus A321"
    AIRBUS_A330 = "Airbus A330"
    AIRBUS_A350 = "Airbus A350"
    AIRBUS_A380 = "Airbus A380"
    ATR_42_72 = "ATR 42/72"
    BOEING_717 = "Boeing 717"
    BOEING_737NG = "Boeing 737NG"
    BOEING_737MAX = "Boeing 737MAX"
    BOEING_747 = "Boeing 747"
    BOEING_757 = "Boeing 757"
    BOEING_767 = "Boeing 767"
    BOEING_777 = "Boeing 777"
    BOEING_787 = "Boeing 787"
    BOMBARDIER_CRJ = "Bombardier CRJ"
    DHC_DASH_8 = "DHC Dash 8"
    EMBRAER_ERJ_135 = "Embraer ERJ 135"
    EMBRAER_ERJ_145 = "Embraer ERJ 145"
    EMBRAER_E170 = "Embraer E170"
    EMBRAER_E190 = "Embraer E190"
    EMBRAER_E175_E2 = "Embraer E175-E2"
    EMBRAER_E190_E2 = "Embraer E190-E2"
    EMBRAER_E195_E2 = "Embraer E195-E2"
    COMAC_C909 = "Comac C909"
    COMAC_C919 = "Comac C919"
    SUPERJET_100 = "Superjet 100"
    TU_204_214 = "Tu-204/214"
    CESSNA_402 = "Cessna 402"
    IL_96 = "Il-96"


# ICAO type designator -> canonical display name
AIRCRAFT_CODE_MAP: dict[str, AircraftName] = {
    "B737": AircraftName.BOEING_737NG,
    "B738": AircraftName.BOEING_737NG,
    "B739": AircraftName.BOEING_737NG,
    "B73J": AircraftName.BOEING_737NG,
    "B38M": AircraftName.BOEING_737MAX,
    "B39M": AircraftName.BOEING_737MAX,
    "B712": AircraftName.BOEING_717,
    "B744": AircraftName.BOEING_747,
    "B748": AircraftName.BOEING_747,
    "B752": AircraftName.BOEING_757,
    "B753": AircraftName.BOEING_757,
    "B763": AircraftName.BOEING_767,
    "B764": AircraftName.BOEING_767,
    "B772": AircraftName.BOEING_777,
    "B773": AircraftName.BOEING_777,
    "B77L": AircraftName.BOEING_777,
    "B77W": AircraftName.BOEING_777,
    "B788": AircraftName.BOEING_787,
    "B789": AircraftName.BOEING_787,
    "B78X": AircraftName.BOEING_787,
    "BCS1": AircraftName.AIRBUS_A220,
    "BCS3": AircraftName.AIRBUS_A220,
    "A319": AircraftName.AIRBUS_A319,
    "A19N": AircraftName.AIRBUS_A319,
    "A320": AircraftName.AIRBUS_A320,
    "A20N": AircraftName.AIRBUS_A320,
    "A321": AircraftName.AIRBUS_A321,
    "A21N": AircraftName.AIRBUS_A321,
    "A332": AircraftName.AIRBUS_A330,
    "A333": AircraftName.AIRBUS_A330,
    "A339": AircraftName.AIRBUS_A330,
    "A359": AircraftName.AIRBUS_A350,
    "A35K": AircraftName.AIRBUS_A350,
    "A388": AircraftName.AIRBUS_A380,
    "AT43": AircraftName.ATR_42_72,
    "AT72": AircraftName.ATR_42_72,
    "AT76": AircraftName.ATR_42_72,
    "CRJ2": AircraftName.BOMBARDIER_CRJ,
    "CRJ7": AircraftName.BOMBARDIER_CRJ,
    "CRJ9": AircraftName.BOMBARDIER_CRJ,
    "DH8D": AircraftName.DHC_DASH_8,
    "E135": AircraftName.EMBRAER_ERJ_135,
    "E145": AircraftName.EMBRAER_ERJ_145,
    "E170": AircraftName.EMBRAER_E170,
    "E75L": AircraftName.EMBRAER_E175_E2,
    "E75S": AircraftName.EMBRAER_E175_E2,
    "E190": AircraftName.EMBRAER_E190,
    "E290": AircraftName.EMBRAER_E190_E2,
    "E195": AircraftName.EMBRAER_E195_E2,
    "E295": AircraftName.EMBRAER_E195_E2,
    "SU95": AircraftName.SUPERJET_100,
    "C919": AircraftName.COMAC_C919,
    "AJ27": AircraftName.COMAC_C909,
    "T204": AircraftName.TU_204_214,
    "C402": AircraftName.CESSNA_402,
    "IL96": AircraftName.IL_96,
}


# Family name -> member display names. A display name belongs to at most one family.
DEFAULT_AIRCRAFT_FAMILIES: dict[str, list[str]] = {
    "Boeing 737": ["Boeing 737NG", "Boeing 737MAX", "Boeing 717"],
    "Boeing 777": ["Boeing 777", "Boeing 777-200", "Boeing 777-300ER"],
    "Boeing 787": ["Boeing 787", "Boeing 787-8", "Boeing 787-9", "Boeing 787-10"],
    "Boeing 747": ["Boeing 747", "Boeing 747-400", "Boeing 747-8"],
    "Boeing 757": ["Boeing 757", "Boeing 757-200", "Boeing 757-300"],
    "Boeing 767": ["Boeing 767", "Boeing 767-300", "Boeing 767-400"],
    "Airbus A320": ["Airbus A319", "Airbus A320", "Airbus A321"],
    "Airbus A330": ["Airbus A330", "Airbus A330-200", "Airbus A330-300", "Airbus A330-900"],
    "Airbus A350": ["Airbus A350", "Airbus A350-900", "Airbus A350-1000"],
    "Airbus A380": ["Airbus A380", "Airbus A380-800"],
    "Embraer E170": ["Embraer E170", "Embraer E175"],
    "Embraer E190": ["Embraer E190", "Embraer E195"],
    "Embraer E175-E2": ["Embraer E175-E2", "Embraer E170-E2"],
    "Embraer E190-E2": ["Embraer E190-E2", "Embraer E195-E2"],
    "Bombardier CRJ": ["Bombardier CRJ", "Bombardier CRJ-200", "Bombardier CRJ-700", "Bombardier CRJ-900"],
    "ATR 42/72": ["ATR 42/72", "ATR 42", "ATR 72"],
    "DHC Dash 8": ["DHC Dash 8", "DHC Dash 8-400"],
}


def map_aircraft_code(code: str) -> AircraftName:
    """Map an ICAO type designator to its canonical display name.

    Args:
        code: ICAO aircraft type designator (e.g. "B738"), case-insensitive

    Returns:
        Canonical AircraftName

    Raises:
        UnrecognizedAircraftCodeError: If the code is not in the mapping table

    Examples:
        >>> map_aircraft_code("B38M")
        <AircraftName.BOEING_737MAX: 'Boeing 737MAX'>
    """
    normalized = (code or "").strip().upper()
    try:
        return AIRCRAFT_CODE_MAP[normalized]
    except KeyError:
        raise UnrecognizedAircraftCodeError(code) from None


def get_aircraft_family(
    name: str | None,
    families: Mapping[str, Sequence[str]] = DEFAULT_AIRCRAFT_FAMILIES,
) -> str | None:
    """Family name for an aircraft display name.

    A name that is not listed in any family is its own (singleton) family.
    """
    if not name:
        return None
    for family, members in families.items():
        if name in members:
            return family
    return name


def is_same_family(
    first: str | None,
    second: str | None,
    families: Mapping[str, Sequence[str]] = DEFAULT_AIRCRAFT_FAMILIES,
) -> bool:
    """Whether two display names resolve to the same family (symmetric)."""
    if not first or not second:
        return False
    if first == second:
        return True
    return get_aircraft_family(first, families) == get_aircraft_family(second, families)
