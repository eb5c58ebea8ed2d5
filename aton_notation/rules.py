"""
Notation rules shared by the decoders, the tag emitter and the importer.

The enum values are the canonical codes written into seamark tags; the
spellings accepted on input live in the vocabulary table (data/vocabulary.json).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

CANDIDATE_DELIMITERS = [",", ";", "\t", "|"]

# Column headers of the UK AtoN list export
AREA = "Area"
NAME = "Name"
TYPE = "Type"
LAT = "Latitude"
LON = "Longitude"
CHARACTER = "Character"
RANGE = "Range"
FOG_SIGNALS = "HWS"
BUOY_TYPE = "Inter-GLA Buoy Type"
RADIO_AIDS = "Radio Aids"
COMMENT = "Comment"
DESIGN_CODE = "TH Design Code"
MMSI = "MMSI"

FIELDS = [
    AREA,
    NAME,
    TYPE,
    LAT,
    LON,
    CHARACTER,
    RANGE,
    FOG_SIGNALS,
    BUOY_TYPE,
    RADIO_AIDS,
    COMMENT,
    DESIGN_CODE,
    MMSI,
]

# A row cannot be turned into an AtoN without these
REQUIRED_FIELDS = [NAME, TYPE]


class LightPhase(str, Enum):
    FIXED = "F"
    FLASHING = "Fl"
    LONG_FLASH = "LFl"
    QUICK = "Q"
    VERY_QUICK = "VQ"
    ULTRA_QUICK = "UQ"
    ISOPHASE = "Iso"
    OCCULTING = "Oc"
    INTERRUPTED_QUICK = "IQ"
    INTERRUPTED_VERY_QUICK = "IVQ"
    INTERRUPTED_ULTRA_QUICK = "IUQ"
    MORSE = "Mo"
    FIXED_AND_FLASH = "FFl"
    FLASH_AND_LONG_FLASH = "FlLFl"
    OCCULTING_AND_FLASH = "OcFl"
    FIXED_AND_LONG_FLASH = "FLFl"
    ALTERNATING = "Al"
    ALTERNATING_OCCULTING = "Al.Oc"
    ALTERNATING_LONG_FLASH = "Al.LFl"
    ALTERNATING_FLASHING = "Al.Fl"
    ALTERNATING_FIXED_AND_FLASH = "Al.FFl"
    ALTERNATING_GROUP = "Al.Gr"


class LightColour(str, Enum):
    WHITE = "white"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    VIOLET = "violet"
    ORANGE = "orange"
    AMBER = "amber"


class FogCategory(str, Enum):
    EXPLOSIVE = "explosive"
    DIAPHONE = "diaphone"
    SIREN = "siren"
    NAUTOPHONE = "nautophone"
    REED = "reed"
    TYFON = "tyfon"
    BELL = "bell"
    WHISTLE = "whistle"
    GONG = "gong"
    HORN = "horn"


class PowerType(str, Enum):
    SOLAR = "S"
    BATTERY = "B"
    GENERATOR = "G"


class Shape(str, Enum):
    SPHERICAL = "SP"
    CONICAL = "CO"  # laterals are conical
    CAN = "CA"
    PILLAR = "PP"  # cardinals are pillars
    SPAR = "SR"
    BARREL = "BA"


class StructureType(str, Enum):
    PORT_PILLAR = "PP"
    PORT_LATERAL = "PL"
    STARBOARD_LATERAL = "SL"
    NORTH_CARDINAL = "NC"
    SOUTH_CARDINAL = "SC"
    WEST_CARDINAL = "WC"
    EAST_CARDINAL = "EC"
    SAFE_WATER = "SW"
    SPECIAL_MARK = "SM"
    ISOLATED_DANGER = "ID"
    INSTALLATION = "IN"

    @property
    def category(self) -> str:
        return _STRUCTURE_TRAITS[self][0]

    @property
    def buoy_type(self) -> str:
        return _STRUCTURE_TRAITS[self][1]

    @property
    def beacon_type(self) -> str:
        return _STRUCTURE_TRAITS[self][2]

    @property
    def colour(self) -> str:
        return _STRUCTURE_TRAITS[self][3]

    @property
    def colour_pattern(self) -> str:
        # a single colour has no pattern
        if len(self.colour.split(";")) <= 1:
            return ""
        return _STRUCTURE_TRAITS[self][4]

    @property
    def default_shape(self) -> Shape:
        return _DEFAULT_SHAPES.get(self, Shape.CAN)


# category, buoy type, beacon type, colour, colour pattern
_STRUCTURE_TRAITS: Dict[StructureType, Tuple[str, str, str, str, str]] = {
    StructureType.PORT_PILLAR: ("port", "buoy_lateral", "beacon_lateral", "red", "stripes"),
    StructureType.PORT_LATERAL: ("port", "buoy_lateral", "beacon_lateral", "red", "stripes"),
    StructureType.STARBOARD_LATERAL: ("starboard", "buoy_lateral", "beacon_lateral", "green", "stripes"),
    StructureType.NORTH_CARDINAL: ("north", "buoy_cardinal", "beacon_cardinal", "black;yellow", "stripes"),
    StructureType.SOUTH_CARDINAL: ("south", "buoy_cardinal", "beacon_cardinal", "yellow;black", "stripes"),
    StructureType.WEST_CARDINAL: ("west", "buoy_cardinal", "beacon_cardinal", "yellow;black;yellow", "stripes"),
    StructureType.EAST_CARDINAL: ("east", "buoy_cardinal", "beacon_cardinal", "black;yellow;black", "stripes"),
    StructureType.SAFE_WATER: ("", "buoy_safe_water", "beacon_safe_water", "red;white;red;white", "vertical"),
    StructureType.SPECIAL_MARK: ("warning", "buoy_special_purpose", "beacon_special_purpose", "yellow", "vertical"),
    StructureType.ISOLATED_DANGER: ("", "buoy_isolated_danger", "beacon_isolated_danger", "black;red;black", "stripes"),
    StructureType.INSTALLATION: ("floating", "buoy_installation", "beacon_isolated_danger", "white", "vertical"),
}

_DEFAULT_SHAPES: Dict[StructureType, Shape] = {
    StructureType.NORTH_CARDINAL: Shape.PILLAR,
    StructureType.SOUTH_CARDINAL: Shape.PILLAR,
    StructureType.WEST_CARDINAL: Shape.PILLAR,
    StructureType.EAST_CARDINAL: Shape.PILLAR,
    StructureType.PORT_PILLAR: Shape.PILLAR,
    StructureType.PORT_LATERAL: Shape.CONICAL,
    StructureType.STARBOARD_LATERAL: Shape.CONICAL,
}


def cell_text(value: object) -> str:
    """Any spreadsheet cell value as decoder input. Empty cells become ""."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_number(value: Optional[float]) -> Optional[str]:
    """Render a decoded number the way it is written in tags: 15 not 15.0."""
    if value is None:
        return None
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
