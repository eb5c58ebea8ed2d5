"""
AtoN node assembly from one spreadsheet row and its decoded notation cells.

An AtoN consists of a master type (e.g. "lighthouse") and a set of equipment
types (light, fog signal, AIS, ...). The master becomes the node, each piece of
equipment a child node. The tag model follows the OSM seamark vocabulary,
see http://wiki.openstreetmap.org/wiki/Key:seamark and its sub-pages.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from . import rules
from .errors import RowRejected
from .models import AtonNode, DesignCode, FogSignalCharacteristic, LightCharacteristic
from .rules import format_number
from .tags import emit

logger = logging.getLogger(__name__)

_LAT_LON = re.compile(r"^(\d+)°(\d+(?:[.,]\d+)?)'?([NSEW])$", re.IGNORECASE)


class AtonType(str, Enum):
    LIGHT = "LIGHT"
    SECTOR_LIGHT = "SECTOR LIGHT"
    LIGHTHOUSE = "LIGHTHOUSE"
    LIGHT_VESSEL = "LIGHT VESSEL"
    LIGHT_FLOAT = "LIGHT FLOAT"
    BUOY = "BUOY"
    BEACON = "BEACON"
    AIS = "AIS"
    DGPS = "DGPS"
    LORAN = "LORAN"
    RACON = "RACON"
    FOG_SIGNAL = "FOG SIGNAL"
    VIRTUAL_ATON = "VIRTUAL ATON"

    @property
    def needs_design_code(self) -> bool:
        return self in (AtonType.BUOY, AtonType.BEACON)


def find_aton_type(text: Optional[str], fold: bool = True) -> Optional[AtonType]:
    """
    Look up the AtoN type written in a Type / Radio Aids cell.

    "Light (sector)" -> LIGHT: parenthesized remarks are dropped. With fold,
    lights map onto LIGHTHOUSE and AIS onto VIRTUAL_ATON, as master types do.
    """
    if text is None:
        return None
    name = re.sub(r"\(.*\)", "", text.upper()).strip()
    name = re.sub(r"\s+", "_", name)
    try:
        aton_type = AtonType[name]
    except KeyError:
        return None

    if fold:
        if aton_type in (AtonType.LIGHT, AtonType.SECTOR_LIGHT):
            return AtonType.LIGHTHOUSE
        if aton_type is AtonType.AIS:
            return AtonType.VIRTUAL_ATON
    return aton_type


def parse_aids_types(text: Optional[str]) -> Set[AtonType]:
    """Parses the "Radio Aids" cell, e.g. "AIS/Racon"."""
    if not text:
        return set()
    found = set()
    for token in text.split("/"):
        aton_type = find_aton_type(token, fold=False)
        if aton_type is None:
            logger.debug("Ignoring unknown radio aid %r", token)
            continue
        found.add(aton_type)
    return found


def parse_lat_lon(text: Optional[str]) -> Optional[float]:
    """
    Parse a latitude/longitude cell into signed decimal degrees.

    Accepts degrees + decimal minutes ("52°01.123'N", "001° 30.5' W") or a
    plain decimal number. Returns None for anything else.
    """
    if text is None:
        return None
    s = re.sub(r"\s+", "", str(text))
    if not s:
        return None

    m = _LAT_LON.match(s)
    if m:
        degrees = float(m.group(1))
        minutes = float(m.group(2).replace(",", "."))
        sign = 1 if m.group(3).upper() in ("N", "E") else -1
        return sign * (degrees + minutes / 60)

    try:
        return float(s.replace(",", "."))
    except ValueError:
        return None


def generate_uid(name: str) -> str:
    """AtoN UID from its name: lowercase, spaces replaced by dashes."""
    return re.sub(r"\s+", "-", name.strip().lower())


# --- tag generation ---

_STATIC_TAGS: Dict[AtonType, Tuple[str, ...]] = {
    AtonType.LIGHTHOUSE: (
        "seamark:type", "light_major",
        "seamark:landmark:category", "tower",
        "seamark:landmark:colour", "white",
        "seamark:landmark:colour_pattern", "vertical",
        "seamark:landmark:function", "light_support",
        "seamark:landmark:construction", "hard-surfaced",
        "seamark:landmark:conspicuity", "conspicuous",
    ),
    AtonType.LIGHT_VESSEL: (
        "seamark:type", "light_vessel",
        "seamark:${type}:colour", "red",
        "seamark:${type}:colour_pattern", "vertical",
        "seamark:${type}:construction", "hard-surfaced",
    ),
    AtonType.DGPS: (
        "seamark:type", "radio_station",
        "seamark:${type}:category", "differential",
    ),
    AtonType.LORAN: (
        "seamark:type", "radio_station",
        "seamark:${type}:category", "loran",
    ),
    AtonType.RACON: (
        "seamark:type", "radar_transponder",
        "seamark:${type}:category", "racon",
    ),
}
_STATIC_TAGS[AtonType.LIGHT_FLOAT] = _STATIC_TAGS[AtonType.LIGHT_VESSEL]


def _numeric(row: Dict[str, str], column: str) -> Optional[str]:
    value = (row.get(column) or "").strip().replace(",", ".")
    try:
        return format_number(float(value))
    except ValueError:
        return None


def generate_tags(
    node: AtonNode,
    aton_type: AtonType,
    row: Dict[str, str],
    light: Optional[LightCharacteristic] = None,
    fog_signal: Optional[FogSignalCharacteristic] = None,
    design_code: Optional[DesignCode] = None,
) -> None:
    """Populates the node with the tags of the given type."""
    if aton_type in _STATIC_TAGS:
        node.update_tags(*_STATIC_TAGS[aton_type])

    elif aton_type.needs_design_code:
        if design_code is None or not design_code.valid or design_code.structure_type is None:
            raise RowRejected(
                "invalid_design_code",
                rules.DESIGN_CODE,
                design_code.raw if design_code is not None else None,
            )
        structure = design_code.structure_type
        shape = design_code.effective_shape
        node.update_tags(
            "seamark:type", structure.buoy_type if aton_type is AtonType.BUOY else structure.beacon_type,
            "seamark:${type}:category", structure.category,
            "seamark:${type}:shape", shape.name.lower() if shape else "",
            "seamark:${type}:system", "iala-a",
            "seamark:${type}:colour", structure.colour,
            "seamark:${type}:colour_pattern", structure.colour_pattern,
        )
        node.update_tags(*_flatten(emit(design_code)))

    elif aton_type in (AtonType.LIGHT, AtonType.SECTOR_LIGHT):
        # light tags go first so the explicit seamark:type below wins
        if light is not None and light.valid:
            node.tags.update(emit(light))
        node.update_tags(
            "seamark:type", "light",
            "seamark:${type}:visibility", "high intensity",
            "seamark:${type}:range", _numeric(row, rules.RANGE),
        )

    elif aton_type is AtonType.FOG_SIGNAL:
        node.update_tags("seamark:type", "fog_signal")
        if fog_signal is not None and fog_signal.valid:
            node.update_tags(*_flatten(emit(fog_signal)))

    elif aton_type in (AtonType.AIS, AtonType.VIRTUAL_ATON):
        node.update_tags(
            "seamark:type", "radio_station",
            "seamark:${type}:category", "ais",
            "seamark:${type}:mmsi", row.get(rules.MMSI),
        )
        if aton_type is AtonType.VIRTUAL_ATON:
            node.update_tags("seamark:virtual_aton:category", "special_purpose")

    node.update_tags(
        "seamark:status", "permanent",
        "seamark:information", row.get(rules.COMMENT),
    )


def _flatten(tags: List[Tuple[str, str]]) -> List[str]:
    return [item for pair in tags for item in pair]


def build_aton(
    row: Dict[str, str],
    changeset: int,
    light: Optional[LightCharacteristic] = None,
    fog_signal: Optional[FogSignalCharacteristic] = None,
    design_code: Optional[DesignCode] = None,
) -> AtonNode:
    """
    Build the AtoN node of one row, with its equipment as children.

    Raises RowRejected when the row has no name, an unknown type, or is a
    buoy/beacon without a usable design code.
    """
    name = (row.get(rules.NAME) or "").strip()
    if not name:
        raise RowRejected("missing_name", rules.NAME, None)

    master_type = find_aton_type(row.get(rules.TYPE))
    if master_type is None:
        raise RowRejected("unknown_type", rules.TYPE, row.get(rules.TYPE))

    aton = AtonNode(
        uid=generate_uid(name),
        name=name,
        lat=parse_lat_lon(row.get(rules.LAT)),
        lon=parse_lat_lon(row.get(rules.LON)),
        changeset=changeset,
    )
    aton.tags["seamark:name"] = name

    records = {"light": light, "fog_signal": fog_signal, "design_code": design_code}
    generate_tags(aton, master_type, row, **records)

    equipment: Set[AtonType] = set()
    if (row.get(rules.CHARACTER) or "").strip():
        equipment.add(AtonType.LIGHT)
    if (row.get(rules.FOG_SIGNALS) or "").strip():
        equipment.add(AtonType.FOG_SIGNAL)
    equipment.update(parse_aids_types(row.get(rules.RADIO_AIDS)))

    # enum declaration order keeps the children stable between runs
    for equipment_type in (t for t in AtonType if t in equipment):
        child = AtonNode(
            uid=f"{aton.uid}-{generate_uid(equipment_type.value)}",
            name=f"{name} {equipment_type.value}",
            lat=aton.lat,
            lon=aton.lon,
            changeset=changeset,
        )
        child.tags["seamark:name"] = child.name
        generate_tags(child, equipment_type, row, **records)
        aton.children.append(child)

    return aton
