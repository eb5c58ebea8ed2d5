"""
Tag emission: decoded records -> ordered (key, value) seamark tag pairs.

Each table lists the tags of one record type in field declaration order.
Fields that are absent produce no tag at all.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .models import DesignCode, FogSignalCharacteristic, LightCharacteristic, TagPair
from .rules import format_number

Tag = Tuple[str, str]
TagTable = Sequence[Tuple[str, Callable[[Any], Optional[str]]]]


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _light_character(light: LightCharacteristic) -> Optional[str]:
    if light.phase is None:
        return None
    if light.additional is not None:
        return f"{light.phase.value}+{light.additional.value}"
    return light.phase.value


LIGHT_TAGS: TagTable = (
    ("seamark:light:multiple", lambda r: _text(r.multiplicity)),
    ("seamark:light:character", _light_character),
    ("seamark:light:group", lambda r: r.group),
    ("seamark:light:colour", lambda r: ";".join(c.value for c in r.colours)),
    ("seamark:light:period", lambda r: format_number(r.period)),
)

# The OSM wiki lists these under seamark:light:*, which collides with the
# light tags of a combined light + fog signal, hence seamark:fog_signal:*
FOG_SIGNAL_TAGS: TagTable = (
    ("seamark:fog_signal:category", lambda r: r.category.value if r.category else None),
    ("seamark:fog_signal:morse", lambda r: r.morse),
    ("seamark:fog_signal:group", lambda r: _text(r.group)),
    ("seamark:fog_signal:period", lambda r: format_number(r.period)),
    ("seamark:fog_signal:sequence", lambda r: r.sequence),
)

DESIGN_CODE_TAGS: TagTable = (
    ("seamark:design_code:gla_type", lambda r: r.gla_type),
    ("seamark:design_code:power", lambda r: r.power.name.lower() if r.power else None),
    ("seamark:design_code:range", lambda r: format_number(r.range)),
    ("seamark:design_code:unlit", lambda r: "yes" if r.unlit else None),
    ("seamark:design_code:type", lambda r: r.structure_type.value if r.structure_type else None),
    ("seamark:design_code:shape", lambda r: r.shape.name.lower() if r.shape else None),
    ("seamark:design_code:aids", lambda r: ";".join(sorted(r.aids))),
)


def _emit(record: Any, table: TagTable) -> List[Tag]:
    tags: List[Tag] = []
    for key, getter in table:
        value = getter(record)
        if value is not None and str(value).strip():
            tags.append((key, str(value)))
    return tags


@singledispatch
def emit(record: Any) -> List[Tag]:
    raise TypeError(f"No tag table for {type(record).__name__}")


@emit.register
def _(record: LightCharacteristic) -> List[Tag]:
    return _emit(record, LIGHT_TAGS)


@emit.register
def _(record: FogSignalCharacteristic) -> List[Tag]:
    return _emit(record, FOG_SIGNAL_TAGS)


@emit.register
def _(record: DesignCode) -> List[Tag]:
    return _emit(record, DESIGN_CODE_TAGS)


def emit_tag_pairs(record: Any) -> List[TagPair]:
    return [TagPair(k=k, v=v) for k, v in emit(record)]
