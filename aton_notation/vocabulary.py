"""
Versioned vocabulary tables used by the notation decoders.

The default table ships as package data and is loaded once per process.
Decoders take a Vocabulary at construction, so tests can hand them a
restricted one.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Type, TypeVar

from .errors import VocabularyError
from .rules import FogCategory, LightColour, LightPhase, PowerType, Shape, StructureType

logger = logging.getLogger(__name__)

E = TypeVar("E")

_VOCABULARY_FILE = "vocabulary.json"


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Vocabulary:
    """Spelling -> code tables for every decoder. Immutable once built."""

    version: str = "unversioned"
    light_phases: Mapping[str, LightPhase] = field(default_factory=dict)
    light_colours: Mapping[str, LightColour] = field(default_factory=dict)
    fog_categories: Mapping[str, FogCategory] = field(default_factory=dict)
    power_types: Mapping[str, PowerType] = field(default_factory=dict)
    structure_types: Mapping[str, StructureType] = field(default_factory=dict)
    shapes: Mapping[str, Shape] = field(default_factory=dict)
    aid_codes: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        # frozen dataclass: swap the mappings for read-only views
        for name in (
            "light_phases",
            "light_colours",
            "fog_categories",
            "power_types",
            "structure_types",
            "shapes",
        ):
            object.__setattr__(self, name, _freeze(getattr(self, name)))
        object.__setattr__(self, "aid_codes", frozenset(c.upper() for c in self.aid_codes))

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Vocabulary":
        """
        Build a vocabulary from the JSON table layout.

        Every value must name a known code; anything else is a configuration
        error and raises VocabularyError.
        """
        if not isinstance(raw, dict):
            raise VocabularyError("Vocabulary table must be a JSON object")

        return cls(
            version=str(raw.get("version", "unversioned")),
            light_phases=_parse_table(raw, "light_phases", LightPhase),
            light_colours=_parse_table(raw, "light_colours", LightColour),
            fog_categories=_parse_table(raw, "fog_categories", FogCategory),
            power_types=_parse_table(raw, "power_types", PowerType),
            structure_types=_parse_table(raw, "structure_types", StructureType),
            shapes=_parse_table(raw, "shapes", Shape),
            aid_codes=frozenset(_parse_codes(raw.get("aid_codes", []))),
        )


def _parse_table(raw: Dict[str, Any], key: str, enum: Type[E]) -> Dict[str, E]:
    table = raw.get(key, {})
    if not isinstance(table, dict):
        raise VocabularyError(f"Vocabulary section '{key}' must be an object")

    result: Dict[str, E] = {}
    for spelling, code in table.items():
        if not str(spelling).strip():
            raise VocabularyError(f"Blank spelling in vocabulary section '{key}'")
        try:
            result[str(spelling).strip()] = enum(code)  # type: ignore[call-arg]
        except ValueError:
            raise VocabularyError(f"Unknown code '{code}' for '{spelling}' in section '{key}'") from None
    return result


def _parse_codes(codes: Iterable[Any]) -> Iterable[str]:
    if isinstance(codes, (str, bytes)) or not isinstance(codes, (list, tuple)):
        raise VocabularyError("Vocabulary section 'aid_codes' must be a list")
    return [str(c).strip().upper() for c in codes if str(c).strip()]


@lru_cache(maxsize=None)
def load_vocabulary(path: Optional[str] = None) -> Vocabulary:
    """
    Load a vocabulary table.

    - path=None reads the table shipped in aton_notation/data/
    - otherwise reads the given JSON file
    Results are cached per path; a changed table needs a new version/path.
    """
    try:
        if path is None:
            with resources.files("aton_notation.data").joinpath(_VOCABULARY_FILE).open(
                "r", encoding="utf-8"
            ) as f:
                raw = json.load(f)
        else:
            with Path(path).open("r", encoding="utf-8") as f:
                raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise VocabularyError(f"Cannot read vocabulary table {path or _VOCABULARY_FILE}: {e}") from e

    vocabulary = Vocabulary.from_dict(raw)
    logger.info("Loaded vocabulary version %s from %s", vocabulary.version, path or "package data")
    return vocabulary


def default_vocabulary() -> Vocabulary:
    return load_vocabulary(None)
