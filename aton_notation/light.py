"""
Light-characteristic decoder.

Turns hydrographic light notation such as "Fl(2+1)W.10s", "Q(6)+LFl W 15s"
or "2 Oc.W.R G.1,5s" into a LightCharacteristic. Separators may be dots,
spaces or nothing at all, and the decimal mark may be a comma.

The scanner reads, in order:
  - a leading repeat count followed by whitespace
  - the phase, longest spelling first ("Al Fl" before "Al")
  - a parenthesized group right after the phase, kept verbatim
  - a "+"-joined additional phase
and then walks the rest picking up colour runs and the "<n>s" period.
Anything it cannot place is skipped.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Pattern, Tuple

from .models import LightCharacteristic
from .rules import LightColour, LightPhase, cell_text
from .vocabulary import Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)

_MULTIPLICITY = re.compile(r"(\d{1,4})(?!\s*s(?![A-Za-z]))\s+")
_GROUP = re.compile(r"\s*\(([^()]*)\)")
_GROUP_CONTENT = re.compile(r"\d+(?:\+\d+)*|[A-Za-z]+")
_ADDITIONAL = re.compile(r"\s*\+\s*")
_PERIOD = re.compile(r"(\d+(?:[.,]\d+)?)\s*s(?![A-Za-z])")
_WORD = re.compile(r"[A-Za-z]+")
_SEPARATORS = re.compile(r"[\s.]*")
_NOISE = re.compile(r"\d+|.", re.DOTALL)


def _phase_pattern(spelling: str) -> Pattern[str]:
    # "Al.Fl" also matches "Al Fl", "Al. Fl" and "AlFl"
    parts = [re.escape(p) for p in spelling.split(".") if p]
    return re.compile(r"[.\s]*".join(parts), re.IGNORECASE)


class LightDecoder:
    """Stateless once built; safe to share between threads."""

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self.vocabulary = vocabulary or default_vocabulary()

        spellings = sorted(self.vocabulary.light_phases, key=len, reverse=True)
        self._phases: List[Tuple[Pattern[str], LightPhase]] = [
            (_phase_pattern(s), self.vocabulary.light_phases[s]) for s in spellings
        ]
        self._colour_codes: List[str] = sorted(self.vocabulary.light_colours, key=len, reverse=True)

    def decode(self, raw: Any) -> LightCharacteristic:
        text = cell_text(raw)
        try:
            return LightCharacteristic(raw=text, **self._scan(text.strip()))
        except Exception:
            logger.exception("Unexpected failure decoding light character %r", text)
            return LightCharacteristic(raw=text)

    # --- scanning ---

    def _scan(self, s: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        colours: List[LightColour] = []

        pos = 0
        m = _MULTIPLICITY.match(s)
        if m:
            fields["multiplicity"] = int(m.group(1))
            pos = m.end()

        pos = self._read_phase_block(s, pos, fields)

        while pos < len(s):
            pos = _SEPARATORS.match(s, pos).end()
            if pos >= len(s):
                break

            m = _PERIOD.match(s, pos)
            if m:
                if "period" not in fields:
                    fields["period"] = float(m.group(1).replace(",", "."))
                pos = m.end()
                continue

            if "phase" not in fields:
                new_pos = self._read_phase_block(s, pos, fields)
                if new_pos != pos:
                    pos = new_pos
                    continue

            m = _WORD.match(s, pos)
            if m:
                found = self._split_colours(m.group(0))
                if found is not None:
                    colours.extend(found)
                pos = m.end()
                continue

            # noise
            pos = _NOISE.match(s, pos).end()

        if colours:
            fields["colours"] = tuple(colours)

        logger.debug("Light character %r -> %s", s, fields)
        return fields

    def _match_phase(self, s: str, pos: int) -> Tuple[Optional[LightPhase], int]:
        for pattern, phase in self._phases:
            m = pattern.match(s, pos)
            if m and self._phase_ends_at(s, m.end()):
                return phase, m.end()
        return None, pos

    def _phase_ends_at(self, s: str, end: int) -> bool:
        """A phase may run straight into colour codes ("FlG", "IsoWRG") but not into other letters."""
        m = _WORD.match(s, end)
        return m is None or self._split_colours(m.group(0)) is not None

    def _read_phase_block(self, s: str, pos: int, fields: Dict[str, Any]) -> int:
        """Phase, optional (group), optional +additional phase."""
        phase, pos = self._match_phase(s, pos)
        if phase is None:
            return pos
        fields["phase"] = phase

        m = _GROUP.match(s, pos)
        if m:
            content = re.sub(r"\s+", "", m.group(1))
            if _GROUP_CONTENT.fullmatch(content):
                fields["group"] = content
                pos = m.end()

        m = _ADDITIONAL.match(s, pos)
        if m:
            additional, end = self._match_phase(s, m.end())
            if additional is not None:
                fields["additional"] = additional
                pos = end

        return pos

    def _split_colours(self, word: str) -> Optional[List[LightColour]]:
        """Split a letter run into colour codes, or None if it is not one."""
        result: List[LightColour] = []
        i = 0
        while i < len(word):
            for code in self._colour_codes:
                if word.startswith(code, i):
                    result.append(self.vocabulary.light_colours[code])
                    i += len(code)
                    break
            else:
                return None
        return result


@lru_cache(maxsize=None)
def _default_decoder() -> LightDecoder:
    return LightDecoder()


def decode_light(raw: Any) -> LightCharacteristic:
    return _default_decoder().decode(raw)
