"""
GLA design-code decoder, e.g. "2S5NC/B", "+1S7SC/R", "3S4.5NC", "1S9SC-AIS/R/MH".

Layout of a code:

    [+] <gla type> (<power><range> | UL) <type> [<shape>] [<aid letters>] [/|- <aid> [/ <aid> ...]]

  - gla type: one digit, or N
  - power: one letter (S solar, B battery, G generator) directly followed by
    the nominal range in nautical miles; "UL" instead marks an unlit structure
  - type: two letters (NC, SL, SW, ...)
  - shape: two letters when they name a known shape (SP, CO, CA, PP, SR, BA)
  - aids: everything after the first "/" or "-", split on "/" and "-"

A leading "+" also marks the unlit variant.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, Optional, Set

from .models import DesignCode
from .rules import cell_text
from .vocabulary import Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)

_SPLIT = re.compile(r"([^/\-]*)(?:[/\-](.*))?", re.DOTALL)
_GLA_TYPE = re.compile(r"[0-9N](?=UL|[A-Z]\d)")
_UNLIT = re.compile(r"UL")
_POWER_RANGE = re.compile(r"([A-Z])(\d+(?:[.,]\d+)?)")
_PAIR = re.compile(r"[A-Z]{2}")
_SUFFIX_SEPARATORS = re.compile(r"[/\-]+")


class DesignCodeDecoder:
    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self.vocabulary = vocabulary or default_vocabulary()
        self._single_letter_aids = {c for c in self.vocabulary.aid_codes if len(c) == 1}

    def decode(self, raw: Any) -> DesignCode:
        text = cell_text(raw)
        try:
            return DesignCode(raw=text, **self._scan(text))
        except Exception:
            logger.exception("Unexpected failure decoding design code %r", text)
            return DesignCode(raw=text)

    def _scan(self, text: str) -> Dict[str, Any]:
        s = re.sub(r"\s+", "", text).upper()
        fields: Dict[str, Any] = {}
        aids: Set[str] = set()

        if s.startswith("+"):
            fields["unlit"] = True
            s = s[1:]

        core, suffix = _SPLIT.fullmatch(s).groups()
        if suffix:
            aids.update(t for t in _SUFFIX_SEPARATORS.split(suffix) if t)

        pos = 0
        m = _GLA_TYPE.match(core, pos)
        if m:
            fields["gla_type"] = m.group(0)
            pos = m.end()

            m = _UNLIT.match(core, pos)
            if m:
                fields["unlit"] = True
                pos = m.end()
            else:
                m = _POWER_RANGE.match(core, pos)
                if m:
                    power = self.vocabulary.power_types.get(m.group(1))
                    if power is not None:
                        fields["power"] = power
                    fields["range"] = float(m.group(2).replace(",", "."))
                    pos = m.end()

            m = _PAIR.match(core, pos)
            if m:
                structure_type = self.vocabulary.structure_types.get(m.group(0))
                if structure_type is not None:
                    fields["structure_type"] = structure_type
                pos = m.end()

            m = _PAIR.match(core, pos)
            if m and m.group(0) in self.vocabulary.shapes:
                fields["shape"] = self.vocabulary.shapes[m.group(0)]
                pos = m.end()

            aids.update(self._tail_aids(core[pos:]))

        if aids:
            fields["aids"] = frozenset(aids)

        logger.debug("Design code %r -> %s", text, fields)
        return fields

    def _tail_aids(self, tail: str) -> Set[str]:
        """Aid letters written straight after the core, e.g. the B in "2S5NCB"."""
        if not tail:
            return set()
        if tail in self.vocabulary.aid_codes:
            return {tail}
        if all(c in self._single_letter_aids for c in tail):
            return set(tail)
        logger.debug("Ignoring unrecognized design code tail %r", tail)
        return set()


@lru_cache(maxsize=None)
def _default_decoder() -> DesignCodeDecoder:
    return DesignCodeDecoder()


def decode_design_code(raw: Any) -> DesignCode:
    return _default_decoder().decode(raw)
