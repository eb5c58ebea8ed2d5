"""
Fog-signal decoder.

Examples of the notation handled:
    "HORN(3)30s   (2+2+2+2+2+20)"
    "BELL.15s   (2,5+12,5)"
    "HORN   MO(U)30s   (0,75+1+0,75+1+2,5+24)"
    "Horn (2) 60s"

The trailing parenthesized on/off timing breakdown is carried as opaque text
in `sequence`; its absence or malformation never invalidates the record.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, Optional

from .models import FogSignalCharacteristic
from .rules import FogCategory, cell_text
from .vocabulary import Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)

_MORSE = re.compile(r"MO\s*\(\s*([A-Z]+)\s*\)|MO\s+([A-Z])(?![A-Z])", re.IGNORECASE)
_PAREN = re.compile(r"\(([^()]*)\)")
_PERIOD = re.compile(r"(\d+(?:[.,]\d+)?)\s*s(?![A-Za-z])")
_WORD = re.compile(r"[A-Za-z]+")
_SEPARATORS = re.compile(r"[\s.]*")


class FogSignalDecoder:
    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self.vocabulary = vocabulary or default_vocabulary()
        self._categories: Dict[str, FogCategory] = {
            k.upper(): v for k, v in self.vocabulary.fog_categories.items()
        }

    def decode(self, raw: Any) -> FogSignalCharacteristic:
        text = cell_text(raw)
        try:
            return FogSignalCharacteristic(raw=text, **self._scan(text.strip()))
        except Exception:
            logger.exception("Unexpected failure decoding fog signal %r", text)
            return FogSignalCharacteristic(raw=text)

    def _scan(self, s: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}

        pos = 0
        while pos < len(s):
            pos = _SEPARATORS.match(s, pos).end()
            if pos >= len(s):
                break

            m = _MORSE.match(s, pos)
            if m:
                fields.setdefault("morse", (m.group(1) or m.group(2)).upper())
                pos = m.end()
                continue

            m = _PAREN.match(s, pos)
            if m:
                content = re.sub(r"\s+", "", m.group(1))
                if content.isdigit() and not fields.keys() & {"group", "period", "sequence"}:
                    fields["group"] = int(content)
                elif content:
                    fields.setdefault("sequence", content)
                pos = m.end()
                continue

            m = _PERIOD.match(s, pos)
            if m:
                fields.setdefault("period", float(m.group(1).replace(",", ".")))
                pos = m.end()
                continue

            m = _WORD.match(s, pos)
            if m:
                category = self._categories.get(m.group(0).upper())
                if category is not None:
                    fields.setdefault("category", category)
                pos = m.end()
                continue

            # noise
            pos += 1

        logger.debug("Fog signal %r -> %s", s, fields)
        return fields


@lru_cache(maxsize=None)
def _default_decoder() -> FogSignalDecoder:
    return FogSignalDecoder()


def decode_fog_signal(raw: Any) -> FogSignalCharacteristic:
    return _default_decoder().decode(raw)
