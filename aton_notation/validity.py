"""
Validity gate: a decoded record is usable only if its mandatory field was
recognized. This flag is all the batch layer looks at when deciding whether a
row goes through or gets flagged for manual review.
"""

from __future__ import annotations

from typing import Any, Dict, List

# record kind -> mandatory field
MANDATORY_FIELDS: Dict[str, str] = {
    "light": "phase",
    "fog_signal": "category",
    "design_code": "gla_type",
}


def missing_fields(record: Any) -> List[str]:
    kind = getattr(record, "kind", None)
    if kind not in MANDATORY_FIELDS:
        raise TypeError(f"Not a decoded notation record: {type(record).__name__}")

    name = MANDATORY_FIELDS[kind]
    value = getattr(record, name, None)
    if value is None or (isinstance(value, str) and not value.strip()):
        return [name]
    return []


def is_valid(record: Any) -> bool:
    return not missing_fields(record)
