"""
Batch import: decode the notation cells of many spreadsheet rows and build
their AtoN nodes.

Decoders are stateless, so rows are decoded in parallel with no locking. The
change-set counter is the only shared mutable state; it is drawn once per
batch, before decoding starts. A bad row is reported, never fatal.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from . import rules
from .aton import build_aton
from .design import DesignCodeDecoder
from .errors import RowRejected
from .fog import FogSignalDecoder
from .light import LightDecoder
from .models import AtonNode, ImportReport, ImportResponse, ReportItem, ReportSummary
from .normalize import Row, read_aton_csv
from .validity import missing_fields
from .vocabulary import Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)


class ChangeSetCounter:
    """Monotonically increasing change-set sequence, safe across threads."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


@dataclass(frozen=True)
class Decoders:
    light: LightDecoder
    fog_signal: FogSignalDecoder
    design_code: DesignCodeDecoder

    @classmethod
    def create(cls, vocabulary: Optional[Vocabulary] = None) -> "Decoders":
        vocabulary = vocabulary or default_vocabulary()
        return cls(
            light=LightDecoder(vocabulary),
            fog_signal=FogSignalDecoder(vocabulary),
            design_code=DesignCodeDecoder(vocabulary),
        )

    @property
    def vocabulary_version(self) -> str:
        return self.light.vocabulary.version


@dataclass
class RowOutcome:
    row: int
    aton: Optional[AtonNode] = None
    flagged: bool = False
    warnings: List[dict] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)


# column, issue name, decoder attribute
_NOTATION_COLUMNS: List[Tuple[str, str, str]] = [
    (rules.CHARACTER, "invalid_light_character", "light"),
    (rules.FOG_SIGNALS, "invalid_fog_signal", "fog_signal"),
    (rules.DESIGN_CODE, "invalid_design_code", "design_code"),
]


class BatchImporter:
    def __init__(self, decoders: Optional[Decoders] = None, max_workers: int = 4):
        self.decoders = decoders or Decoders.create()
        self.max_workers = max_workers

    def decode_row(self, line_no: int, row: Row, changeset: int) -> RowOutcome:
        outcome = RowOutcome(row=line_no)
        records: Dict[str, Any] = {}

        for column, issue, attr in _NOTATION_COLUMNS:
            value = (row.get(column) or "").strip()
            if not value:
                continue
            record = getattr(self.decoders, attr).decode(value)
            records[attr] = record
            if not record.valid:
                outcome.flagged = True
                outcome.warnings.append({
                    "row": line_no,
                    "column": column,
                    "issue": issue,
                    "value": value,
                    "action": "flagged_for_review",
                })
                logger.warning(
                    "Row %d: %s %r lacks %s", line_no, column, value, ", ".join(missing_fields(record))
                )

        try:
            outcome.aton = build_aton(row, changeset, **records)
        except RowRejected as e:
            outcome.warnings.append({
                "row": line_no,
                "column": e.column,
                "issue": e.issue,
                "value": e.value,
                "action": "skipped",
            })
            logger.info("Row %d skipped: %s", line_no, e)
        except Exception as e:
            outcome.errors.append({
                "row": line_no,
                "column": None,
                "issue": "unexpected_error",
                "value": str(e),
                "action": "skipped",
            })
            logger.exception("Row %d failed", line_no)

        return outcome

    def run(self, rows: Iterable[Tuple[int, Row]], changeset: int) -> ImportResponse:
        """Decode all rows in parallel; results keep the input order."""
        rows = list(rows)
        logger.info("Importing %d rows in change-set %d", len(rows), changeset)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            outcomes = list(executor.map(lambda item: self.decode_row(item[0], item[1], changeset), rows))

        atons = [o.aton for o in outcomes if o.aton is not None]
        warnings = [ReportItem(**w) for o in outcomes for w in o.warnings]
        errors = [ReportItem(**e) for o in outcomes for e in o.errors]

        summary = ReportSummary(
            rows=len(rows),
            atons=len(atons),
            flagged=sum(1 for o in outcomes if o.flagged),
            warnings=len(warnings),
            errors=len(errors),
            changeset=changeset,
            vocabulary_version=self.decoders.vocabulary_version,
        )
        logger.info(
            "Change-set %d: %d AtoNs, %d flagged, %d errors",
            changeset, summary.atons, summary.flagged, summary.errors,
        )
        return ImportResponse(atons=atons, report=ImportReport(summary=summary, warnings=warnings, errors=errors))


def import_csv(raw: bytes, importer: BatchImporter, counter: ChangeSetCounter) -> ImportResponse:
    """Read a CSV export and import it as one change-set."""
    rows, normalizations, read_warnings, read_errors = read_aton_csv(raw)

    result = importer.run(rows, counter.next())

    report = result.report
    report.normalizations = normalizations
    report.warnings = [ReportItem(**w) for w in read_warnings] + report.warnings
    report.errors = [ReportItem(**e) for e in read_errors] + report.errors
    report.summary.warnings = len(report.warnings)
    report.summary.errors = len(report.errors)
    return result
