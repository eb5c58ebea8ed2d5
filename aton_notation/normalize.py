"""
Reading of AtoN list spreadsheet exports (CSV).

Responsibilities:
- encoding detection + decoding
- newline normalization
- delimiter detection
- header-keyed rows, short rows padded, long rows reported
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Tuple

from charset_normalizer import from_bytes

from .rules import CANDIDATE_DELIMITERS, FIELDS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

Row = Dict[str, str]


def decode_text(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode spreadsheet bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is dropped.
    - If decoding with the detected encoding fails, try UTF-8, then decode
      with replacement characters so the import can continue.
    """
    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_fallback = True
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"

    crlf = text.count("\r\n")
    cr = text.count("\r") - crlf
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    return text, {
        "encoding": {
            "detected": detected,
            "decode_used": decode_used,
            "decode_fallback": decode_fallback,
        },
        "newlines": {
            "policy": "lf",
            "crlf": crlf,
            "cr": cr,
            "changed": crlf > 0 or cr > 0,
        },
    }


def detect_delimiter(text: str) -> Tuple[str, bool]:
    """Returns (delimiter, sniffed). Falls back to comma."""
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters="".join(CANDIDATE_DELIMITERS))
        return dialect.delimiter, True
    except csv.Error:
        return ",", False


def _read_lines(text: str, delimiter: str, errors: List[dict]) -> List[Tuple[int, List[str]]]:
    """
    Parse CSV records with their line numbers.

    A record the csv module cannot parse (e.g. a cell over the field size
    limit) is reported and skipped; the records around it are kept.
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    lines: List[Tuple[int, List[str]]] = []
    while True:
        try:
            line = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            errors.append({
                "row": reader.line_num,
                "column": None,
                "issue": "unreadable_row",
                "value": str(e),
                "action": "skipped",
            })
            logger.warning("Line %d skipped: %s", reader.line_num, e)
            continue
        lines.append((reader.line_num, line))
    return lines


def read_aton_csv(raw: bytes) -> Tuple[List[Tuple[int, Row]], Dict[str, Any], List[dict], List[dict]]:
    """
    Read an AtoN list export into rows keyed by header.

    Returns (rows, normalizations, warnings, errors). Each row comes with its
    1-based spreadsheet line number, the header being line 1. Warnings and
    errors use the ReportItem shape.
    """
    warnings: List[dict] = []
    errors: List[dict] = []

    text, normalizations = decode_text(raw)
    delimiter, sniffed = detect_delimiter(text)
    normalizations["delimiter"] = {"detected": delimiter, "sniffed": sniffed}

    lines = _read_lines(text, delimiter, errors)
    if not lines:
        errors.append({
            "row": None,
            "column": None,
            "issue": "empty_file",
            "value": None,
            "action": "nothing_imported",
        })
        return [], normalizations, warnings, errors

    header = [h.strip() for h in lines[0][1]]
    width = len(header)

    for name in REQUIRED_FIELDS:
        if name not in header:
            errors.append({
                "row": 1,
                "column": name,
                "issue": "missing_column",
                "value": None,
                "action": "rows_rejected",
            })

    unknown = [h for h in header if h and h not in FIELDS]
    for name in unknown:
        warnings.append({
            "row": 1,
            "column": name,
            "issue": "unknown_column",
            "value": None,
            "action": "ignored",
        })

    rows: List[Tuple[int, Row]] = []
    short_rows = 0
    long_rows = 0
    for i, line in lines[1:]:
        if not any(cell.strip() for cell in line):
            continue

        if len(line) < width:
            short_rows += 1
            warnings.append({
                "row": i,
                "column": None,
                "issue": "row_too_short",
                "value": str(len(line)),
                "action": f"padded_to_{width}",
            })
            line = line + [""] * (width - len(line))
        elif len(line) > width:
            long_rows += 1
            errors.append({
                "row": i,
                "column": None,
                "issue": "row_too_long",
                "value": str(len(line)),
                "action": f"truncated_to_{width}",
            })
            line = line[:width]

        rows.append((i, {h: cell.strip() for h, cell in zip(header, line) if h}))

    normalizations["row_width"] = {
        "expected_columns": width,
        "short_rows_padded": short_rows,
        "long_rows_truncated": long_rows,
        "total_rows": len(rows),
    }

    logger.info(
        "Read %d AtoN rows (encoding=%s, delimiter=%r)",
        len(rows), normalizations["encoding"]["decode_used"], delimiter,
    )
    return rows, normalizations, warnings, errors
