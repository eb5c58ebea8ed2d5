from __future__ import annotations

from typing import Optional


class AtonNotationError(Exception):
    """Base class for configuration and setup failures.

    Decoding never raises one of these; malformed notation yields an invalid
    record instead.
    """


class VocabularyError(AtonNotationError):
    """The vocabulary table is malformed or names an unknown code."""


class ConfigError(AtonNotationError):
    """The settings file cannot be read or holds an invalid value."""


class RowRejected(AtonNotationError):
    """A spreadsheet row cannot be turned into an AtoN."""

    def __init__(self, issue: str, column: Optional[str] = None, value: Optional[str] = None):
        super().__init__(f"{issue}: {column}={value!r}" if column else issue)
        self.issue = issue
        self.column = column
        self.value = value
