"""
Exception classes shared across Company Search.

Most of these are recovered locally: corpus and snapshot problems shrink
the index instead of failing a query. Only ``SearchFailure`` reaches the
caller, and rate limiting is reported as a normal result, not raised.
"""

from __future__ import annotations


class CompanySearchError(Exception):
    """Base class for all Company Search errors."""


class CorpusAccessError(CompanySearchError):
    """
    Raised when the corpus directory or a source file cannot be read.

    Examples:
        - Permission denied on a data file
        - File removed between listing and opening
    """

    def __init__(self, path, message: str = ""):
        self.path = str(path)
        super().__init__(message or f"Cannot read {self.path}")


class ParseError(CompanySearchError):
    """
    Raised when a source file cannot be parsed into rows.

    Examples:
        - Corrupt spreadsheet container
        - JSON that is not an array of records
    """

    def __init__(self, path, message: str = ""):
        self.path = str(path)
        super().__init__(message or f"Cannot parse {self.path}")


class SnapshotCorruptError(CompanySearchError):
    """Raised when a persisted index snapshot is unreadable or malformed."""


class SearchFailure(CompanySearchError):
    """Raised for an unexpected failure while matching or resolving rows."""


__all__ = [
    "CompanySearchError",
    "CorpusAccessError",
    "ParseError",
    "SnapshotCorruptError",
    "SearchFailure",
]
