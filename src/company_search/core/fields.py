"""Canonical field extraction from heterogeneously named columns.

Source files label the same attribute differently ("CompanyName",
"Company Name", "Name"...). Extractors map a raw row onto four canonical
fields: name, identifier, region and status.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Pattern, Sequence

from company_search.utils.config import Config, get_config

FIELD_NAMES = ("name", "identifier", "region", "status")
UNKNOWN_NAME = "Unknown"

DEFAULT_CANDIDATES: Dict[str, Sequence[str]] = {
    "name": ("CompanyName", "Company Name", "Name"),
    "identifier": ("CIN",),
    "region": ("CompanyStateCode", "State"),
    "status": ("CompanyStatus", "Status"),
}

DEFAULT_PATTERNS: Dict[str, str] = {
    "name": r"Company.*Name|Name",
    "identifier": r"CIN",
    "region": r"State|CompanyStateCode",
    "status": r"Status|CompanyStatus",
}


@dataclass(frozen=True)
class CanonicalFields:
    """The four normalized attributes of a company row."""

    name: str = UNKNOWN_NAME
    identifier: str = ""
    region: str = ""
    status: str = ""

    @property
    def is_unknown(self) -> bool:
        """Rows without a usable name are left out of the index."""
        return self.name == UNKNOWN_NAME


class FieldExtractor(ABC):
    """Maps a raw row onto canonical fields."""

    @abstractmethod
    def extract(self, row: Mapping[str, str]) -> CanonicalFields:
        """Extract canonical fields from one row.

        Args:
            row: Column label -> raw string value

        Returns:
            CanonicalFields with defaults filled in
        """
        pass


class CandidateFieldExtractor(FieldExtractor):
    """Checks an ordered list of exact column labels per field.

    Labels are compared case-insensitively, ignoring surrounding whitespace.
    The first candidate holding a non-empty value wins.

    Example:
        >>> extractor = CandidateFieldExtractor()
        >>> extractor.extract({"company name": "Acme", "CIN": "U1"}).name
        'Acme'
    """

    def __init__(self, candidates: Optional[Mapping[str, Sequence[str]]] = None):
        merged = dict(DEFAULT_CANDIDATES)
        merged.update(candidates or {})
        self.candidates = {
            field: [label.strip().lower() for label in merged[field]]
            for field in FIELD_NAMES
        }

    def extract(self, row: Mapping[str, str]) -> CanonicalFields:
        lowered: Dict[str, str] = {}
        for label, value in row.items():
            lowered.setdefault(str(label).strip().lower(), value)

        values = {field: self._first_value(lowered, field) for field in FIELD_NAMES}
        return CanonicalFields(
            name=values["name"] or UNKNOWN_NAME,
            identifier=values["identifier"],
            region=values["region"],
            status=values["status"],
        )

    def _first_value(self, lowered: Mapping[str, str], field: str) -> str:
        for label in self.candidates[field]:
            value = lowered.get(label)
            if value is not None and str(value).strip():
                return str(value).strip()
        return ""

    def __repr__(self) -> str:
        return f"CandidateFieldExtractor({self.candidates})"


class PatternFieldExtractor(FieldExtractor):
    """Resolves each field to one column of a file by header pattern.

    The header is matched once per file; the first column whose label
    matches a field's pattern is used for every row of that file.
    """

    def __init__(self, columns: Mapping[str, Optional[str]]):
        """Initialize with already resolved columns.

        Args:
            columns: Field name -> column label (None when no header matched)
        """
        self.columns = {field: columns.get(field) for field in FIELD_NAMES}

    @classmethod
    def from_columns(
        cls,
        header: Sequence[str],
        patterns: Optional[Mapping[str, str]] = None,
    ) -> PatternFieldExtractor:
        """Fix the column used for each field from a file header.

        Args:
            header: Column labels in file order
            patterns: Optional field -> regular pattern overrides

        Returns:
            PatternFieldExtractor bound to this header
        """
        merged = dict(DEFAULT_PATTERNS)
        merged.update(patterns or {})
        compiled: Dict[str, Pattern[str]] = {
            field: re.compile(merged[field], re.IGNORECASE) for field in FIELD_NAMES
        }

        columns = {}
        for field in FIELD_NAMES:
            columns[field] = next(
                (label for label in header if compiled[field].search(label)), None
            )
        return cls(columns)

    def extract(self, row: Mapping[str, str]) -> CanonicalFields:
        values = {}
        for field in FIELD_NAMES:
            column = self.columns[field]
            values[field] = (row.get(column) or "") if column is not None else ""

        return CanonicalFields(
            name=values["name"] or UNKNOWN_NAME,
            identifier=values["identifier"],
            region=values["region"],
            status=values["status"],
        )

    def __repr__(self) -> str:
        return f"PatternFieldExtractor({self.columns})"


def extractor_for(source, config: Optional[Config] = None) -> FieldExtractor:
    """Build the extractor matching how a row source labels its columns.

    Delimited-text sources resolve columns by header pattern, batch sources
    by exact candidate labels.

    Args:
        source: A BaseRowSource instance
        config: Optional config (uses global config if None)

    Returns:
        FieldExtractor for the source
    """
    config = config or get_config()
    if source.header_matching == "pattern":
        return PatternFieldExtractor.from_columns(
            source.columns, config.get("fields.patterns")
        )
    return CandidateFieldExtractor(config.get("fields.candidates"))
