"""Record types shared by the index, search engine and API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Mapping

from company_search.core.fields import CanonicalFields


def make_result_id(source_file: str, row_offset: int) -> str:
    """Deterministic result id for a locator."""
    return f"{source_file}-{row_offset}"


@dataclass(frozen=True)
class IndexRecord:
    """Lightweight projection of one source row, kept resident in memory.

    ``(source_file, row_offset)`` is a positional locator: it stays valid
    only as long as the file's row order does not change.
    """

    name_lower: str
    identifier: str
    region: str
    status: str
    source_file: str
    row_offset: int  # 0-based among the file's data rows, header excluded
    display_name: str

    @classmethod
    def from_fields(
        cls, canonical: CanonicalFields, source_file: str, row_offset: int
    ) -> IndexRecord:
        return cls(
            name_lower=canonical.name.lower(),
            identifier=canonical.identifier,
            region=canonical.region,
            status=canonical.status,
            source_file=source_file,
            row_offset=row_offset,
            display_name=canonical.name,
        )

    def matches(self, lowered_query: str) -> bool:
        """Substring match on name or identifier; the query must be lowercased."""
        return lowered_query in self.name_lower or (
            bool(self.identifier) and lowered_query in self.identifier.lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IndexRecord:
        """Rebuild a record from its snapshot form.

        Raises:
            KeyError: If a field is missing
            TypeError, ValueError: If a value has the wrong shape
        """
        values = {}
        for f in fields(cls):
            value = data[f.name]
            if f.name == "row_offset":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError(f"row_offset must be an integer, got {value!r}")
            elif not isinstance(value, str):
                raise TypeError(f"{f.name} must be a string, got {value!r}")
            values[f.name] = value
        return cls(**values)


@dataclass
class ResultRow:
    """Full record reconstructed from disk for one match.

    ``fields`` keeps every original column of the row, in file order.
    """

    id: str
    name: str
    region: str
    identifier: str
    status: str
    source_file: str
    row_offset: int
    fields: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, str],
        canonical: CanonicalFields,
        source_file: str,
        row_offset: int,
    ) -> ResultRow:
        return cls(
            id=make_result_id(source_file, row_offset),
            name=canonical.name,
            region=canonical.region,
            identifier=canonical.identifier,
            status=canonical.status,
            source_file=source_file,
            row_offset=row_offset,
            fields={str(k): "" if v is None else str(v) for k, v in row.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the public result shape.

        Canonical keys come first (``id``, ``name``, ``state``, ``cin``,
        ``status``); original columns follow unless they collide with one.
        """
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "state": self.region,
            "cin": self.identifier,
            "status": self.status,
        }
        for key, value in self.fields.items():
            result.setdefault(key, value)
        return result
