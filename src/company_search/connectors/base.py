"""Base row source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, List

from company_search.utils.logging import get_logger

logger = get_logger(__name__)

Row = Dict[str, str]


class BaseRowSource(ABC):
    """Abstract base class for reading company rows from one file.

    Every backend exposes the same contract: column labels in file order and
    data rows (header excluded) as ordered label -> string mappings. Row
    positions are what index locators point at, so a backend must yield rows
    in the same order on every read.
    """

    # How canonical fields are located in this backend's rows:
    # "pattern" (header regex per file) or "exact" (candidate labels)
    header_matching = "exact"

    def __init__(self, path: str | Path):
        """Initialize source.

        Args:
            path: Path to the source file
        """
        self.path = Path(path)
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def columns(self) -> List[str]:
        """Column labels in file order.

        Raises:
            CorpusAccessError: If the file cannot be read
            ParseError: If the file cannot be parsed
        """
        pass

    @abstractmethod
    def iter_rows(self) -> Iterator[Row]:
        """Iterate data rows in file order.

        Raises:
            CorpusAccessError: If the file cannot be read
            ParseError: If the file cannot be parsed
        """
        pass

    @property
    def name(self) -> str:
        return self.path.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"


def dedupe_labels(labels: List[str]) -> List[str]:
    """Make repeated column labels unique the way pandas does.

    Example:
        >>> dedupe_labels(["Name", "CIN", "Name"])
        ['Name', 'CIN', 'Name.1']
    """
    seen: Dict[str, int] = {}
    result = []
    for label in labels:
        if label in seen:
            seen[label] += 1
            candidate = f"{label}.{seen[label]}"
            while candidate in seen:
                seen[label] += 1
                candidate = f"{label}.{seen[label]}"
            seen[candidate] = 0
            result.append(candidate)
        else:
            seen[label] = 0
            result.append(label)
    return result
