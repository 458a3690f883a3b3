"""Streaming reader for comma-delimited text files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

from company_search.connectors.base import BaseRowSource, Row, dedupe_labels
from company_search.exceptions import CorpusAccessError


def split_delimited_line(line: str) -> List[str]:
    """Split one line on commas that sit outside double quotes.

    A double quote toggles the quoted state and is dropped; each field is
    whitespace-trimmed. Escaped quotes inside a quoted field (``""``) are not
    understood: they close and reopen the quoted region, so the quote
    characters disappear from the value.

    Example:
        >>> split_delimited_line('Acme, "Pune, MH" ,Active')
        ['Acme', 'Pune, MH', 'Active']
    """
    values = []
    current = []
    in_quote = False

    for char in line:
        if char == '"':
            in_quote = not in_quote
        elif char == "," and not in_quote:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())

    return values


class DelimitedTextSource(BaseRowSource):
    """Read a CSV file line by line without loading it into memory.

    The first line is the header. Every following line is a data row, blank
    lines included, so row offsets stay aligned between index build and
    detail resolution. Rows shorter than the header are padded with empty
    strings; extra trailing values are dropped.

    Example:
        >>> source = DelimitedTextSource("./data/companies.csv")
        >>> for row in source.iter_rows():
        ...     print(row["Name"])
    """

    header_matching = "pattern"

    def __init__(self, path: str | Path, encoding: str = "utf-8-sig"):
        super().__init__(path)
        self.encoding = encoding
        self._columns: Optional[List[str]] = None

    @property
    def columns(self) -> List[str]:
        if self._columns is None:
            try:
                with open(self.path, "r", encoding=self.encoding, errors="replace") as f:
                    self._columns = self._parse_header(f.readline())
            except OSError as e:
                raise CorpusAccessError(self.path, f"Cannot read {self.path}: {e}") from e
        return self._columns

    def iter_rows(self) -> Iterator[Row]:
        try:
            with open(self.path, "r", encoding=self.encoding, errors="replace") as f:
                header_line = f.readline()
                if not header_line:
                    self._columns = []
                    return

                columns = self._parse_header(header_line)
                self._columns = columns

                for line in f:
                    values = split_delimited_line(line.rstrip("\r\n"))
                    yield {
                        label: values[i] if i < len(values) else ""
                        for i, label in enumerate(columns)
                    }
        except OSError as e:
            raise CorpusAccessError(self.path, f"Cannot read {self.path}: {e}") from e

    @staticmethod
    def _parse_header(line: str) -> List[str]:
        if not line:
            return []
        return dedupe_labels(split_delimited_line(line.rstrip("\r\n")))
