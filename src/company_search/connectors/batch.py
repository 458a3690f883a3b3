"""Batch reader for spreadsheet and JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd

from company_search.connectors.base import BaseRowSource, Row
from company_search.exceptions import CorpusAccessError, ParseError


class BatchTableSource(BaseRowSource):
    """Load a whole file into a DataFrame and iterate its rows.

    Spreadsheets (``.xlsx``, ``.xls``) use the first sheet only; JSON files
    must hold an array of records. All values are turned into strings and
    missing cells into empty strings.
    """

    def __init__(self, path: str | Path, **pandas_kwargs):
        """Initialize batch source.

        Args:
            path: Path to the source file
            **pandas_kwargs: Additional arguments passed to the pandas reader
        """
        super().__init__(path)
        self.pandas_kwargs = pandas_kwargs
        self._frame: Optional[pd.DataFrame] = None

    @property
    def columns(self) -> List[str]:
        return [str(col) for col in self._load().columns]

    def iter_rows(self) -> Iterator[Row]:
        df = self._load()
        columns = [str(col) for col in df.columns]
        for values in df.itertuples(index=False, name=None):
            yield dict(zip(columns, values))

    def _load(self) -> pd.DataFrame:
        if self._frame is not None:
            return self._frame

        if not self.path.is_file():
            raise CorpusAccessError(self.path, f"File not found: {self.path}")

        try:
            df = self._read()
        except OSError as e:
            raise CorpusAccessError(self.path, f"Cannot read {self.path}: {e}") from e
        except Exception as e:
            raise ParseError(self.path, f"Cannot parse {self.path}: {e}") from e

        self._frame = df.fillna("").astype(str)
        self.logger.debug(
            f"Loaded {self.path.name}: {len(self._frame)} rows, "
            f"{len(self._frame.columns)} columns"
        )
        return self._frame

    def _read(self) -> pd.DataFrame:
        suffix = self.path.suffix.lower()

        if suffix == ".json":
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list) or not all(
                isinstance(item, dict) for item in records
            ):
                raise ValueError("JSON content is not an array of records")
            # Object dtype keeps values as parsed; a key missing from some
            # records must not turn integers into floats
            return pd.DataFrame(records, dtype=object, **self.pandas_kwargs)

        return pd.read_excel(self.path, sheet_name=0, dtype=str, **self.pandas_kwargs)
