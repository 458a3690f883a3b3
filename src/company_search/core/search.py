"""Substring search over the index with lazy detail resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from company_search.connectors import RowSourceFactory
from company_search.core.fields import extractor_for
from company_search.core.models import IndexRecord, ResultRow
from company_search.exceptions import CorpusAccessError, ParseError
from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger
from company_search.utils.timing import TimingContext, timed

logger = get_logger(__name__)


class SearchEngine:
    """Matches queries against index records and re-reads matched rows.

    Matching is raw substring containment on the lowercased name or
    identifier. Results are capped, not ranked: scanning stops at the
    ``max_results``-th match, so earlier files and rows win.
    """

    def __init__(
        self,
        data_dir: str | Path,
        max_results: int = 50,
        min_query_length: int = 2,
        config: Optional[Config] = None,
    ):
        """Initialize search engine.

        Args:
            data_dir: Corpus directory that record locators are relative to
            max_results: Hard cap on matches per query
            min_query_length: Shorter queries return nothing
            config: Optional config for field extraction settings
        """
        self.data_dir = Path(data_dir)
        self.max_results = max_results
        self.min_query_length = min_query_length
        self.config = config or get_config()

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> SearchEngine:
        config = config or get_config()
        return cls(
            data_dir=config.get("data.corpus_dir", "./data"),
            max_results=config.get("search.max_results", 50),
            min_query_length=config.get("search.min_query_length", 2),
            config=config,
        )

    def is_valid_query(self, query: Optional[str]) -> bool:
        return bool(query) and len(query) >= self.min_query_length

    @timed("search.total")
    def search(self, query: str, records: Sequence[IndexRecord]) -> List[ResultRow]:
        """Find records matching a query and return their full rows.

        Args:
            query: Raw query string
            records: Index records in index order

        Returns:
            List of ResultRow, grouped by file in first-match order and in
            file row order within each file

        Example:
            >>> engine = SearchEngine("./data")
            >>> rows = engine.search("acme", cache.ensure_ready())
        """
        if not self.is_valid_query(query):
            return []

        with TimingContext("search.match"):
            matches = self.match(query, records)

        logger.debug(f"Query '{query}' matched {len(matches)} records")

        if not matches:
            return []

        with TimingContext("search.resolve"):
            return self.resolve(self.group_by_file(matches))

    def match(self, query: str, records: Sequence[IndexRecord]) -> List[IndexRecord]:
        """Collect the first ``max_results`` records containing the query."""
        lowered = query.lower()
        matches: List[IndexRecord] = []

        for record in records:
            if record.matches(lowered):
                matches.append(record)
                if len(matches) >= self.max_results:
                    break

        return matches

    @staticmethod
    def group_by_file(matches: Sequence[IndexRecord]) -> Dict[str, Set[int]]:
        """Group needed row offsets by file, files in first-match order."""
        groups: Dict[str, Set[int]] = {}
        for record in matches:
            groups.setdefault(record.source_file, set()).add(record.row_offset)
        return groups

    def resolve(self, groups: Dict[str, Set[int]]) -> List[ResultRow]:
        """Re-read matched rows from disk.

        A file that can no longer be read is logged and its matches are
        dropped from the result.
        """
        results: List[ResultRow] = []

        for source_file, offsets in groups.items():
            try:
                results.extend(self._resolve_file(source_file, offsets))
            except (CorpusAccessError, ParseError, ValueError) as e:
                logger.error(f"Error reading details from {source_file}: {e}")

        return results

    def _resolve_file(self, source_file: str, offsets: Set[int]) -> List[ResultRow]:
        source = RowSourceFactory.open(self.data_dir / source_file)
        extractor = extractor_for(source, self.config)
        last_needed = max(offsets)

        rows = []
        for offset, row in enumerate(source.iter_rows()):
            if offset in offsets:
                rows.append(
                    ResultRow.from_row(row, extractor.extract(row), source_file, offset)
                )
            if offset >= last_needed:
                break

        if len(rows) < len(offsets):
            logger.warning(
                f"{source_file}: resolved {len(rows)} of {len(offsets)} rows; "
                "the file may have changed since indexing"
            )
        return rows
