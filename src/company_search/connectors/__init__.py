"""Row sources for reading corpus files."""

from company_search.connectors.base import BaseRowSource, Row
from company_search.connectors.batch import BatchTableSource
from company_search.connectors.delimited import DelimitedTextSource, split_delimited_line
from company_search.connectors.registry import SOURCE_REGISTRY, RowSourceFactory

__all__ = [
    "BaseRowSource",
    "BatchTableSource",
    "DelimitedTextSource",
    "Row",
    "RowSourceFactory",
    "SOURCE_REGISTRY",
    "split_delimited_line",
]
