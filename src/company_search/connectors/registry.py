"""Row source registry and factory."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Type

from company_search.connectors.base import BaseRowSource
from company_search.connectors.batch import BatchTableSource
from company_search.connectors.delimited import DelimitedTextSource
from company_search.utils.logging import get_logger

logger = get_logger(__name__)

# File extension -> backend
SOURCE_REGISTRY: Dict[str, Type[BaseRowSource]] = {
    ".csv": DelimitedTextSource,
    ".xlsx": BatchTableSource,
    ".xls": BatchTableSource,
    ".json": BatchTableSource,
}


class RowSourceFactory:
    """Factory for opening corpus files with the matching backend."""

    @staticmethod
    def is_supported(path: str | Path) -> bool:
        """Whether a file has a registered extension (case-sensitive, like the corpus scan)."""
        return Path(path).suffix in SOURCE_REGISTRY

    @staticmethod
    def open(path: str | Path) -> BaseRowSource:
        """Create a row source for a file.

        Args:
            path: Path to a corpus file

        Returns:
            BaseRowSource instance

        Raises:
            ValueError: If the extension is not supported

        Example:
            >>> source = RowSourceFactory.open("./data/companies.csv")
            >>> next(source.iter_rows())
        """
        path = Path(path)

        if path.suffix not in SOURCE_REGISTRY:
            available = ", ".join(sorted(SOURCE_REGISTRY.keys()))
            raise ValueError(
                f"Unsupported file type: {path.name}. " f"Available: {available}"
            )

        source_class = SOURCE_REGISTRY[path.suffix]
        return source_class(path)

    @staticmethod
    def register_source(extension: str, source_class: Type[BaseRowSource]) -> None:
        """Register a backend for a file extension.

        Args:
            extension: Extension including the dot (e.g. ".tsv")
            source_class: Class inheriting from BaseRowSource
        """
        if not issubclass(source_class, BaseRowSource):
            raise TypeError(
                f"Source class must inherit from BaseRowSource, "
                f"got {source_class}"
            )

        if not extension.startswith("."):
            extension = f".{extension}"

        SOURCE_REGISTRY[extension] = source_class
        logger.info(f"Registered row source {source_class.__name__} for {extension}")

    @staticmethod
    def list_extensions() -> list[str]:
        return sorted(SOURCE_REGISTRY.keys())
