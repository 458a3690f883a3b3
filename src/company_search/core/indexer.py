"""Index builder: scans the corpus into lightweight records."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from company_search.connectors import RowSourceFactory
from company_search.core.fields import extractor_for
from company_search.core.models import IndexRecord
from company_search.exceptions import (
    CorpusAccessError,
    ParseError,
    SnapshotCorruptError,
)
from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger
from company_search.utils.timing import timed

logger = get_logger(__name__)


class IndexBuilder:
    """Builds the in-memory search index from a directory of source files."""

    def __init__(
        self,
        config: Optional[Config] = None,
        snapshot_path: Optional[str | Path] = None,
        show_progress: Optional[bool] = None,
    ):
        """Initialize builder.

        Args:
            config: Optional config (uses global config if None)
            snapshot_path: Snapshot file to exclude from the corpus scan
            show_progress: Whether to show a progress bar over files
        """
        self.config = config or get_config()
        self.snapshot_path = Path(
            snapshot_path
            or self.config.get("data.snapshot_path", "./data/search-index.json")
        )
        self.show_progress = (
            show_progress
            if show_progress is not None
            else self.config.get("index.show_progress", False)
        )

    def list_corpus_files(self, data_dir: str | Path) -> List[Path]:
        """List supported files directly inside a directory.

        Args:
            data_dir: Corpus directory (not scanned recursively)

        Returns:
            Sorted list of file paths, snapshot file excluded
        """
        data_dir = Path(data_dir)
        snapshot = self.snapshot_path.resolve()

        files = []
        for path in sorted(data_dir.iterdir(), key=lambda p: p.name):
            if not path.is_file() or not RowSourceFactory.is_supported(path):
                continue
            if path.resolve() == snapshot:
                continue
            files.append(path)
        return files

    @timed("index.build", log_level="info")
    def build(self, data_dir: str | Path) -> List[IndexRecord]:
        """Scan every corpus file once and build index records.

        A file that cannot be read or parsed is logged and skipped; the rest
        of the corpus is still indexed.

        Args:
            data_dir: Corpus directory

        Returns:
            List of IndexRecord in file, then row order (empty if the
            directory is missing)

        Example:
            >>> builder = IndexBuilder()
            >>> records = builder.build("./data")
            >>> builder.save_snapshot(records, "./data/search-index.json")
        """
        data_dir = Path(data_dir)

        if not data_dir.is_dir():
            logger.warning(f"Corpus directory missing: {data_dir}")
            return []

        try:
            files = self.list_corpus_files(data_dir)
        except OSError as e:
            logger.error(f"Cannot list corpus directory {data_dir}: {e}")
            return []

        logger.info(f"Building index from {len(files)} files in {data_dir}")

        records: List[IndexRecord] = []
        for path in tqdm(files, desc="Indexing files", disable=not self.show_progress):
            try:
                file_records = self.index_file(path)
            except (CorpusAccessError, ParseError) as e:
                logger.error(f"Skipping {path.name}: {e}")
                continue

            logger.debug(f"  {path.name}: {len(file_records)} records")
            records.extend(file_records)

        logger.info(f"Index built: {len(records)} records from {len(files)} files")
        return records

    def index_file(self, path: str | Path) -> List[IndexRecord]:
        """Index one file.

        The row offset advances for every data row, including rows left out
        of the index for lack of a name, so it always equals the row's
        position in the file.

        Raises:
            CorpusAccessError: If the file cannot be read
            ParseError: If the file cannot be parsed
        """
        path = Path(path)
        source = RowSourceFactory.open(path)
        extractor = extractor_for(source, self.config)

        records = []
        for offset, row in enumerate(source.iter_rows()):
            canonical = extractor.extract(row)
            if canonical.is_unknown:
                continue
            records.append(IndexRecord.from_fields(canonical, path.name, offset))
        return records

    @staticmethod
    def save_snapshot(records: List[IndexRecord], snapshot_path: str | Path) -> None:
        """Persist records as a JSON array.

        The file is written next to its destination and moved into place, so
        readers never see a half-written snapshot.

        Args:
            records: Index records
            snapshot_path: Destination path
        """
        snapshot_path = Path(snapshot_path)
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=snapshot_path.parent, prefix=f".{snapshot_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([record.to_dict() for record in records], f, ensure_ascii=False)
            os.replace(tmp_name, snapshot_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(f"Saved {len(records)} records to {snapshot_path}")

    @staticmethod
    def load_snapshot(snapshot_path: str | Path) -> List[IndexRecord]:
        """Load records from a snapshot written by ``save_snapshot``.

        Args:
            snapshot_path: Snapshot path

        Returns:
            List of IndexRecord

        Raises:
            FileNotFoundError: If the snapshot does not exist
            SnapshotCorruptError: If it is unreadable or malformed
        """
        snapshot_path = Path(snapshot_path)

        if not snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot not found: {snapshot_path}")

        try:
            with open(snapshot_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotCorruptError(f"Cannot read snapshot {snapshot_path}: {e}") from e

        if not isinstance(data, list):
            raise SnapshotCorruptError(
                f"Snapshot {snapshot_path} must hold a list, got {type(data).__name__}"
            )

        try:
            records = [IndexRecord.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotCorruptError(f"Malformed record in {snapshot_path}: {e}") from e

        logger.info(f"Loaded {len(records)} records from {snapshot_path}")
        return records
