"""Process-wide index cache with a single-flight build."""

from __future__ import annotations

import threading
import time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from company_search.core.indexer import IndexBuilder
from company_search.core.models import IndexRecord
from company_search.exceptions import SnapshotCorruptError
from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger

logger = get_logger(__name__)


class IndexState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    READY = "ready"


class SearchIndexCache:
    """Holds the built index and coordinates its one-time construction.

    State only moves forward: EMPTY -> BUILDING -> READY. The first caller
    of ``ensure_ready`` performs the load or build outside the lock; callers
    arriving while it runs wait on a condition and receive the same records.
    """

    def __init__(
        self,
        corpus_dir: str | Path,
        snapshot_path: str | Path,
        builder: Optional[IndexBuilder] = None,
        write_snapshot: bool = True,
    ):
        """Initialize cache.

        Args:
            corpus_dir: Directory holding the source files
            snapshot_path: Where the serialized index is read from and written to
            builder: IndexBuilder used when no usable snapshot exists
            write_snapshot: Persist the index after a corpus scan
        """
        self.corpus_dir = Path(corpus_dir)
        self.snapshot_path = Path(snapshot_path)
        self.builder = builder or IndexBuilder(snapshot_path=self.snapshot_path)
        self.write_snapshot = write_snapshot

        self._condition = threading.Condition(threading.Lock())
        self._state = IndexState.EMPTY
        self._records: List[IndexRecord] = []
        self._source: Optional[str] = None
        self._load_ms: Optional[float] = None

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> SearchIndexCache:
        config = config or get_config()
        snapshot_path = config.get("data.snapshot_path", "./data/search-index.json")
        return cls(
            corpus_dir=config.get("data.corpus_dir", "./data"),
            snapshot_path=snapshot_path,
            builder=IndexBuilder(config=config, snapshot_path=snapshot_path),
            write_snapshot=config.get("index.write_snapshot", True),
        )

    @property
    def state(self) -> IndexState:
        with self._condition:
            return self._state

    @property
    def records(self) -> List[IndexRecord]:
        """Records currently published (empty until READY)."""
        with self._condition:
            return self._records

    def ensure_ready(self) -> List[IndexRecord]:
        """Make sure the index is loaded and return its records.

        Returns immediately once READY. Never raises: a failed build leaves
        the cache READY with no records rather than retrying on every query.

        Returns:
            The shared list of IndexRecord
        """
        with self._condition:
            if self._state is IndexState.READY:
                return self._records

            if self._state is IndexState.BUILDING:
                logger.debug("Index build in progress, waiting")
                self._condition.wait_for(lambda: self._state is IndexState.READY)
                return self._records

            self._state = IndexState.BUILDING

        start = time.perf_counter()
        records: List[IndexRecord] = []
        source = "empty"
        try:
            records, source = self._load_or_build()
        except Exception as e:
            logger.error(f"Index build failed, serving an empty index: {e}", exc_info=True)
        finally:
            with self._condition:
                self._records = records
                self._source = source
                self._load_ms = (time.perf_counter() - start) * 1000
                self._state = IndexState.READY
                self._condition.notify_all()

        logger.info(
            f"Index ready: {len(records)} records (source={source}, "
            f"{self._load_ms:.1f}ms)"
        )
        return records

    def _load_or_build(self) -> tuple[List[IndexRecord], str]:
        try:
            logger.info(f"Loading index from {self.snapshot_path}")
            return self.builder.load_snapshot(self.snapshot_path), "snapshot"
        except FileNotFoundError:
            logger.info("No index snapshot found, scanning corpus")
        except SnapshotCorruptError as e:
            logger.warning(f"Ignoring corrupt snapshot: {e}")

        records = self.builder.build(self.corpus_dir)

        if self.write_snapshot and self.corpus_dir.is_dir():
            try:
                self.builder.save_snapshot(records, self.snapshot_path)
            except OSError as e:
                logger.warning(f"Could not write index snapshot {self.snapshot_path}: {e}")

        return records, "scan"

    def stats(self) -> Dict[str, Any]:
        with self._condition:
            return {
                "state": self._state.value,
                "total_records": len(self._records),
                "source": self._source,
                "load_ms": round(self._load_ms, 3) if self._load_ms is not None else None,
            }

    def __repr__(self) -> str:
        return f"SearchIndexCache(state={self.state.value}, records={len(self.records)})"


# Global cache instance
_index_cache: Optional[SearchIndexCache] = None
_index_cache_lock = threading.Lock()


def get_index_cache() -> SearchIndexCache:
    """Get or create the process-wide index cache from configuration."""
    global _index_cache
    with _index_cache_lock:
        if _index_cache is None:
            _index_cache = SearchIndexCache.from_config()
        return _index_cache


def set_index_cache(cache: SearchIndexCache) -> None:
    """Replace the process-wide index cache."""
    global _index_cache
    with _index_cache_lock:
        _index_cache = cache


def reset_index_cache() -> None:
    """Drop the process-wide index cache (the next access rebuilds it)."""
    global _index_cache
    with _index_cache_lock:
        _index_cache = None
