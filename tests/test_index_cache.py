"""Tests for the index cache and its single-flight build."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from company_search.core.index_cache import (
    IndexState,
    SearchIndexCache,
    get_index_cache,
    reset_index_cache,
)
from company_search.core.indexer import IndexBuilder


class CountingBuilder(IndexBuilder):
    """IndexBuilder that counts scans and can be slowed down."""

    def __init__(self, *args, delay: float = 0.0, fail: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.fail = fail
        self.build_calls = 0
        self._calls_lock = threading.Lock()

    def build(self, data_dir):
        with self._calls_lock:
            self.build_calls += 1
        time.sleep(self.delay)
        if self.fail:
            raise RuntimeError("disk on fire")
        return super().build(data_dir)


def _cache(config, data_dir, **builder_kwargs):
    snapshot = data_dir / "search-index.json"
    builder = CountingBuilder(config, snapshot_path=snapshot, **builder_kwargs)
    return SearchIndexCache(data_dir, snapshot, builder=builder), builder


def test_second_call_is_noop(config, sample_corpus):
    cache, builder = _cache(config, sample_corpus)
    assert cache.state is IndexState.EMPTY

    first = cache.ensure_ready()
    second = cache.ensure_ready()

    assert builder.build_calls == 1
    assert second is first
    assert len(first) == 2
    assert cache.state is IndexState.READY
    assert cache.stats()["source"] == "scan"


def test_scan_writes_snapshot_used_by_next_process(config, sample_corpus):
    cache, _ = _cache(config, sample_corpus)
    scanned = cache.ensure_ready()

    assert (sample_corpus / "search-index.json").exists()

    fresh, builder = _cache(config, sample_corpus)
    loaded = fresh.ensure_ready()

    assert builder.build_calls == 0
    assert loaded == scanned
    assert fresh.stats()["source"] == "snapshot"


def test_corrupt_snapshot_falls_back_to_scan(config, sample_corpus):
    (sample_corpus / "search-index.json").write_text("[{broken", encoding="utf-8")
    cache, builder = _cache(config, sample_corpus)

    records = cache.ensure_ready()

    assert builder.build_calls == 1
    assert [r.display_name for r in records] == ["Acme Corp", "Beta LLC"]


def test_snapshot_not_written_when_disabled(config, sample_corpus):
    snapshot = sample_corpus / "search-index.json"
    cache = SearchIndexCache(
        sample_corpus,
        snapshot,
        builder=IndexBuilder(config, snapshot_path=snapshot),
        write_snapshot=False,
    )

    cache.ensure_ready()

    assert not snapshot.exists()


def test_build_failure_leaves_empty_ready_index(config, sample_corpus):
    cache, builder = _cache(config, sample_corpus, fail=True)

    assert cache.ensure_ready() == []
    assert cache.state is IndexState.READY
    assert cache.ensure_ready() == []
    assert builder.build_calls == 1


def test_missing_corpus_is_ready_and_empty(config, tmp_path):
    missing = tmp_path / "absent"
    cache = SearchIndexCache(missing, missing / "search-index.json")

    assert cache.ensure_ready() == []
    assert cache.state is IndexState.READY
    assert not missing.exists()


def test_concurrent_callers_share_one_build(config, sample_corpus):
    cache, builder = _cache(config, sample_corpus, delay=0.2)
    callers = 16
    barrier = threading.Barrier(callers)

    def call(_):
        barrier.wait()
        return cache.ensure_ready()

    with ThreadPoolExecutor(max_workers=callers) as pool:
        results = list(pool.map(call, range(callers)))

    assert builder.build_calls == 1
    assert all(result is results[0] for result in results)
    assert len(results[0]) == 2


def test_callers_wait_while_building(config, sample_corpus):
    cache, builder = _cache(config, sample_corpus, delay=0.3)
    started = threading.Thread(target=cache.ensure_ready)
    started.start()

    deadline = time.monotonic() + 5
    while cache.state is not IndexState.BUILDING and time.monotonic() < deadline:
        time.sleep(0.01)
    assert cache.state is IndexState.BUILDING

    records = cache.ensure_ready()
    started.join()

    assert len(records) == 2
    assert builder.build_calls == 1


def test_global_cache_follows_config(config, sample_corpus):
    cache = get_index_cache()

    assert get_index_cache() is cache
    assert cache.corpus_dir == sample_corpus
    assert len(cache.ensure_ready()) == 2

    reset_index_cache()
    assert get_index_cache() is not cache


class ReadOnlyBuilder(CountingBuilder):
    """Builder whose snapshot writes always fail."""

    @staticmethod
    def save_snapshot(records, snapshot_path):
        raise PermissionError(f"read-only: {snapshot_path}")


def test_failed_snapshot_write_keeps_scanned_records(config, sample_corpus):
    snapshot = sample_corpus / "search-index.json"
    builder = ReadOnlyBuilder(config, snapshot_path=snapshot)
    cache = SearchIndexCache(sample_corpus, snapshot, builder=builder)

    records = cache.ensure_ready()

    assert [r.display_name for r in records] == ["Acme Corp", "Beta LLC"]
    assert cache.state is IndexState.READY
    assert cache.stats()["source"] == "scan"
    assert not snapshot.exists()
    assert builder.build_calls == 1
