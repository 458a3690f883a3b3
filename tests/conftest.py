"""Shared fixtures for Company Search tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from company_search.core.index_cache import reset_index_cache
from company_search.utils.config import Config, set_config
from company_search.utils.timing import get_latency_tracker

SAMPLE_CSV = [
    "Name,CIN,State,Status",
    "Acme Corp,CIN123,MH,Active",
    "Beta LLC,CIN456,DL,Inactive",
]


@pytest.fixture(autouse=True)
def _reset_globals():
    """Isolate the process-wide config, index cache and latency stats."""
    set_config(None)
    reset_index_cache()
    get_latency_tracker().reset()
    yield
    set_config(None)
    reset_index_cache()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def config(data_dir: Path) -> Config:
    """Global config pointing at the temporary corpus."""
    cfg = Config()
    cfg.set("data.corpus_dir", str(data_dir))
    cfg.set("data.snapshot_path", str(data_dir / "search-index.json"))
    set_config(cfg)
    return cfg


@pytest.fixture
def write_csv() -> Callable[[Path, Iterable[str]], Path]:
    def _write(path: Path, lines: Iterable[str]) -> Path:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_corpus(data_dir: Path, write_csv) -> Path:
    """One CSV with the Acme/Beta rows."""
    write_csv(data_dir / "companies.csv", SAMPLE_CSV)
    return data_dir
