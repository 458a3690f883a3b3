"""Index management commands - build and status."""

from __future__ import annotations

import time
from pathlib import Path

import click

from company_search.cli.decorators import handle_errors, with_data_dir, with_snapshot
from company_search.cli.output import OutputFormatter
from company_search.core.indexer import IndexBuilder
from company_search.exceptions import SnapshotCorruptError
from company_search.utils.config import get_config
from company_search.utils.logging import get_logger

logger = get_logger(__name__)
out = OutputFormatter()


@click.group(name="index")
def index_group():
    """Build and inspect the search index snapshot."""
    pass


@index_group.command(name="build")
@with_data_dir
@with_snapshot
@click.option(
    "--progress/--no-progress",
    default=True,
    help="Show a progress bar while scanning files",
)
@handle_errors
def build_cmd(data_dir, snapshot_path, progress):
    """Scan the corpus and write the index snapshot.

    Servers load this snapshot on their first query instead of scanning
    every file again.

    \b
    Examples:
        # Build with paths from config
        company-search index build

        # Custom corpus and snapshot location
        company-search index build --data-dir ./data --snapshot ./data/search-index.json
    """
    config = get_config()
    data_dir = Path(data_dir or config.get("data.corpus_dir", "./data"))
    snapshot_path = Path(
        snapshot_path or config.get("data.snapshot_path", "./data/search-index.json")
    )

    if not data_dir.is_dir():
        out.error(f"Data directory missing: {data_dir}", abort=True)

    builder = IndexBuilder(
        config=config, snapshot_path=snapshot_path, show_progress=progress
    )
    files = builder.list_corpus_files(data_dir)

    out.section(f"🔨 Building index from {len(files)} file(s) in {data_dir}")
    out.list_items(f.name for f in files)

    start = time.perf_counter()
    records = builder.build(data_dir)
    elapsed_ms = (time.perf_counter() - start) * 1000

    builder.save_snapshot(records, snapshot_path)

    out.success(f"Index built in {elapsed_ms:.0f}ms")
    out.stats({"Total records": len(records), "Snapshot": snapshot_path})


@index_group.command(name="status")
@with_data_dir
@with_snapshot
@handle_errors
def status_cmd(data_dir, snapshot_path):
    """Show corpus files and snapshot contents."""
    config = get_config()
    data_dir = Path(data_dir or config.get("data.corpus_dir", "./data"))
    snapshot_path = Path(
        snapshot_path or config.get("data.snapshot_path", "./data/search-index.json")
    )
    builder = IndexBuilder(config=config, snapshot_path=snapshot_path)

    out.section("📂 Corpus")
    if data_dir.is_dir():
        files = builder.list_corpus_files(data_dir)
        out.stats({"Directory": data_dir, "Files": len(files)})
        out.list_items(f.name for f in files)
    else:
        out.warning(f"Data directory missing: {data_dir}")

    out.section("📄 Snapshot")
    try:
        records = builder.load_snapshot(snapshot_path)
    except FileNotFoundError:
        out.warning(f"No snapshot at {snapshot_path}; the first search will scan the corpus")
        return
    except SnapshotCorruptError as e:
        out.warning(f"Snapshot is corrupt and will be rebuilt: {e}")
        return

    per_file = {}
    for record in records:
        per_file[record.source_file] = per_file.get(record.source_file, 0) + 1

    out.stats({"Path": snapshot_path, "Total records": len(records)})
    out.list_items(f"{name}: {count} records" for name, count in per_file.items())
