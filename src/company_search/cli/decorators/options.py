"""Common CLI option decorators."""

from __future__ import annotations

import click


def with_data_dir(f):
    """Add --data-dir option to command (default: data.corpus_dir from config)."""
    return click.option(
        "--data-dir",
        type=click.Path(file_okay=False),
        help="Directory containing company data files",
    )(f)


def with_snapshot(f):
    """Add --snapshot option to command (default: data.snapshot_path from config)."""
    return click.option(
        "--snapshot",
        "snapshot_path",
        type=click.Path(dir_okay=False),
        help="Path to the serialized index snapshot",
    )(f)
