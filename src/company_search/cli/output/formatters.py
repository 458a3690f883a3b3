"""Output formatting utilities for CLI."""

from __future__ import annotations

from typing import Any, Dict, Iterable

import click


class OutputFormatter:
    """Format output for CLI display.

    Example:
        >>> out = OutputFormatter()
        >>> out.success("Index built")
        >>> out.stats({"records": 100, "files": 5})
    """

    @staticmethod
    def success(message: str) -> None:
        click.echo(f"✓ {message}")

    @staticmethod
    def error(message: str, abort: bool = False) -> None:
        """Display error message.

        Args:
            message: Error message to display
            abort: Whether to abort command execution after displaying error
        """
        click.echo(f"❌ {message}", err=True)
        if abort:
            raise click.Abort()

    @staticmethod
    def warning(message: str) -> None:
        click.echo(f"⚠️  {message}")

    @staticmethod
    def section(title: str) -> None:
        click.echo(f"\n{title}")

    @staticmethod
    def stats(stats_dict: Dict[str, Any], indent: str = "   ") -> None:
        """Display statistics dictionary in key: value format."""
        for key, value in stats_dict.items():
            click.echo(f"{indent}{key}: {value}")

    @staticmethod
    def list_items(items: Iterable[str], indent: str = "   ", bullet: str = "-") -> None:
        for item in items:
            click.echo(f"{indent}{bullet} {item}")

    @staticmethod
    def company(rank: int, row: Dict[str, Any], indent: str = "   ") -> None:
        """Display one search result."""
        click.echo(f"{rank}. {row['name']}")
        details = {
            "CIN": row.get("cin") or "-",
            "State": row.get("state") or "-",
            "Status": row.get("status") or "-",
            "Source": row["id"],
        }
        for key, value in details.items():
            click.echo(f"{indent}{key}: {value}")
