"""CLI output helpers."""

from company_search.cli.output.formatters import OutputFormatter

__all__ = ["OutputFormatter"]
