"""CLI decorators for common options and error handling."""

from company_search.cli.decorators.error_handling import handle_errors
from company_search.cli.decorators.options import with_data_dir, with_snapshot

__all__ = [
    "handle_errors",
    "with_data_dir",
    "with_snapshot",
]
