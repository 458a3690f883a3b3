"""CLI command modules."""

from . import index_group, search, serve

__all__ = ["index_group", "search", "serve"]
