"""Command line interface for Company Search."""
