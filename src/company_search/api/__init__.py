"""HTTP API for Company Search."""
