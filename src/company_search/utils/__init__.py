"""Utility helpers for Company Search."""
