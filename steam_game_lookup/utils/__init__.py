"""Utility functions and helpers."""

from .utilities import ensure_columns, read_csv, write_csv

__all__ = [
    "ensure_columns",
    "read_csv",
    "write_csv",
]
