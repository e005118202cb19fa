"""Search, profile and export pipelines."""
