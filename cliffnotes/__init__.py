"""Incremental, cache-aware codebase summaries for AI assistants."""

__version__ = "0.1.0"
