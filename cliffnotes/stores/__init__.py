"""Persistent stores used across runs."""

from .cache_store import CACHE_VERSION, CacheStore, compute_hash, is_cache_valid

__all__ = ["CACHE_VERSION", "CacheStore", "compute_hash", "is_cache_valid"]
