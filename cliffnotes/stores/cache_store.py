"""Persistent content-hash cache of per-file summaries."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from ..logging import get_logger
from ..models import CacheEntry, Category, TokenUsage

CACHE_VERSION = 1
HASH_LENGTH = 16

logger = get_logger("cache")


def compute_hash(content: bytes | str) -> str:
    """Return a truncated SHA-256 digest of ``content``."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


def is_cache_valid(entry: Optional[CacheEntry], current_hash: str) -> bool:
    """True when an entry exists and was computed from identical content."""
    return entry is not None and entry.content_hash == current_hash


class CacheStore:
    """Maps relative file paths to their last analysis.

    Entries are only inserted through :meth:`put`, which is lock-guarded so
    concurrent analysis tasks can record results safely.
    """

    def __init__(
        self,
        entries: Mapping[str, CacheEntry] | None = None,
        *,
        version: int = CACHE_VERSION,
    ) -> None:
        self.version = version
        self._entries: Dict[str, CacheEntry] = dict(entries or {})
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self._entries

    @property
    def entries(self) -> Mapping[str, CacheEntry]:
        return MappingProxyType(self._entries)

    def get(self, relative_path: str) -> Optional[CacheEntry]:
        return self._entries.get(relative_path)

    def put(self, relative_path: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[relative_path] = entry

    def prune(self, current_paths: Iterable[str]) -> List[str]:
        """Drop entries for files that no longer exist and return their keys."""
        keep = set(current_paths)
        with self._lock:
            removed = sorted(key for key in self._entries if key not in keep)
            for key in removed:
                del self._entries[key]
        return removed

    # ------------------------------------------------------------------
    # Persistence

    @classmethod
    def load(cls, path: Path) -> "CacheStore":
        """Read a cache file; any problem yields an empty store instead of an error."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.debug("Ignoring unreadable cache %s: %s", path, exc)
            return cls()

        if not isinstance(data, dict) or data.get("version") != CACHE_VERSION:
            logger.debug("Cache %s has an unexpected version; starting fresh", path)
            return cls()
        raw_entries = data.get("entries")
        if not isinstance(raw_entries, dict):
            logger.debug("Cache %s has no entries mapping; starting fresh", path)
            return cls()

        entries: Dict[str, CacheEntry] = {}
        for key, payload in raw_entries.items():
            entry = _entry_from_dict(payload)
            if isinstance(key, str) and entry is not None:
                entries[key] = entry
        return cls(entries)

    def save(self, path: Path) -> None:
        """Write the whole store, replacing the previous file in one step."""
        payload = {
            "version": self.version,
            "entries": {key: _entry_to_dict(entry) for key, entry in self._entries.items()},
        }
        text = json.dumps(payload, indent=2, sort_keys=True)
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with handle:
                handle.write(text)
            os.replace(handle.name, path)
        except BaseException:
            Path(handle.name).unlink(missing_ok=True)
            raise


def _entry_to_dict(entry: CacheEntry) -> Dict[str, object]:
    return {
        "hash": entry.content_hash,
        "category": entry.category.value,
        "summary": entry.summary,
        "analyzedAt": entry.analyzed_at,
        "tokens": {"input": entry.tokens.input, "output": entry.tokens.output},
    }


def _entry_from_dict(payload: object) -> Optional[CacheEntry]:
    if not isinstance(payload, dict):
        return None
    content_hash = payload.get("hash")
    category = payload.get("category")
    summary = payload.get("summary")
    analyzed_at = payload.get("analyzedAt")
    tokens = payload.get("tokens")
    if (
        not isinstance(content_hash, str)
        or not isinstance(category, str)
        or not isinstance(summary, str)
        or not isinstance(analyzed_at, str)
        or not isinstance(tokens, dict)
    ):
        return None
    try:
        parsed_category = Category(category)
    except ValueError:
        return None
    input_tokens = tokens.get("input", 0)
    output_tokens = tokens.get("output", 0)
    if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
        return None
    return CacheEntry(
        content_hash=content_hash,
        category=parsed_category,
        summary=summary,
        analyzed_at=analyzed_at,
        tokens=TokenUsage(input=input_tokens, output=output_tokens),
    )


__all__ = ["CACHE_VERSION", "HASH_LENGTH", "CacheStore", "compute_hash", "is_cache_valid"]
