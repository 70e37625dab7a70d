"""Tests for the summary cache store."""

from __future__ import annotations

import json
from pathlib import Path

from cliffnotes.models import CacheEntry, Category, TokenUsage
from cliffnotes.stores import CACHE_VERSION, CacheStore, compute_hash, is_cache_valid


def _entry(content_hash: str = "deadbeef00000000", summary: str = "## a.ts") -> CacheEntry:
    return CacheEntry(
        content_hash=content_hash,
        category=Category.SERVICE,
        summary=summary,
        analyzed_at="2026-01-01T00:00:00Z",
        tokens=TokenUsage(input=12, output=3),
    )


def test_compute_hash_is_truncated_sha256() -> None:
    digest = compute_hash("export const a = 1;\n")

    assert len(digest) == 16
    assert digest == compute_hash(b"export const a = 1;\n")
    assert digest != compute_hash("export const a = 2;\n")


def test_is_cache_valid_requires_matching_hash() -> None:
    entry = _entry("abc")

    assert is_cache_valid(entry, "abc")
    assert not is_cache_valid(entry, "abd")
    assert not is_cache_valid(None, "abc")


def test_cache_store_round_trip(tmp_path: Path) -> None:
    cache_path = tmp_path / ".cliffnotes-cache.json"
    store = CacheStore()
    store.put("src/a.ts", _entry())
    store.save(cache_path)

    loaded = CacheStore.load(cache_path)

    assert loaded.get("src/a.ts") == _entry()
    payload = json.loads(cache_path.read_text(encoding="utf-8"))
    assert payload["version"] == CACHE_VERSION
    assert payload["entries"]["src/a.ts"]["hash"] == "deadbeef00000000"
    assert payload["entries"]["src/a.ts"]["tokens"] == {"input": 12, "output": 3}


def test_load_missing_file_yields_empty_store(tmp_path: Path) -> None:
    store = CacheStore.load(tmp_path / "absent.json")

    assert len(store) == 0
    assert store.version == CACHE_VERSION


def test_load_discards_other_versions(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache.json"
    cache_path.write_text(
        json.dumps(
            {
                "version": CACHE_VERSION + 1,
                "entries": {
                    "a.ts": {
                        "hash": "x",
                        "category": "service",
                        "summary": "s",
                        "analyzedAt": "t",
                        "tokens": {"input": 1, "output": 1},
                    }
                },
            }
        ),
        encoding="utf-8",
    )

    assert len(CacheStore.load(cache_path)) == 0


def test_load_recovers_from_corrupt_json(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache.json"
    cache_path.write_text("{not json", encoding="utf-8")

    store = CacheStore.load(cache_path)

    assert len(store) == 0


def test_load_drops_malformed_entries_only(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache.json"
    good = {
        "hash": "h",
        "category": "util",
        "summary": "s",
        "analyzedAt": "t",
        "tokens": {"input": 1, "output": 2},
    }
    cache_path.write_text(
        json.dumps(
            {
                "version": CACHE_VERSION,
                "entries": {
                    "good.ts": good,
                    "bad-category.ts": {**good, "category": "widget"},
                    "missing-hash.ts": {key: value for key, value in good.items() if key != "hash"},
                    "not-a-dict.ts": "oops",
                },
            }
        ),
        encoding="utf-8",
    )

    store = CacheStore.load(cache_path)

    assert list(store.entries) == ["good.ts"]
    assert store.get("good.ts").category is Category.UTIL


def test_prune_removes_exactly_absent_paths() -> None:
    store = CacheStore({"a.ts": _entry("1"), "b.ts": _entry("2"), "c.ts": _entry("3")})

    removed = store.prune(["c.ts", "a.ts", "new.ts"])

    assert removed == ["b.ts"]
    assert set(store.entries) == {"a.ts", "c.ts"}
    assert store.get("a.ts") == _entry("1")
    assert store.get("c.ts") == _entry("3")


def test_prune_with_no_current_paths_clears_store() -> None:
    store = CacheStore({"z.ts": _entry(), "a.ts": _entry()})

    assert store.prune([]) == ["a.ts", "z.ts"]
    assert len(store) == 0


def test_save_replaces_file_without_leftovers(tmp_path: Path) -> None:
    cache_path = tmp_path / "nested" / "cache.json"
    first = CacheStore({"a.ts": _entry(summary="first")})
    first.save(cache_path)
    second = CacheStore({"a.ts": _entry(summary="second")})
    second.save(cache_path)

    assert CacheStore.load(cache_path).get("a.ts").summary == "second"
    assert sorted(path.name for path in cache_path.parent.iterdir()) == ["cache.json"]


def test_entries_view_is_read_only() -> None:
    store = CacheStore({"a.ts": _entry()})

    try:
        store.entries["b.ts"] = _entry()  # type: ignore[index]
    except TypeError:
        pass
    else:  # pragma: no cover - defensive guard
        raise AssertionError("Expected the entries view to reject assignment")
    assert "b.ts" not in store


def test_load_reads_existing_camel_case_cache(tmp_path: Path) -> None:
    cache_path = tmp_path / ".cliffnotes-cache.json"
    # Field order and indentation of cache files already on disk.
    cache_path.write_text(
        """{
  "version": 1,
  "entries": {
    "src/a.ts": {
      "hash": "0123456789abcdef",
      "summary": "## src/a.ts",
      "category": "service",
      "analyzedAt": "2025-11-30T12:00:00.000Z",
      "tokens": {
        "input": 50,
        "output": 10
      }
    }
  }
}""",
        encoding="utf-8",
    )

    entry = CacheStore.load(cache_path).get("src/a.ts")

    assert entry == CacheEntry(
        content_hash="0123456789abcdef",
        category=Category.SERVICE,
        summary="## src/a.ts",
        analyzed_at="2025-11-30T12:00:00.000Z",
        tokens=TokenUsage(input=50, output=10),
    )


def test_saved_entries_use_camel_case_timestamp(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache.json"
    CacheStore({"a.ts": _entry()}).save(cache_path)

    saved = json.loads(cache_path.read_text(encoding="utf-8"))["entries"]["a.ts"]

    assert sorted(saved) == ["analyzedAt", "category", "hash", "summary", "tokens"]
