"""Tests for cliffnotes.repo_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from cliffnotes.config import CliffnotesConfig
from cliffnotes.repo_scanner import RepoScanner, RootNotFound, build_ignore_spec
from tests._fixtures.repo_builder import RepoBuilder


def test_discover_returns_sorted_relative_refs(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/b.ts": "export const b = 1;\n",
            "src/a.tsx": "export default function A() {}\n",
            "index.js": "module.exports = {};\n",
            "README.md": "# readme\n",
        }
    )

    refs = repo_builder.discover()

    assert [ref.relative_path for ref in refs] == ["index.js", "src/a.tsx", "src/b.ts"]
    root = repo_builder.path().resolve()
    assert refs[1].absolute_path == root / "src" / "a.tsx"


def test_discover_applies_default_excludes(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/app.ts": "x",
            "node_modules/pkg/index.js": "x",
            "dist/app.js": "x",
            "src/app.test.ts": "x",
            "src/types.d.ts": "x",
            "src/generated/client.ts": "x",
        }
    )

    paths = [ref.relative_path for ref in repo_builder.discover()]

    assert paths == ["src/app.ts"]


def test_discover_respects_gitignore_with_negation(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "legacy/\n*.gen.ts\n!keep.gen.ts\n",
            "legacy/old.ts": "x",
            "src/api.gen.ts": "x",
            "src/keep.gen.ts": "x",
            "src/main.ts": "x",
        }
    )

    paths = {ref.relative_path for ref in repo_builder.discover()}

    assert paths == {"src/keep.gen.ts", "src/main.ts"}


def test_discover_skips_hidden_segments(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".storybook/main.ts": "x", "src/.hidden.ts": "x", "src/ok.ts": "x"})

    paths = [ref.relative_path for ref in repo_builder.discover()]

    assert paths == ["src/ok.ts"]


def test_discover_excludes_own_artifacts(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"src/main.ts": "x", "src/notes.js": "x"})
    config = repo_builder.config(include=["**/*.ts", "**/*.js", "**/*.md"], output_file="notes.js")
    (repo_builder.path() / "CLIFFNOTES_AGENT.md").write_text("guide", encoding="utf-8")

    paths = [ref.relative_path for ref in repo_builder.discover(config)]

    assert paths == ["src/main.ts"]


def test_overlapping_patterns_are_deduplicated(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"src/a.ts": "x"})
    config = repo_builder.config(include=["**/*.ts", "src/*.ts", "**/a.ts"], exclude=[])

    paths = [ref.relative_path for ref in repo_builder.discover(config)]

    assert paths == ["src/a.ts"]


def test_discover_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(RootNotFound) as excinfo:
        RepoScanner().discover(missing, CliffnotesConfig(root=missing))

    assert isinstance(excinfo.value, FileNotFoundError)
    assert "missing" in str(excinfo.value)


def test_discover_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.ts"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        RepoScanner().discover(target, CliffnotesConfig(root=tmp_path))


def test_build_ignore_spec_without_gitignore(tmp_path: Path) -> None:
    spec = build_ignore_spec(tmp_path, ["**/dist/**"], ["CLIFFNOTES.md"])

    assert spec.match_file("dist/app.js")
    assert spec.match_file("docs/CLIFFNOTES.md")
    assert not spec.match_file("src/app.ts")
