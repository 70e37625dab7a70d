"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cliffnotes import cli
from cliffnotes.cli import _build_parser
from tests._fixtures.repo_builder import RepoBuilder
from tests._fixtures.services import RecordingService


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["prune", "--verbose"])
    assert args.verbose is True
    assert args.command == "prune"


def test_cli_accepts_generate_overrides() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "repo", "-c", "2", "-o", "NOTES.md"])
    assert args.path == "repo"
    assert args.concurrency == 2
    assert args.output == "NOTES.md"


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


@pytest.fixture
def fake_runner(monkeypatch) -> RecordingService:
    service = RecordingService()
    captured = {}

    def build_runner(api_key, **kwargs):
        captured["api_key"] = api_key
        captured.update(kwargs)
        return service

    monkeypatch.setattr(cli, "AnthropicRunner", build_runner)
    service.captured = captured  # type: ignore[attr-defined]
    return service


def test_generate_runs_pipeline(
    monkeypatch, capsys, repo_builder: RepoBuilder, fake_runner: RecordingService
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    repo_builder.write({"src/a.ts": "export const a = 1;\n"})

    cli.main(["generate", str(repo_builder.path()), "-c", "2", "-o", "NOTES.md"])

    output = capsys.readouterr().out
    assert "1 analyzed" in output
    assert fake_runner.paths == ["src/a.ts"]
    assert fake_runner.captured["api_key"] == "env-key"  # type: ignore[attr-defined]
    assert (repo_builder.path() / "NOTES.md").exists()
    assert (repo_builder.path() / "src" / "NOTES.md").exists()


def test_generate_fails_without_api_key(
    monkeypatch, tmp_path: Path, repo_builder: RepoBuilder, fake_runner: RecordingService
) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "nohome")
    repo_builder.write({"src/a.ts": "export const a = 1;\n"})

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["generate", str(repo_builder.path())])

    assert excinfo.value.code == 1
    assert fake_runner.prompts == []


def test_generate_fails_on_missing_root(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["generate", str(tmp_path / "missing")])

    assert excinfo.value.code == 1


def test_generate_reports_failing_file(
    monkeypatch, capsys, repo_builder: RepoBuilder, fake_runner: RecordingService
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    repo_builder.write({"src/a.ts": "export const a = 1;\n"})
    fake_runner.fail_on = "src/a.ts"

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["generate", str(repo_builder.path())])

    assert excinfo.value.code == 1
    assert "src/a.ts" in capsys.readouterr().err


def test_prune_drops_entries_for_deleted_files(
    monkeypatch, capsys, repo_builder: RepoBuilder, fake_runner: RecordingService
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    repo_builder.write({"a.ts": "export const a = 1;\n", "b.ts": "export const b = 1;\n"})
    cli.main(["generate", str(repo_builder.path())])
    (repo_builder.path() / "b.ts").unlink()
    capsys.readouterr()

    cli.main(["prune", str(repo_builder.path())])

    output = capsys.readouterr().out
    assert "Pruned 1 cache entries" in output
    assert "b.ts" in output
