"""Repository scanning: include globs filtered through gitignore-style rules."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Set

from pathspec import GitIgnoreSpec

from .config import CliffnotesConfig
from .logging import get_logger
from .models import FileRef

_GITIGNORE = ".gitignore"


class RootNotFound(FileNotFoundError):
    """Raised when the repository root to scan does not exist."""


def _parse_gitignore(path: Path) -> List[str]:
    if not path.is_file():
        return []
    lines: List[str] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.rstrip()
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        lines.append(line)
    return lines


def build_ignore_spec(
    root: Path,
    exclude_patterns: Iterable[str] = (),
    artifact_names: Iterable[str] = (),
) -> GitIgnoreSpec:
    """Combine the root .gitignore, configured excludes and our own artifacts."""
    lines = _parse_gitignore(root / _GITIGNORE)
    lines.extend(pattern for pattern in exclude_patterns if pattern.strip())
    # Artifacts come last so a negation in .gitignore cannot re-include them.
    lines.extend(name for name in artifact_names if name.strip())
    return GitIgnoreSpec.from_lines(lines)


def _is_hidden(relative: str) -> bool:
    return any(part.startswith(".") for part in relative.split("/"))


def _glob_relative(root: Path, patterns: Sequence[str]) -> Set[str]:
    matches: Set[str] = set()
    for pattern in patterns:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if _is_hidden(relative):
                continue
            matches.add(relative)
    return matches


class RepoScanner:
    """Finds the source files a run should consider."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def discover(self, root: str | Path, config: CliffnotesConfig) -> List[FileRef]:
        """Return deduplicated, sorted file references under ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise RootNotFound(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        candidates = _glob_relative(root_path, config.include)
        spec = build_ignore_spec(root_path, config.exclude, config.artifact_names)
        kept = sorted(path for path in candidates if not spec.match_file(path))
        self.logger.debug(
            "Matched %d candidate files, %d after ignore rules", len(candidates), len(kept)
        )

        return [
            FileRef(absolute_path=root_path / relative, relative_path=relative)
            for relative in kept
        ]


__all__ = ["RepoScanner", "RootNotFound", "build_ignore_spec"]
