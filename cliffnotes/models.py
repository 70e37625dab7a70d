"""Core data models shared across cliffnotes components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple

ROOT_FOLDER = "."


class Category(str, Enum):
    """Closed set of file categories assigned by the classifier."""

    SCHEMA = "schema"
    ROUTER = "router"
    COMPONENT = "component"
    HOOK = "hook"
    UTIL = "util"
    SERVICE = "service"
    CONFIG = "config"
    TYPE = "type"
    TEST = "test"
    OTHER = "other"


class Outcome(str, Enum):
    """How a file's analysis was resolved during a run."""

    CACHED = "cached"
    SKIPPED = "skipped"
    ANALYZED = "analyzed"


@dataclass(frozen=True)
class FileRef:
    """A discovered file, addressed both absolutely and relative to the root."""

    absolute_path: Path
    relative_path: str


@dataclass(frozen=True)
class TokenUsage:
    """Input/output token counts reported by the summarization service."""

    input: int = 0
    output: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(input=self.input + other.input, output=self.output + other.output)


@dataclass
class CacheEntry:
    """Last known analysis for one file, keyed by relative path in the cache."""

    content_hash: str
    category: Category
    summary: str
    analyzed_at: str
    tokens: TokenUsage = field(default_factory=TokenUsage)


@dataclass
class FileAnalysis:
    """Per-file result produced by the orchestrator."""

    file: FileRef
    category: Category
    summary: str
    content_hash: str
    tokens: TokenUsage
    outcome: Outcome

    @property
    def relative_path(self) -> str:
        return self.file.relative_path

    @property
    def from_cache(self) -> bool:
        return self.outcome is Outcome.CACHED


@dataclass
class FolderNode:
    """One directory's direct files and immediate subdirectory names."""

    path: str
    name: str
    depth: int
    files: List[FileAnalysis] = field(default_factory=list)
    subfolders: List[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_FOLDER

    def child_path(self, name: str) -> str:
        return name if self.is_root else f"{self.path}/{name}"


@dataclass
class FolderTree:
    """Folder hierarchy rebuilt from a flat list of file analyses."""

    root: str = ROOT_FOLDER
    folders: Dict[str, FolderNode] = field(default_factory=dict)


@dataclass(frozen=True)
class CostSummary:
    """Aggregate token usage and its estimated price in USD."""

    input_tokens: int
    output_tokens: int
    estimated_cost: float


@dataclass
class AnalysisResult:
    """Outcome of a batch analysis; results follow the input order."""

    results: List[FileAnalysis]
    cached_count: int
    analyzed_count: int
    skipped_count: int = 0


@dataclass
class RunReport:
    """Everything a full pipeline run produced."""

    root: Path
    analysis: AnalysisResult
    tree: FolderTree
    cost: CostSummary
    pruned: List[str] = field(default_factory=list)
    written: Tuple[Path, ...] = ()
