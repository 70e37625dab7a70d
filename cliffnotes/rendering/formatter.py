"""Renders per-folder cliffnotes and the agent navigation guide."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from ..models import AnalysisResult, Category, CostSummary, FileAnalysis, FolderNode
from ..prompting.constants import CATEGORY_ICONS, CATEGORY_LABELS, CATEGORY_ORDER

_TEMPLATES_DIR = Path(__file__).with_name("templates")


@dataclass(frozen=True)
class RenderedDocument:
    """A document ready to be written, addressed relative to the repo root."""

    relative_path: str
    content: str


class DocumentFormatter:
    """Turns the folder hierarchy into markdown documents."""

    def __init__(
        self,
        *,
        output_file: str = "CLIFFNOTES.md",
        agent_file: str = "CLIFFNOTES_AGENT.md",
        templates_dir: Path | None = None,
    ) -> None:
        self.output_file = output_file
        self.agent_file = agent_file
        directories = [str(templates_dir)] if templates_dir else []
        directories.append(str(_TEMPLATES_DIR))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.logger = get_logger("formatter")

    def render(
        self,
        project_name: str,
        folders: Sequence[FolderNode],
        analysis: AnalysisResult,
        cost: CostSummary,
        *,
        generated_at: str,
    ) -> List[RenderedDocument]:
        """Render one document per folder plus the navigation guide."""
        documents = [
            RenderedDocument(
                relative_path=self._doc_path(folder.path),
                content=self.render_folder(
                    project_name,
                    folder,
                    generated_at=generated_at,
                    stats=self._stats(analysis, cost) if folder.is_root else None,
                ),
            )
            for folder in folders
        ]
        documents.append(
            RenderedDocument(
                relative_path=self.agent_file,
                content=self.render_agent(project_name, folders, generated_at=generated_at),
            )
        )
        return documents

    def render_folder(
        self,
        project_name: str,
        folder: FolderNode,
        *,
        generated_at: str,
        stats: Dict[str, str] | None = None,
    ) -> str:
        grouped = _group_by_category(folder.files)
        sections = [
            {
                "icon": CATEGORY_ICONS[category],
                "label": CATEGORY_LABELS[category],
                "summaries": [analysis.summary.strip() for analysis in grouped[category]],
            }
            for category in CATEGORY_ORDER
            if grouped.get(category)
        ]
        index = [
            {"icon": CATEGORY_ICONS[analysis.category], "path": analysis.relative_path}
            for analysis in sorted(folder.files, key=lambda item: item.relative_path)
        ]
        template = self._env.get_template("folder.md.j2")
        return template.render(
            title=project_name if folder.is_root else f"{folder.path}/",
            generated_at=generated_at,
            parent_link=None if folder.is_root else f"../{self.output_file}",
            stats=stats,
            subfolders=[
                {"name": name, "link": f"{name}/{self.output_file}"} for name in folder.subfolders
            ],
            index=index,
            sections=sections,
        )

    def render_agent(
        self,
        project_name: str,
        folders: Sequence[FolderNode],
        *,
        generated_at: str,
    ) -> str:
        totals: Counter[Category] = Counter()
        rows = []
        for folder in folders:
            counts = Counter(analysis.category for analysis in folder.files)
            totals.update(counts)
            rows.append(
                {
                    "depth": folder.depth,
                    "display": "./" if folder.is_root else f"{folder.path}/",
                    "link": self._doc_path(folder.path),
                    "file_count": len(folder.files),
                    "categories": [
                        CATEGORY_LABELS[category] for category in CATEGORY_ORDER if counts.get(category)
                    ],
                }
            )
        categories = [
            {
                "icon": CATEGORY_ICONS[category],
                "label": CATEGORY_LABELS[category],
                "count": totals[category],
            }
            for category in CATEGORY_ORDER
            if totals.get(category)
        ]
        template = self._env.get_template("agent.md.j2")
        return template.render(
            project_name=project_name,
            generated_at=generated_at,
            root_link=self.output_file,
            folders=rows,
            categories=categories,
        )

    def write(self, root: Path, documents: Sequence[RenderedDocument]) -> List[Path]:
        written: List[Path] = []
        for document in documents:
            target = root / document.relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(document.content, encoding="utf-8")
            written.append(target)
        self.logger.debug("Wrote %d documents under %s", len(written), root)
        return written

    def _doc_path(self, folder_path: str) -> str:
        if folder_path == ".":
            return self.output_file
        return f"{folder_path}/{self.output_file}"

    @staticmethod
    def _stats(analysis: AnalysisResult, cost: CostSummary) -> Dict[str, str]:
        return {
            "analyzed": str(analysis.analyzed_count),
            "cached": str(analysis.cached_count),
            "input_tokens": f"{cost.input_tokens:,}",
            "output_tokens": f"{cost.output_tokens:,}",
            "estimated_cost": f"{cost.estimated_cost:.4f}",
        }


def _group_by_category(files: Sequence[FileAnalysis]) -> Dict[Category, List[FileAnalysis]]:
    grouped: Dict[Category, List[FileAnalysis]] = {}
    for analysis in sorted(files, key=lambda item: item.relative_path):
        grouped.setdefault(analysis.category, []).append(analysis)
    return grouped


__all__ = ["DocumentFormatter", "RenderedDocument"]
