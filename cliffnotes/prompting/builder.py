"""Builds the per-file analysis prompt sent to the summarization service."""

from __future__ import annotations

from ..models import Category
from .constants import CATEGORY_INSTRUCTIONS, CATEGORY_TEMPLATES

_PREAMBLE = (
    "You are generating cliffnotes for a codebase. Your output will be used by AI "
    "assistants to understand where to find things and how the code works."
)

_RULES = (
    "- Be extremely terse. No fluff.",
    "- For schemas: Include the FULL schema verbatim - every field, every relation, every index",
    "- For routers: Every route must be documented with method, path, input -> output",
    "- For components: Focus on props interface and what data it fetches/mutates",
    "- For types: Include the full type definitions verbatim if they're important domain types",
    "- Grep terms should be specific: function names, unique strings, error messages",
    "- Skip obvious imports unless they reveal architecture (e.g., importing from a specific service)",
    "- If a file is trivial (re-exports, simple constants), say so in one line",
)


def build_analysis_prompt(relative_path: str, content: str, category: Category) -> str:
    """Return the full prompt for one file, tailored to its category."""
    lines = [
        _PREAMBLE,
        "",
        f"FILE: {relative_path}",
        f"CATEGORY: {category.value}",
        "",
        "<file_content>",
        content,
        "</file_content>",
        "",
        CATEGORY_INSTRUCTIONS[category],
        "",
        "FORMAT YOUR RESPONSE EXACTLY LIKE THIS (omit sections that don't apply):",
        "",
        f"## {relative_path}",
        "**Purpose:** [One sentence: what this file does]",
        f"**Category:** {category.value}",
        "",
        CATEGORY_TEMPLATES[category],
        "",
        "**Search terms:** `term1`, `term2`, `term3` [grep-friendly terms to find this file's functionality]",
        "",
        "RULES:",
        *_RULES,
    ]
    return "\n".join(lines)


def build_skipped_summary(relative_path: str, category: Category) -> str:
    """Placeholder summary for files too large or minified to send."""
    return (
        f"## {relative_path}\n"
        "**Purpose:** [Skipped - file too large or minified]\n"
        f"**Category:** {category.value}"
    )


__all__ = ["build_analysis_prompt", "build_skipped_summary"]
