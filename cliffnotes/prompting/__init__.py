"""Prompt construction and category presentation tables."""

from .builder import build_analysis_prompt, build_skipped_summary
from .constants import CATEGORY_ICONS, CATEGORY_LABELS, CATEGORY_ORDER

__all__ = [
    "CATEGORY_ICONS",
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "build_analysis_prompt",
    "build_skipped_summary",
]
