"""Markdown output for analyzed folders."""

from .formatter import DocumentFormatter, RenderedDocument

__all__ = ["DocumentFormatter", "RenderedDocument"]
