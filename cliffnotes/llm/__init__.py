"""Summarization service adapters."""

from .runner import AnthropicRunner, ServiceError, SummarizationService, Summary

__all__ = ["AnthropicRunner", "ServiceError", "SummarizationService", "Summary"]
