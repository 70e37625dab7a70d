"""Token cost estimation."""

from __future__ import annotations

from typing import Iterable

from .config import PricingConfig
from .models import CostSummary, FileAnalysis, TokenUsage


def calculate_cost(
    analyses: Iterable[FileAnalysis], pricing: PricingConfig | None = None
) -> CostSummary:
    """Sum token usage across analyses and price it per million tokens."""
    rates = pricing or PricingConfig()
    totals = TokenUsage()
    for analysis in analyses:
        totals = totals + analysis.tokens
    cost = (
        totals.input / 1_000_000 * rates.input_per_million
        + totals.output / 1_000_000 * rates.output_per_million
    )
    return CostSummary(
        input_tokens=totals.input,
        output_tokens=totals.output,
        estimated_cost=cost,
    )


__all__ = ["calculate_cost"]
