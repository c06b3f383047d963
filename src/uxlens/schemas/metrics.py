"""Pydantic models for the heuristic metric engine."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MetricId = Literal["readability", "cognitive-load", "stress", "memory", "empathy"]


class MetricResult(BaseModel):
    """Score, verdict and evidence for a single human-factors dimension."""

    model_config = ConfigDict(frozen=True)

    id: MetricId
    label: str
    score: int  # 0-100
    summary: str
    recommendations: list[str] = []
    # Literal inputs behind the score, keyed by camelCase signal name
    evidence: dict[str, int | float | str] = {}


class TypographySignals(BaseModel):
    """Counts extracted once per page and shared by several metrics.

    Readability, cognitive load and empathy all read from the same
    instance so they always agree on the underlying word and paragraph
    counts.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    words: int = 0
    sentences: int = 1
    headings: int = 0
    paragraphs: int = 0
    avg_words_per_sentence: float = 0.0
    avg_words_per_paragraph: float = 0.0
    small_text_hits: int = 0
    low_contrast_hits: int = 0
    tight_line_heights: int = 0
    light_weight_hits: int = 0
    unique_font_sizes: int = 0
    wide_block_risk: int = 0

    @property
    def typography_risk_hits(self) -> int:
        """Hits that hurt legibility directly (size, contrast, leading)."""
        return self.small_text_hits + self.low_contrast_hits + self.tight_line_heights
