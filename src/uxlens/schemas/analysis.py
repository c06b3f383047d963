"""Pydantic models for the synthesized recommendation analysis."""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Level = Literal["high", "medium", "low"]
Effort = Literal["quick", "medium", "long-term"]

MAX_TOP_ISSUES = 3


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TopIssue(_AnalysisModel):
    """One of the most pressing problems, tied to a metric."""

    metric: str
    issue: str
    severity: Level


class RecommendationItem(_AnalysisModel):
    """An actionable recommendation tagged with impact and effort."""

    title: str
    description: str
    impact: Level
    effort: Effort


class RecommendationAnalysis(_AnalysisModel):
    """Final ranked issues, recommendations and narrative for a page.

    All four fields are required so a remote response missing any of
    them fails validation instead of producing a partial result.
    """

    overall_score: int
    top_issues: list[TopIssue]
    recommendations: list[RecommendationItem]
    summary: str

    @field_validator("overall_score", mode="before")
    @classmethod
    def round_score(cls, v: object) -> object:
        # Remote models sometimes answer 72.5; keep the integer contract.
        if isinstance(v, float):
            return math.floor(v + 0.5)
        return v

    @field_validator("overall_score")
    @classmethod
    def check_score_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"overallScore must be within 0-100, got {v}")
        return v

    @field_validator("top_issues")
    @classmethod
    def keep_top_three(cls, v: list[TopIssue]) -> list[TopIssue]:
        return v[:MAX_TOP_ISSUES]
