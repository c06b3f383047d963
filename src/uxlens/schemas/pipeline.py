"""Request payloads and final report models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uxlens.schemas.analysis import RecommendationAnalysis
from uxlens.schemas.metrics import MetricResult
from uxlens.schemas.visual import VisualAnalysisResult


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class _PayloadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetricsReport(_PayloadModel):
    """Heuristic-only result for a page."""

    metrics: list[MetricResult]
    generated_at: str = Field(default_factory=_now)


class AnalysisReport(_PayloadModel):
    """Complete output of a full analysis run."""

    metrics: list[MetricResult] = []
    greenpt: VisualAnalysisResult = VisualAnalysisResult()
    analysis: RecommendationAnalysis
    generated_at: str = Field(default_factory=_now)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class IngestMetadata(_PayloadModel):
    """Where the ingested material came from."""

    source: Literal["upload", "url", "placeholder"] | None = None
    url: str | None = None
    status: int | None = None
    content_type: str | None = None
    bytes: int | None = None


class IngestResult(_PayloadModel):
    """Screenshot and/or HTML gathered for an analysis.

    ``warnings`` collects recoverable problems (bad URL, screenshot
    failure); ``error`` is set only when the remote fetch failed.
    """

    screenshot_data_url: str | None = None
    fetched_html: str | None = None
    metadata: IngestMetadata = IngestMetadata()
    warnings: list[str] = []
    note: str | None = None
    error: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
