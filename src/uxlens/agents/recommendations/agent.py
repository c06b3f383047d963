"""Recommendation synthesis stage: ranked issues and advice for a page.

Two strategies share one entry point. With a configured client the
remote service writes the analysis; otherwise, or whenever the remote
call fails in any way, a deterministic local aggregation of the
heuristic scores is returned instead.
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

from uxlens.agents.base import BaseAgent
from uxlens.agents.recommendations.prompts import (
    FALLBACK_SUMMARY,
    METRIC_LINE,
    SYNTHESIS_PROMPT,
    VISUAL_SUMMARY,
)
from uxlens.heuristics.scoring import clamp_score, round_half_away
from uxlens.schemas.analysis import (
    MAX_TOP_ISSUES,
    Level,
    RecommendationAnalysis,
    RecommendationItem,
    TopIssue,
)
from uxlens.schemas.metrics import MetricResult
from uxlens.schemas.visual import VisualAnalysisResult
from uxlens.shared.llm_client import DryRunClient, LLMClient

logger = logging.getLogger(__name__)

MAX_FALLBACK_RECOMMENDATIONS = 8
ATTENTION_THRESHOLD = 70
HIGH_SEVERITY_THRESHOLD = 50


def _impact_for(score: int) -> Level:
    if score < HIGH_SEVERITY_THRESHOLD:
        return "high"
    if score < ATTENTION_THRESHOLD:
        return "medium"
    return "low"


def fallback_analysis(
    metrics: Sequence[MetricResult],
    visual: VisualAnalysisResult | None = None,
) -> RecommendationAnalysis:
    """Aggregate heuristic metrics locally; no network, always succeeds.

    With no metrics at all (screenshot/URL-only analysis) the overall
    score comes from the visual service when it reported one, else 0.
    """
    if metrics:
        overall = round_half_away(sum(m.score for m in metrics) / len(metrics))
    elif visual is not None and visual.overall_score is not None:
        overall = clamp_score(visual.overall_score)
    else:
        overall = 0

    recommendations = [
        RecommendationItem(
            title=f"{m.label} Improvement",
            description=rec,
            impact=_impact_for(m.score),
            effort="medium",
        )
        for m in metrics
        for rec in m.recommendations
    ][:MAX_FALLBACK_RECOMMENDATIONS]

    flagged = sorted(
        (m for m in metrics if m.score < ATTENTION_THRESHOLD),
        key=lambda m: m.score,
    )[:MAX_TOP_ISSUES]
    top_issues = [
        TopIssue(
            metric=m.label,
            issue=m.summary,
            severity="high" if m.score < HIGH_SEVERITY_THRESHOLD else "medium",
        )
        for m in flagged
    ]

    return RecommendationAnalysis(
        overall_score=overall,
        top_issues=top_issues,
        recommendations=recommendations,
        summary=FALLBACK_SUMMARY.format(score=overall, count=len(top_issues)),
    )


def _fmt(value: float | int | None) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_prompt(
    metrics: Sequence[MetricResult],
    visual: VisualAnalysisResult | None = None,
) -> str:
    """Render the synthesis prompt from metric scores and visual signals."""
    metrics_summary = "\n".join(
        METRIC_LINE.format(label=m.label, score=m.score, summary=m.summary) for m in metrics
    )
    if not metrics_summary:
        metrics_summary = "- No heuristic metrics (no HTML supplied)"

    visual_summary = ""
    if visual is not None:
        contrast = visual.contrast
        layout = visual.layout
        visual_summary = VISUAL_SUMMARY.format(
            overall=_fmt(visual.overall_score),
            contrast=_fmt(contrast.score if contrast else None),
            complexity=_fmt(layout.complexity if layout else None),
            hierarchy=_fmt(layout.visual_hierarchy if layout else None),
            focusable=_fmt(layout.focusable_elements if layout else None),
            issue_count=len(contrast.issues or []) if contrast else 0,
        )

    return SYNTHESIS_PROMPT.format(metrics_summary=metrics_summary, visual_summary=visual_summary)


class RecommendationAgent(BaseAgent):
    """Synthesizes a RecommendationAnalysis, remotely when possible."""

    def __init__(self, client: LLMClient | DryRunClient | None = None) -> None:
        super().__init__(client)

    @property
    def name(self) -> str:
        return "Recommendation Synthesis"

    def parse_output(self, raw_text: str) -> RecommendationAnalysis:
        if not raw_text:
            raise ValueError("No content in GreenPT response")
        return RecommendationAnalysis.model_validate(json.loads(raw_text))

    async def synthesize(
        self,
        metrics: Sequence[MetricResult],
        visual: VisualAnalysisResult | None = None,
        *,
        html: str | None = None,
        screenshot: str | None = None,
    ) -> RecommendationAnalysis:
        """Return a complete analysis; never raises for service failures."""
        if self.client is None:
            logger.info("GreenPT API key not configured, using local recommendation synthesis")
            return fallback_analysis(metrics, visual)

        prompt = build_prompt(metrics, visual)
        inputs = []
        if html:
            inputs.append(f"HTML markup ({len(html)} chars)")
        if screenshot:
            inputs.append("screenshot")
        if inputs:
            prompt += f"\n\nAnalyzed inputs: {', '.join(inputs)}."

        try:
            raw = await self.client.simple_completion(
                user_message=prompt, json_mode=True, temperature=0.7,
            )
            logger.debug("Agent %s raw output:\n%s", self.name, raw[:500])
            return self.parse_output(raw)
        except Exception as exc:
            logger.warning("GreenPT LLM analysis failed, using fallback: %s", exc)
            return fallback_analysis(metrics, visual)


async def generate_recommendation_analysis(
    metrics: Sequence[MetricResult],
    visual: VisualAnalysisResult | None = None,
    *,
    client: LLMClient | DryRunClient | None = None,
    html: str | None = None,
    screenshot: str | None = None,
) -> RecommendationAnalysis:
    """Functional shortcut for ``RecommendationAgent(client).synthesize(...)``."""
    agent = RecommendationAgent(client)
    return await agent.synthesize(metrics, visual, html=html, screenshot=screenshot)
