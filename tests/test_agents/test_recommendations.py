"""Tests for recommendation synthesis: local fallback and remote path."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from uxlens.agents.recommendations.agent import (
    RecommendationAgent,
    build_prompt,
    fallback_analysis,
    generate_recommendation_analysis,
)
from uxlens.heuristics.metrics import evaluate_all_metrics
from uxlens.schemas.metrics import MetricResult
from uxlens.schemas.visual import LayoutReport, VisualAnalysisResult
from uxlens.shared.llm_client import DryRunClient, LLMClient

REMOTE_REPLY = {
    "overallScore": 61,
    "topIssues": [{"metric": "Readability", "issue": "Walls of text", "severity": "high"}],
    "recommendations": [
        {"title": "Shorten copy", "description": "Cut intro text in half.",
         "impact": "high", "effort": "quick"},
    ],
    "summary": "Readable with work.",
}


def _make_text_response(text: str):
    message = SimpleNamespace(content=text, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _metric(id: str, label: str, score: int, recs: int = 3) -> MetricResult:
    return MetricResult(
        id=id,
        label=label,
        score=score,
        summary=f"{label} verdict",
        recommendations=[f"{label} tip {i}" for i in range(recs)],
    )


@pytest.fixture
def metrics() -> list[MetricResult]:
    return [
        _metric("readability", "Readability", 90),
        _metric("cognitive-load", "Cognitive Load", 45),
        _metric("stress", "User Stress", 65),
        _metric("memory", "Memory Load", 80),
        _metric("empathy", "Empathy Alignment", 60),
    ]


class TestFallbackAnalysis:
    def test_overall_is_rounded_mean(self, metrics: list[MetricResult]) -> None:
        result = fallback_analysis(metrics)
        assert result.overall_score == 68
        assert result.summary == "Overall accessibility score: 68/100. 3 key areas need attention."

    def test_mean_ties_round_up(self) -> None:
        result = fallback_analysis([_metric("stress", "User Stress", 70), _metric("memory", "Memory Load", 71)])
        assert result.overall_score == 71

    def test_top_issues_lowest_first(self, metrics: list[MetricResult]) -> None:
        issues = fallback_analysis(metrics).top_issues
        assert [(i.metric, i.severity) for i in issues] == [
            ("Cognitive Load", "high"),
            ("Empathy Alignment", "medium"),
            ("User Stress", "medium"),
        ]
        assert issues[0].issue == "Cognitive Load verdict"

    def test_recommendations_flattened_and_capped(self, metrics: list[MetricResult]) -> None:
        recs = fallback_analysis(metrics).recommendations
        assert len(recs) == 8
        assert recs[0].title == "Readability Improvement"
        assert recs[0].impact == "low"
        assert recs[3].title == "Cognitive Load Improvement"
        assert recs[3].impact == "high"
        assert recs[6].impact == "medium"
        assert {r.effort for r in recs} == {"medium"}

    def test_healthy_page_has_no_top_issues(self) -> None:
        result = fallback_analysis([_metric("memory", "Memory Load", 95, recs=0)])
        assert result.top_issues == []
        assert result.recommendations == []

    def test_no_metrics_uses_visual_score(self) -> None:
        assert fallback_analysis([], VisualAnalysisResult(overall_score=81.6)).overall_score == 82
        assert fallback_analysis([], VisualAnalysisResult()).overall_score == 0
        assert fallback_analysis([]).overall_score == 0

    def test_real_metrics(self, form_html: str) -> None:
        real = evaluate_all_metrics(form_html)
        result = fallback_analysis(real)
        expected = sum(m.score for m in real) / len(real)
        assert abs(result.overall_score - expected) <= 0.5
        assert len(result.top_issues) <= 3
        assert all(
            next(m for m in real if m.label == issue.metric).score < 70
            for issue in result.top_issues
        )


class TestBuildPrompt:
    def test_lists_metrics_and_visual(self, metrics: list[MetricResult]) -> None:
        visual = VisualAnalysisResult(
            overall_score=70.0, layout=LayoutReport(complexity=40, focusable_elements=9),
        )
        prompt = build_prompt(metrics, visual)
        assert "- Cognitive Load: 45/100 - Cognitive Load verdict" in prompt
        assert "Overall Accessibility Score: 70/100" in prompt
        assert "Contrast score: N/A/100" in prompt
        assert "Focusable elements: 9" in prompt
        assert "Contrast issues found: 0" in prompt

    def test_without_visual(self, metrics: list[MetricResult]) -> None:
        assert "Visual Analysis" not in build_prompt(metrics)

    def test_without_metrics(self) -> None:
        assert "No heuristic metrics" in build_prompt([])


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_no_client_uses_fallback(self, metrics: list[MetricResult]) -> None:
        result = await RecommendationAgent(None).synthesize(metrics)
        assert result == fallback_analysis(metrics)

    @pytest.mark.asyncio
    async def test_remote_success(
        self, mock_llm_client: LLMClient, metrics: list[MetricResult],
    ) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response(json.dumps(REMOTE_REPLY))
        )

        result = await RecommendationAgent(mock_llm_client).synthesize(
            metrics, html="<p>hello</p>", screenshot="data:image/png;base64,AAAA",
        )

        assert result.overall_score == 61
        assert result.recommendations[0].effort == "quick"
        kwargs = mock_llm_client._client.chat.completions.create.call_args.kwargs
        assert kwargs["temperature"] == 0.7
        assert kwargs["response_format"] == {"type": "json_object"}
        prompt = kwargs["messages"][0]["content"]
        assert "Analyzed inputs: HTML markup (12 chars), screenshot." in prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [
        "",
        "not json at all",
        '{"overallScore": 80}',
        json.dumps({**REMOTE_REPLY, "overallScore": 140}),
    ])
    async def test_bad_reply_falls_back(
        self, mock_llm_client: LLMClient, metrics: list[MetricResult], reply: str,
    ) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response(reply)
        )
        result = await RecommendationAgent(mock_llm_client).synthesize(metrics)
        assert result == fallback_analysis(metrics)

    @pytest.mark.asyncio
    async def test_service_error_falls_back(
        self, mock_llm_client: LLMClient, metrics: list[MetricResult],
    ) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            side_effect=TimeoutError("read timeout")
        )
        result = await RecommendationAgent(mock_llm_client).synthesize(metrics)
        assert result.overall_score == 68

    @pytest.mark.asyncio
    async def test_functional_entry_point(self, metrics: list[MetricResult]) -> None:
        result = await generate_recommendation_analysis(metrics, client=DryRunClient())
        assert result.overall_score == 74
        assert result.top_issues[0].metric == "Memory Load"
