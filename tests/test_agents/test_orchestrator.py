"""Tests for the AnalysisOrchestrator: stage ordering and degradation."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIStatusError

from uxlens.agents.orchestrator.agent import AnalysisOrchestrator
from uxlens.errors import MissingInputError
from uxlens.schemas.config import ServiceSettings
from uxlens.shared.llm_client import DryRunClient, LLMClient


def _make_text_response(text: str):
    message = SimpleNamespace(content=text, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestFromSettings:
    def test_no_key_disables_remote_stages(self) -> None:
        orch = AnalysisOrchestrator.from_settings(ServiceSettings())
        assert orch.client is None
        assert not orch.visual_agent.is_configured
        assert not orch.recommendation_agent.is_configured

    def test_key_builds_live_client(self) -> None:
        orch = AnalysisOrchestrator.from_settings(ServiceSettings(api_key="k", html_prompt_chars=500))
        assert isinstance(orch.client, LLMClient)
        assert orch.visual_agent.html_prompt_chars == 500

    def test_dry_run_wins(self) -> None:
        orch = AnalysisOrchestrator.from_settings(ServiceSettings(api_key="k"), dry_run=True)
        assert isinstance(orch.client, DryRunClient)


class TestRun:
    @pytest.mark.asyncio
    async def test_missing_inputs(self) -> None:
        with pytest.raises(MissingInputError):
            await AnalysisOrchestrator().run()

    @pytest.mark.asyncio
    async def test_unconfigured_html_run(self, form_html: str) -> None:
        progress = MagicMock()
        report = await AnalysisOrchestrator().run(html=form_html, progress=progress)

        assert [m.id for m in report.metrics] == [
            "readability", "cognitive-load", "stress", "memory", "empathy",
        ]
        assert report.greenpt.to_wire() == {}
        expected = sum(m.score for m in report.metrics) / 5
        assert abs(report.analysis.overall_score - expected) <= 0.5
        progress.degrade_stage.assert_called_once_with("Visual analysis", "not configured")
        assert progress.start_stage.call_count == 3

    @pytest.mark.asyncio
    async def test_screenshot_only_skips_heuristics(self) -> None:
        orch = AnalysisOrchestrator(DryRunClient())
        report = await orch.run(screenshot="data:image/png;base64,AAAA")

        assert report.metrics == []
        assert report.greenpt.overall_score == 76
        assert report.analysis.overall_score == 74

    @pytest.mark.asyncio
    async def test_visual_failure_degrades_and_synthesis_falls_back(
        self, mock_llm_client: LLMClient, form_html: str,
    ) -> None:
        request = httpx.Request("POST", "https://api.greenpt.ai/v1/chat/completions")
        error = APIStatusError(
            "Error code: 500", response=httpx.Response(500, request=request), body=None,
        )
        mock_llm_client._client.chat.completions.create = AsyncMock(side_effect=error)
        progress = MagicMock()

        report = await AnalysisOrchestrator(mock_llm_client).run(
            html=form_html, url="https://example.com", progress=progress,
        )

        assert report.greenpt.errors == ["GreenPT API returned 500"]
        assert report.analysis.summary.startswith("Overall accessibility score:")
        progress.degrade_stage.assert_called_once_with("Visual analysis", "GreenPT API returned 500")
        # One visual call, one synthesis call, no retries
        assert mock_llm_client._client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_oversized_score_reply_does_not_abort_run(
        self, mock_llm_client: LLMClient, form_html: str,
    ) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response("overallScore: " + "9" * 5000)
        )
        progress = MagicMock()

        report = await AnalysisOrchestrator(mock_llm_client).run(html=form_html, progress=progress)

        assert report.greenpt.errors == ["Could not parse structured response from GreenPT"]
        assert len(report.metrics) == 5
        assert report.analysis.summary.startswith("Overall accessibility score:")
        progress.degrade_stage.assert_called_once_with(
            "Visual analysis", "Could not parse structured response from GreenPT",
        )

    @pytest.mark.asyncio
    async def test_report_json_uses_wire_names(self, form_html: str) -> None:
        report = await AnalysisOrchestrator(DryRunClient()).run(html=form_html)
        payload = report.to_json()
        assert '"greenpt"' in payload
        assert '"overallScore": 74' in payload
        assert '"generatedAt"' in payload
