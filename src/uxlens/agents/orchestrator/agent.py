"""Orchestrator: runs heuristics, visual analysis and synthesis in order."""

from __future__ import annotations

import logging

from uxlens.agents.recommendations.agent import RecommendationAgent
from uxlens.agents.visual_analysis.agent import VisualAnalysisAgent
from uxlens.errors import MissingInputError
from uxlens.heuristics.metrics import evaluate_all_metrics
from uxlens.schemas.config import ServiceSettings
from uxlens.schemas.pipeline import AnalysisReport
from uxlens.shared.llm_client import DryRunClient, LLMClient
from uxlens.shared.progress import PipelineProgress

logger = logging.getLogger(__name__)

HEURISTICS = "Heuristic metrics"
VISUAL = "Visual analysis"
SYNTHESIS = "Recommendations"


class AnalysisOrchestrator:
    """Coordinates one full analysis.

    Pipeline flow:
        heuristics (local, only with HTML) → visual analysis → synthesis

    The two remote stages run one after the other because the synthesis
    prompt includes the visual scores. Each is called at most once per
    run and neither raises on service failure.
    """

    def __init__(
        self,
        client: LLMClient | DryRunClient | None = None,
        *,
        settings: ServiceSettings | None = None,
    ) -> None:
        settings = settings or ServiceSettings()
        self.client = client
        self.visual_agent = VisualAnalysisAgent(
            client, html_prompt_chars=settings.html_prompt_chars,
        )
        self.recommendation_agent = RecommendationAgent(client)

    @classmethod
    def from_settings(
        cls, settings: ServiceSettings, *, dry_run: bool = False,
    ) -> "AnalysisOrchestrator":
        """Build an orchestrator whose remote stages follow ``settings``.

        Without an API key both remote stages fall back to local
        behaviour; ``dry_run`` swaps in canned responses instead.
        """
        client: LLMClient | DryRunClient | None
        if dry_run:
            client = DryRunClient()
        elif settings.is_configured:
            client = LLMClient(settings)
        else:
            client = None
        logger.info(
            "GreenPT configured: %s, base URL: %s, dry run: %s",
            settings.is_configured, settings.base_url, dry_run,
        )
        return cls(client, settings=settings)

    async def run(
        self,
        *,
        html: str | None = None,
        screenshot: str | None = None,
        url: str | None = None,
        progress: PipelineProgress | None = None,
    ) -> AnalysisReport:
        """Analyze whatever inputs were given and build the combined report.

        Raises ``MissingInputError`` when ``html``, ``screenshot`` and
        ``url`` are all absent.
        """
        if not html and not screenshot and not url:
            raise MissingInputError("Provide HTML, screenshot, or URL to analyze.")

        # ── Heuristics ──────────────────────────────────────────
        metrics = []
        if html:
            _start(progress, HEURISTICS)
            metrics = evaluate_all_metrics(html)
            _finish(progress, HEURISTICS, f"{len(metrics)} metrics")

        # ── Visual analysis ─────────────────────────────────────
        _start(progress, VISUAL)
        visual = await self.visual_agent.analyze(image=screenshot, html=html, url=url)
        if not self.visual_agent.is_configured:
            _degrade(progress, VISUAL, "not configured")
        elif visual.has_errors:
            _degrade(progress, VISUAL, "; ".join(visual.errors or []))
        else:
            _finish(progress, VISUAL)

        # ── Synthesis ───────────────────────────────────────────
        _start(progress, SYNTHESIS)
        analysis = await self.recommendation_agent.synthesize(
            metrics, visual, html=html, screenshot=screenshot,
        )
        _finish(progress, SYNTHESIS, f"overall {analysis.overall_score}/100")

        return AnalysisReport(metrics=metrics, greenpt=visual, analysis=analysis)


def _start(progress: PipelineProgress | None, stage: str) -> None:
    logger.info("Starting stage: %s", stage)
    if progress:
        progress.start_stage(stage)


def _finish(progress: PipelineProgress | None, stage: str, detail: str = "") -> None:
    if progress:
        progress.finish_stage(stage, detail)


def _degrade(progress: PipelineProgress | None, stage: str, reason: str) -> None:
    logger.info("Stage %s degraded: %s", stage, reason)
    if progress:
        progress.degrade_stage(stage, reason)
