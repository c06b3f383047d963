"""Visual analysis stage: multimodal scoring of a screenshot and/or page."""

from __future__ import annotations

import logging
import re
from typing import Any

from openai import APIStatusError

from uxlens.agents.base import BaseAgent, extract_json
from uxlens.agents.visual_analysis.prompts import (
    ANALYSIS_PROMPT,
    CLOSING,
    HTML_SECTION,
    IMAGE_SECTION,
    URL_SECTION,
)
from uxlens.schemas.visual import TextExtraction, VisualAnalysisResult
from uxlens.shared.llm_client import DryRunClient, LLMClient

logger = logging.getLogger(__name__)

DEFAULT_HTML_PROMPT_CHARS = 8000

UNAVAILABLE_ERROR = "GreenPT service unavailable"
PARSE_ERROR = "Could not parse structured response from GreenPT"

_SCORE_PATTERNS = (
    re.compile(r"overallScore[\"\s:]+(\d{1,3})(?!\d)", re.IGNORECASE),
    re.compile(r"overall.*score[\"\s:]+(\d{1,3})(?!\d)", re.IGNORECASE),
)


class VisualAnalysisAgent(BaseAgent):
    """Sends the screenshot and page context to the multimodal service.

    ``analyze`` never raises: an unconfigured client gives an empty
    result, and every remote failure is reported through ``errors``.
    """

    def __init__(
        self,
        client: LLMClient | DryRunClient | None = None,
        *,
        html_prompt_chars: int = DEFAULT_HTML_PROMPT_CHARS,
    ) -> None:
        super().__init__(client)
        self.html_prompt_chars = html_prompt_chars

    @property
    def name(self) -> str:
        return "Visual Analysis"

    def parse_output(self, raw_text: str) -> VisualAnalysisResult:
        """Parse the service reply, degrading to partial results on bad JSON."""
        try:
            data = extract_json(raw_text)
            return VisualAnalysisResult.model_validate(data)
        except ValueError as exc:
            logger.warning(
                "Visual analysis reply was not valid JSON (%s); first 200 chars: %r",
                exc, raw_text[:200],
            )

        for pattern in _SCORE_PATTERNS:
            match = pattern.search(raw_text)
            if match:
                return VisualAnalysisResult(
                    overall_score=int(match.group(1)),
                    text_extraction=TextExtraction(text=raw_text),
                )

        return VisualAnalysisResult(
            text_extraction=TextExtraction(text=raw_text),
            errors=[PARSE_ERROR],
        )

    async def analyze(
        self,
        *,
        image: str | None = None,
        html: str | None = None,
        url: str | None = None,
    ) -> VisualAnalysisResult:
        """Score ``image`` (a data URL) and/or ``html``/``url`` visually."""
        logger.info(
            "Visual analysis input: image=%s html=%s url=%s",
            bool(image), bool(html), bool(url),
        )
        if self.client is None:
            logger.warning("GreenPT API key not configured. Skipping visual analysis.")
            return VisualAnalysisResult()

        content = self._build_content_parts(image=image, html=html, url=url)

        try:
            raw = await self.client.vision_completion(content=content)
        except APIStatusError as exc:
            logger.warning("GreenPT API error (%s): %s", exc.status_code, exc)
            return VisualAnalysisResult(errors=[f"GreenPT API returned {exc.status_code}"])
        except Exception as exc:
            logger.warning("GreenPT API call failed: %s", exc)
            return VisualAnalysisResult(errors=[UNAVAILABLE_ERROR])

        logger.debug("Agent %s raw output:\n%s", self.name, raw[:500])
        try:
            result = self.parse_output(raw)
        except Exception as exc:
            logger.warning("Visual analysis reply could not be parsed: %s", exc)
            return VisualAnalysisResult(
                text_extraction=TextExtraction(text=raw),
                errors=[PARSE_ERROR],
            )
        logger.info(
            "Visual analysis scores: overall=%s contrast=%s complexity=%s",
            result.overall_score,
            result.contrast.score if result.contrast else None,
            result.layout.complexity if result.layout else None,
        )
        return result

    def _build_content_parts(
        self,
        *,
        image: str | None,
        html: str | None,
        url: str | None,
    ) -> list[dict[str, Any]]:
        """Image block first (when present), then the text prompt."""
        parts: list[dict[str, Any]] = []
        if image:
            parts.append({"type": "image_url", "image_url": {"url": image}})

        prompt = ANALYSIS_PROMPT
        if url:
            prompt += URL_SECTION.format(url=url)
        if html:
            prompt += HTML_SECTION.format(
                limit=self.html_prompt_chars, html=html[: self.html_prompt_chars],
            )
        if image:
            prompt += IMAGE_SECTION
        prompt += CLOSING

        parts.append({"type": "text", "text": prompt})
        return parts
