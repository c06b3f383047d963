"""Async client for the GreenPT chat-completions API.

GreenPT speaks the OpenAI wire protocol, so this wraps ``AsyncOpenAI``
pointed at the GreenPT base URL. Each call is made once: the SDK's
built-in retries are disabled and failures propagate to the caller,
which decides how to degrade.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from uxlens.schemas.config import ServiceSettings

logger = logging.getLogger(__name__)

# Path appended to the configured base URL; the SDK adds /chat/completions
API_PREFIX = "/v1"


class LLMClient:
    """Thin async wrapper around the OpenAI SDK.

    Provides two methods:
    - ``vision_completion``: one user message made of content parts
      (image and text blocks).
    - ``simple_completion``: one text-only user message.
    """

    def __init__(self, settings: ServiceSettings) -> None:
        self.model = settings.model
        self._client = AsyncOpenAI(
            api_key=settings.api_key,
            base_url=f"{settings.base_url}{API_PREFIX}",
            max_retries=0,
        )

    async def vision_completion(
        self,
        *,
        content: list[dict[str, Any]],
        json_mode: bool = False,
    ) -> str:
        """Single request/response with multipart content (text + images).

        ``content`` is a list of OpenAI content parts, e.g.:
            [{"type": "image_url", "image_url": {...}}, {"type": "text", "text": "..."}]
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "stream": False,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug("Vision completion with %d content parts", len(content))
        response = await self._client.chat.completions.create(**kwargs)
        return _first_message_text(response)

    async def simple_completion(
        self,
        *,
        user_message: str,
        json_mode: bool = True,
        temperature: float | None = None,
    ) -> str:
        """Single text request/response.

        When ``json_mode`` is True (default) the service is asked for a
        JSON object response.
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": user_message}],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**kwargs)
        return _first_message_text(response)


def _first_message_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""


# ======================================================================
# Dry-run mock client (zero API calls)
# ======================================================================

_DRY_RUN_JSON: dict[str, str] = {
    "visual": json.dumps({
        "contrast": {
            "score": 72,
            "issues": [{"element": "Footer links on light gray", "ratio": 3.1, "level": "fail"}],
        },
        "layout": {"complexity": 38, "focusableElements": 14, "visualHierarchy": 81},
        "textExtraction": {
            "text": "Welcome back. Pick up where you left off.",
            "headings": ["Welcome back"],
            "links": ["Dashboard", "Settings", "Help"],
        },
        "overallScore": 76,
    }),
    "recommendations": json.dumps({
        "overallScore": 74,
        "topIssues": [
            {"metric": "Memory Load", "issue": "Long form without progress cues", "severity": "medium"},
        ],
        "recommendations": [
            {"title": "Add a progress indicator", "description": "Show which step of the form the user is on.",
             "impact": "high", "effort": "quick"},
            {"title": "Raise footer contrast", "description": "Darken footer link text to pass 4.5:1.",
             "impact": "medium", "effort": "quick"},
        ],
        "summary": "The interface is approachable. Chunking the form and lifting contrast are the main wins.",
    }),
}


class DryRunClient:
    """Drop-in replacement for LLMClient that makes zero API calls.

    Returns canned JSON so the whole pipeline, including response
    parsing, runs offline.
    """

    model = "dry-run"

    async def vision_completion(
        self,
        *,
        content: list[dict[str, Any]],
        json_mode: bool = False,
    ) -> str:
        logger.info("[dry-run] Vision completion (%d content parts)", len(content))
        return _DRY_RUN_JSON["visual"]

    async def simple_completion(
        self,
        *,
        user_message: str,
        json_mode: bool = True,
        temperature: float | None = None,
    ) -> str:
        logger.info("[dry-run] Text completion (%d chars)", len(user_message))
        return _DRY_RUN_JSON["recommendations"]
