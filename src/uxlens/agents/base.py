"""Base agent ABC and JSON extraction shared by the remote-backed stages."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from uxlens.shared.llm_client import DryRunClient, LLMClient

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


class BaseAgent(ABC):
    """Abstract base class for stages backed by the remote service.

    ``client`` is ``None`` when no credential is configured; subclasses
    then fall back to their local behaviour without touching the network.

    Subclasses implement:
    - ``name``: human-readable stage name
    - ``parse_output(raw_text)``: parses the model's text into a Pydantic model
    """

    def __init__(self, client: LLMClient | DryRunClient | None = None) -> None:
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for progress display."""

    @abstractmethod
    def parse_output(self, raw_text: str) -> BaseModel:
        """Parse the model's final text response into a Pydantic model."""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` wrapper, if any."""
    text = text.strip()
    text = _FENCE_OPEN_RE.sub("", text)
    return _FENCE_CLOSE_RE.sub("", text)


def extract_json(text: str) -> dict[str, Any]:
    """Extract the first balanced JSON object from text that may contain markdown fences.

    Raises ``ValueError`` (or ``json.JSONDecodeError``, a subclass) when
    no object can be decoded, including objects nested too deeply to decode.
    """
    text = strip_code_fences(text)

    # 1. Try direct parse (clean JSON response)
    if text.startswith("{"):
        try:
            obj = json.loads(text)
        except json.JSONDecodeError:
            # Might have trailing text, try raw_decode
            obj = None
        except RecursionError as exc:
            raise ValueError(
                f"JSON in model response is nested too deeply (length={len(text)})"
            ) from exc
        if isinstance(obj, dict):
            return obj

    # 2. Find the first { and decode a single object starting there
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = json.JSONDecoder().raw_decode(text, idx=start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        except RecursionError as exc:
            raise ValueError(
                f"JSON in model response is nested too deeply (length={len(text)})"
            ) from exc
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)

    raise ValueError(
        f"Could not extract JSON from model response (length={len(text)}). "
        f"First 300 chars: {text[:300]!r}"
    )
