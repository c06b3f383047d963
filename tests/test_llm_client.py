"""Tests for the LLMClient: mock the OpenAI SDK underneath."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from uxlens.schemas.config import ServiceSettings
from uxlens.shared.llm_client import DryRunClient, LLMClient


def _make_text_response(text: str | None):
    """Create a mock OpenAI response with text only."""
    message = SimpleNamespace(content=text, tool_calls=None)
    choice = SimpleNamespace(message=message)
    return SimpleNamespace(choices=[choice])


class TestConstruction:
    def test_points_sdk_at_v1_without_retries(self) -> None:
        client = LLMClient(ServiceSettings(api_key="k", base_url="https://greenpt.example.com/"))
        assert client.model == "green-l"
        assert str(client._client.base_url).rstrip("/") == "https://greenpt.example.com/v1"
        assert client._client.max_retries == 0
        assert client._client.api_key == "k"


class TestVisionCompletion:
    @pytest.mark.asyncio
    async def test_sends_one_user_message_with_parts(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response('{"overallScore": 80}')
        )
        parts = [
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
            {"type": "text", "text": "analyze"},
        ]

        result = await mock_llm_client.vision_completion(content=parts)

        assert result == '{"overallScore": 80}'
        kwargs = mock_llm_client._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "green-l"
        assert kwargs["stream"] is False
        assert kwargs["messages"] == [{"role": "user", "content": parts}]
        assert "response_format" not in kwargs

    @pytest.mark.asyncio
    async def test_missing_content_is_empty_string(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response(None)
        )
        assert await mock_llm_client.vision_completion(content=[]) == ""

    @pytest.mark.asyncio
    async def test_no_choices_is_empty_string(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(choices=[])
        )
        assert await mock_llm_client.vision_completion(content=[]) == ""


class TestSimpleCompletion:
    @pytest.mark.asyncio
    async def test_json_mode_and_temperature(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response("{}")
        )

        result = await mock_llm_client.simple_completion(user_message="hi", temperature=0.7)

        assert result == "{}"
        kwargs = mock_llm_client._client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["temperature"] == 0.7
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            side_effect=RuntimeError("connection reset")
        )
        with pytest.raises(RuntimeError, match="connection reset"):
            await mock_llm_client.simple_completion(user_message="hi")


class TestDryRunClient:
    @pytest.mark.asyncio
    async def test_returns_canned_json(self) -> None:
        client = DryRunClient()
        visual = json.loads(await client.vision_completion(content=[]))
        synthesis = json.loads(await client.simple_completion(user_message="x"))
        assert visual["overallScore"] == 76
        assert synthesis["overallScore"] == 74
        assert len(synthesis["recommendations"]) == 2
