"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from uxlens.shared.llm_client import LLMClient

# Short sentences, no headings, no paragraphs, three form fields
FORM_HTML = """\
<div class="card">
  <span>Fill in the fields below to finish setting up your account today.</span>
  <span>We only need a few details from you. Each one takes a moment.</span>
  <span>Your name lets us greet you. Your email lets us reach you.</span>
  <span>Your city helps us show local times. Nothing else is required here.</span>
  <span>You can change all of it later.</span>
  <input name="name" />
  <input name="email" />
  <input name="city" />
</div>
"""


@pytest.fixture(autouse=True)
def _clear_service_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real credentials out of the tests."""
    for name in ("GREENPT_API_KEY", "GREENPT_BASE_URL", "GREENPT_MODEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid settings YAML and return its path."""
    cfg = tmp_path / "uxlens.yml"
    cfg.write_text(
        """\
api_key: "file-key"
base_url: "https://greenpt.example.com/"
html_prompt_chars: 4000
"""
    )
    return cfg


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Return an LLMClient with a mocked OpenAI SDK underneath."""
    client = LLMClient.__new__(LLMClient)
    client.model = "green-l"
    client._client = AsyncMock()
    return client


@pytest.fixture
def form_html() -> str:
    return FORM_HTML
