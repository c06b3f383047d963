"""Settings loader: optional YAML file, overridden by environment variables."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from uxlens.schemas.config import ServiceSettings

# Environment variable -> ServiceSettings field
_ENV_OVERRIDES = {
    "GREENPT_API_KEY": "api_key",
    "GREENPT_BASE_URL": "base_url",
    "GREENPT_MODEL": "model",
}


def load_settings(path: str | Path | None = None) -> ServiceSettings:
    """Build ServiceSettings from an optional YAML file plus the environment.

    Raises ``FileNotFoundError`` if ``path`` is given but doesn't exist and
    ``pydantic.ValidationError`` if the values are invalid. Environment
    variables win over file values.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        loaded = yaml.safe_load(path.read_text())
        # An empty file loads as None
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got {type(loaded).__name__}")
        raw.update(loaded)

    for env_name, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            raw[field] = value

    return ServiceSettings(**raw)
