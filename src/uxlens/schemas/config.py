"""Configuration schema: connection settings for the GreenPT service."""

from pydantic import BaseModel, field_validator

DEFAULT_BASE_URL = "https://api.greenpt.ai"
DEFAULT_MODEL = "green-l"


class ServiceSettings(BaseModel):
    """Settings for the visual analysis and recommendation services.

    Only ``api_key`` decides whether the remote stages run. With an empty
    key both stages degrade to their local behaviour; the base URL always
    has a usable default.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL

    # How much of the page HTML goes into the visual analysis prompt
    html_prompt_chars: int = 8000

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") or DEFAULT_BASE_URL

    @field_validator("html_prompt_chars")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("html_prompt_chars must be positive")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)
