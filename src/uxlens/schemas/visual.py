"""Pydantic models for the visual analysis service response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ContrastIssue(_WireModel):
    """A single low-contrast element reported by the service."""

    element: str | None = None
    ratio: float | None = None
    level: str | None = None  # "AA", "AAA", "fail"


class ContrastReport(_WireModel):
    score: float | None = None
    issues: list[ContrastIssue] | None = None


class LayoutReport(_WireModel):
    complexity: float | None = None  # lower is better
    focusable_elements: int | None = None
    visual_hierarchy: float | None = None  # higher is better


class TextExtraction(_WireModel):
    text: str | None = None
    headings: list[str] | None = None
    links: list[str] | None = None


class VisualAnalysisResult(_WireModel):
    """Structured visual signals for one screenshot/page.

    Every field is optional. A missing field means the service did not
    report it, which is not the same as a zero score. A non-empty
    ``errors`` list marks a partial or total failure.
    """

    contrast: ContrastReport | None = None
    layout: LayoutReport | None = None
    text_extraction: TextExtraction | None = None
    overall_score: float | None = None
    errors: list[str] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_wire(self) -> dict:
        """Serialize using the service's field names, omitting unknown values."""
        return self.model_dump(by_alias=True, exclude_none=True)
