"""Ingestion: turn an uploaded image and/or a URL into analysis inputs.

Collects a screenshot data URL and the page HTML. Problems that still
leave something to analyze are reported as warnings on the result
rather than raised.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import re
from pathlib import Path
from typing import Awaitable, Callable

import httpx

from uxlens.errors import MissingInputError
from uxlens.schemas.pipeline import IngestMetadata, IngestResult
from uxlens.shared.browser import BrowserManager

logger = logging.getLogger(__name__)

MAX_HTML_CHARS = 40_000
FETCH_TIMEOUT = 30.0

FETCH_HEADERS = {
    "user-agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

NO_SCREENSHOT_NOTE = (
    "No screenshot detected. You can still run textual analysis, "
    "but visual metrics will be limited."
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

Screenshotter = Callable[[str], Awaitable[str]]
"""Signature: async (url) -> image data URL."""


def to_data_url(raw: bytes, content_type: str | None) -> str:
    return f"data:{content_type or 'image/png'};base64,{base64.b64encode(raw).decode()}"


def normalize_url(raw: str) -> str | None:
    """Add a missing ``https://`` scheme; ``None`` if the result isn't a usable URL."""
    candidate = raw.strip()
    if not candidate:
        return None
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"
    try:
        parsed = httpx.URL(candidate)
    except httpx.InvalidURL:
        return None
    if not parsed.host:
        return None
    return str(parsed)


async def capture_screenshot(url: str) -> str:
    """Default screenshotter: one headless Chromium session per call."""
    async with BrowserManager() as browser:
        return await browser.screenshot_data_url(url)


def _read_upload(path: Path, result: IngestResult) -> None:
    raw = path.read_bytes()
    content_type, _ = mimetypes.guess_type(path.name)
    result.screenshot_data_url = to_data_url(raw, content_type)
    result.metadata.source = "upload"
    result.metadata.bytes = len(raw)
    logger.info("Loaded uploaded screenshot %s (%d bytes)", path, len(raw))


async def _fetch_url(
    url: str,
    result: IngestResult,
    *,
    http_client: httpx.AsyncClient,
    screenshotter: Screenshotter | None,
) -> None:
    logger.info("Fetching URL: %s", url)
    try:
        response = await http_client.get(url, headers=FETCH_HEADERS)
        if not response.is_success:
            raise httpx.HTTPStatusError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                request=response.request,
                response=response,
            )
    except httpx.HTTPError as exc:
        logger.warning("Fetch attempt failed for %s: %s", url, exc)
        result.warnings.append(
            f"Could not fetch {url}: {exc}. This might be due to access "
            "restrictions or network issues."
        )
        result.metadata.source = result.metadata.source or "placeholder"
        result.metadata.url = url
        result.error = f"Failed to fetch URL: {exc}"
        return

    content_type = response.headers.get("content-type", "")
    logger.info("Response status: %d, Content-Type: %s", response.status_code, content_type)
    result.metadata.source = result.metadata.source or "url"
    result.metadata.url = url
    result.metadata.status = response.status_code
    result.metadata.content_type = content_type

    if content_type.startswith("image/"):
        raw = response.content
        result.screenshot_data_url = to_data_url(raw, content_type.split(";")[0])
        result.metadata.bytes = len(raw)
        logger.info("Fetched image: %d bytes", len(raw))
        return

    result.fetched_html = response.text[:MAX_HTML_CHARS]
    logger.info("Fetched HTML: %d characters", len(result.fetched_html))

    if screenshotter is None:
        return
    try:
        result.screenshot_data_url = await screenshotter(url)
    except Exception as exc:
        logger.warning("Screenshot generation failed for %s: %s", url, exc)
        result.warnings.append(
            f"Could not generate screenshot: {exc}. HTML analysis will still work."
        )


async def ingest(
    *,
    url: str | None = None,
    screenshot_path: str | Path | None = None,
    http_client: httpx.AsyncClient | None = None,
    screenshotter: Screenshotter | None = capture_screenshot,
) -> IngestResult:
    """Gather a screenshot and/or HTML for analysis.

    A page fetched from ``url`` is also screenshotted with ``screenshotter``
    (pass ``None`` to skip). Raises ``MissingInputError`` when neither
    ``url`` nor ``screenshot_path`` is given.
    """
    raw_url = (url or "").strip()
    if not screenshot_path and not raw_url:
        raise MissingInputError("Provide a screenshot or a URL to ingest.")

    result = IngestResult(metadata=IngestMetadata())

    if screenshot_path:
        _read_upload(Path(screenshot_path), result)

    if raw_url:
        normalized = normalize_url(raw_url)
        if normalized is None:
            result.warnings.append("Provided URL is invalid. Skipping remote fetch.")
        elif http_client is not None:
            await _fetch_url(
                normalized, result, http_client=http_client, screenshotter=screenshotter,
            )
        else:
            async with httpx.AsyncClient(follow_redirects=True, timeout=FETCH_TIMEOUT) as http:
                await _fetch_url(
                    normalized, result, http_client=http, screenshotter=screenshotter,
                )

    if not result.screenshot_data_url:
        result.note = NO_SCREENSHOT_NOTE

    return result
