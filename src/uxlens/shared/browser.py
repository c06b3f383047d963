"""Playwright browser manager: headless Chromium screenshots for ingestion."""

from __future__ import annotations

import base64
import logging
from types import TracebackType

from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

VIEWPORT = {"width": 1440, "height": 900}
NAVIGATION_TIMEOUT_MS = 30_000

# Chromium flags needed inside containers
_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]


class BrowserManager:
    """Manages a Playwright Chromium instance.

    Usage::

        async with BrowserManager() as bm:
            data_url = await bm.screenshot_data_url("https://example.com")
    """

    def __init__(self, *, executable_path: str | None = None) -> None:
        self._executable_path = executable_path
        self._pw: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "BrowserManager":
        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(
            headless=True,
            args=_LAUNCH_ARGS,
            executable_path=self._executable_path,
        )
        logger.info("Browser launched")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._browser:
            await self._browser.close()
        if self._pw:
            await self._pw.stop()
        logger.info("Browser closed")

    async def _new_page(self) -> Page:
        assert self._browser is not None, "BrowserManager not entered"
        return await self._browser.new_page(viewport=VIEWPORT, device_scale_factor=2)

    async def screenshot_data_url(self, url: str) -> str:
        """Navigate to URL and return a viewport PNG screenshot as a data URL."""
        page = await self._new_page()
        try:
            await page.goto(url, wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
            raw = await page.screenshot(type="png")
            logger.info("Captured screenshot of %s (%d bytes)", url, len(raw))
            return f"data:image/png;base64,{base64.b64encode(raw).decode()}"
        finally:
            await page.close()
