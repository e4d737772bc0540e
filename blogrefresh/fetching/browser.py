"""Headless browser fetcher for script-rendered pages."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..config import BrowserConfig
from ..errors import FetchFailure, NavigationError, NetworkError
from ..extraction import Document
from .models import FetchResult

logger = logging.getLogger(__name__)

# Returns {title, href} for every matched anchor; href is resolved by the browser
LINKS_SCRIPT = """
els => els.map(a => ({
    title: (a.innerText || a.textContent || '').trim(),
    href: a.href || ''
}))
"""


class BrowserSession:
    """
    One headless Chromium instance for the lifetime of a pipeline run.

    Use as an async context manager; the browser is closed exactly once on
    exit. Every navigation gets its own page, closed on success and failure.
    """

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self.config = config or BrowserConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Launch the browser."""
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.launch_args,
            )
        except PlaywrightError:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.debug("Browser session started")

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
                logger.debug("Browser session closed")

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[Page]:
        """A fresh page with the configured user agent, always closed afterwards."""
        if self._browser is None:
            raise RuntimeError("Browser session is not started")
        page = await self._browser.new_page(user_agent=self.config.user_agent)
        try:
            yield page
        finally:
            try:
                await page.close()
            except PlaywrightError as e:
                logger.debug("Error closing page: %s", e)

    async def navigate(self, page: Page, url: str) -> None:
        """
        Navigate and wait for DOMContentLoaded only.

        Raises:
            NavigationError: Timeout or rejected navigation
            NetworkError: The server answered with an error status
        """
        timeout = self.config.navigation_timeout_ms
        try:
            response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout)
        except PlaywrightTimeoutError:
            raise NavigationError(url, f"Navigation timed out after {timeout} ms")
        except PlaywrightError as e:
            raise NavigationError(url, str(e).splitlines()[0] if str(e) else "Navigation failed")

        if response is not None and response.status >= 400:
            raise NetworkError(url, f"HTTP {response.status}")

    async def fetch(self, url: str) -> FetchResult:
        """Render a page and snapshot its DOM. Failures are logged and returned."""
        try:
            async with self.open_page() as page:
                await self.navigate(page, url)
                html = await page.content()
                final_url = page.url
        except FetchFailure as e:
            logger.warning("Failed to load %s: %s", url, e.reason)
            return FetchResult.failed(url, e)
        except PlaywrightError as e:
            logger.warning("Browser error on %s: %s", url, e)
            return FetchResult.failed(url, NavigationError(url, str(e)))

        return FetchResult.ok(url, Document(html, url=final_url))

    async def collect_links(self, url: str, selector: str) -> List[Dict[str, str]]:
        """
        Evaluate in-page over every anchor matching ``selector``.

        Raises:
            FetchFailure: The page could not be loaded
        """
        try:
            async with self.open_page() as page:
                await self.navigate(page, url)
                return await page.eval_on_selector_all(selector, LINKS_SCRIPT)
        except PlaywrightError as e:
            raise NavigationError(url, f"Link evaluation failed: {e}")
