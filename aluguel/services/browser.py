"""
This module defines the BrowserSession class, a thin wrapper around a
Playwright Chromium instance shared by all scrapers of a run.
"""
import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from aluguel.core.constants import DEFAULT_USER_AGENT, NAVIGATION_TIMEOUT_MS

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Owns one browser and one context; hands out a fresh page per scraper.

    Usage:
        async with BrowserSession(headless=True) as session:
            page = await session.new_page()
    """

    def __init__(
        self,
        headless: bool = True,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Launches Chromium and creates the shared browser context."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context(user_agent=self.user_agent)
        self._context.set_default_navigation_timeout(self.navigation_timeout_ms)
        logger.info(f"Browser started (headless={self.headless}).")

    async def new_page(self) -> Page:
        """Opens a new tab in the shared context."""
        if self._context is None:
            raise RuntimeError("BrowserSession.start() must be called before new_page().")
        return await self._context.new_page()

    async def close(self) -> None:
        """Closes the context, the browser and the Playwright driver."""
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed.")
