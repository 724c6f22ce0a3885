"""
This module defines the BaseScraper abstract base class.

A scraper drives one browser page over one site's search results. The
pagination driver only ever talks to it through ``load``,
``extract_page_items``, ``has_next_page`` and ``advance_page``, so it never
needs to know which site it is crawling.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from aluguel.core.constants import ITEM_WAIT_TIMEOUT_MS
from aluguel.core.errors import ExtractionItemError, NavigationError
from aluguel.core.listing import Origin
from aluguel.core.raw import RawListing

logger = logging.getLogger(__name__)


@dataclass
class ItemResult:
    """Outcome of processing one card: a raw record or the reason it was skipped."""
    raw: Optional[RawListing] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.raw is not None


@dataclass
class PageExtraction:
    """Records extracted from one page, plus the reasons for skipped cards."""
    items: List[RawListing] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def add(self, result: ItemResult) -> None:
        if result.ok:
            self.items.append(result.raw)
        else:
            self.skipped.append(result.reason or "unknown reason")

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def signature(self) -> Tuple[str, ...]:
        """Links of the extracted items, used to detect a page that did not change."""
        return tuple(item.link for item in self.items)


class BaseScraper(ABC):
    """Abstract base class for a site scraper."""

    origin: Origin
    base_url: str = ""
    item_selector: str = ""
    wait_until: str = "domcontentloaded"

    def __init__(self, name: str, start_urls: Optional[Sequence[str]] = None):
        self.name = name
        self.start_urls: List[str] = list(start_urls or [])
        self.page: Optional[Page] = None

    def bind(self, page: Page) -> None:
        """
        Assigns the browser page this scraper owns for the rest of its run.

        Args:
            page: A page opened exclusively for this scraper.
        """
        self.page = page

    async def load(self, url: str) -> None:
        """
        Navigates to a start URL and waits for the configured load state.

        Raises:
            NavigationError: If the navigation fails or times out.
        """
        logger.info(f"[{self.name}] Navigating to {url}")
        try:
            await self._require_page().goto(url, wait_until=self.wait_until)
        except PlaywrightError as e:
            raise NavigationError(f"[{self.name}] Could not open {url}: {e}") from e

    async def extract_page_items(self) -> PageExtraction:
        """
        Extracts the raw records of every card on the current page.

        A card that cannot be parsed is skipped and its reason recorded;
        the remaining cards are still returned.
        """
        await self._wait_for_items()
        soup = await self._current_document()
        cards = self._select_cards(soup)

        extraction = PageExtraction()
        for card in cards:
            extraction.add(self._parse_card_safely(card))

        logger.info(
            f"[{self.name}] Extracted {len(extraction.items)} of {len(cards)} cards "
            f"({extraction.skipped_count} skipped)."
        )
        return extraction

    async def has_next_page(self) -> bool:
        """Reports whether the current page links to a further result page."""
        soup = await self._current_document()
        return self._has_next(soup)

    async def advance_page(self) -> bool:
        """
        Moves to the next result page and waits for it to settle.

        Returns:
            True on success, False if the navigation failed.
        """
        try:
            await self._go_to_next_page()
            return True
        except PlaywrightError as e:
            logger.warning(f"[{self.name}] Could not advance to the next page: {e}")
            return False

    async def complete_items(self, items: Iterable[RawListing]) -> PageExtraction:
        """
        Runs once after pagination to finish the collected records.

        Scrapers whose result cards carry every field return them unchanged.
        """
        return PageExtraction(items=list(items))

    def _parse_card_safely(self, card: Tag) -> ItemResult:
        try:
            return ItemResult(raw=self._parse_card(card))
        except ExtractionItemError as e:
            logger.warning(f"[{self.name}] Skipping card: {e}")
            return ItemResult(reason=str(e))
        except Exception as e:  # pylint: disable=broad-except
            logger.warning(f"[{self.name}] Error parsing card: {e}")
            return ItemResult(reason=f"{type(e).__name__}: {e}")

    def _select_cards(self, soup: BeautifulSoup) -> List[Tag]:
        return soup.select(self.item_selector)

    @abstractmethod
    def _parse_card(self, card: Tag) -> RawListing:
        """Turns one result card into a raw record. Raises ExtractionItemError if unusable."""
        raise NotImplementedError

    @abstractmethod
    def _has_next(self, soup: BeautifulSoup) -> bool:
        """Checks the site's next-page control in the parsed document."""
        raise NotImplementedError

    @abstractmethod
    async def _go_to_next_page(self) -> None:
        """Clicks the site's next-page control and awaits the resulting navigation."""
        raise NotImplementedError

    async def _wait_for_items(self) -> None:
        if not self.item_selector:
            return
        try:
            await self._require_page().wait_for_selector(
                self.item_selector, timeout=ITEM_WAIT_TIMEOUT_MS
            )
        except PlaywrightTimeoutError:
            logger.warning(f"[{self.name}] No cards matching '{self.item_selector}' appeared.")
        except PlaywrightError as e:
            raise NavigationError(f"[{self.name}] Page became unavailable: {e}") from e

    async def _current_document(self) -> BeautifulSoup:
        try:
            html = await self._require_page().content()
        except PlaywrightError as e:
            raise NavigationError(f"[{self.name}] Could not read the page: {e}") from e
        return BeautifulSoup(html, 'html.parser')

    def _require_page(self) -> Page:
        if self.page is None:
            raise NavigationError(f"[{self.name}] No browser page bound to the scraper.")
        return self.page

    def _absolute_url(self, href: Optional[str]) -> str:
        if not href:
            return ""
        return urljoin(self.base_url, href)

    @staticmethod
    def _text(element: Optional[Tag], default: str = "") -> str:
        """Returns the element's visible text with whitespace collapsed."""
        if element is None:
            return default
        text = element.get_text(" ", strip=True)
        return text or default

    def __str__(self):
        return f"Scraper({self.name})"
