"""
This module defines the NetImoveisScraper class.

NetImóveis result cards only carry the link of each property, so the
scraper collects links while paginating and then visits every detail page,
one after another on the same browser page, to read the actual data.
"""
import logging
from typing import Iterable

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from aluguel.core.constants import ITEM_WAIT_TIMEOUT_MS
from aluguel.core.errors import ExtractionItemError, NavigationError
from aluguel.core.listing import Origin
from aluguel.core.raw import NetImoveisRawListing, RawListing
from aluguel.scrapers.base import BaseScraper, ItemResult, PageExtraction

logger = logging.getLogger(__name__)

NEXT_PAGE_SELECTOR = 'nav ul.pagination li.clnext'
DETAIL_TITLE_SELECTOR = 'h1#titulo'
PLACEHOLDER_LINK_MARKER = 'urldetalheimovel'


class NetImoveisScraper(BaseScraper):
    """Handles extraction and pagination of rental listings on netimoveis.com."""

    origin = Origin.NETIMOVEIS
    base_url = "https://www.netimoveis.com"
    item_selector = "article.card-imovel"
    wait_until = "networkidle"

    def _parse_card(self, card: Tag) -> NetImoveisRawListing:
        link_element = card.select_one('a.link-imovel[href]')
        if link_element is None:
            raise ExtractionItemError("NetImóveis card without a link.")
        link = self._absolute_url(link_element['href'])
        if PLACEHOLDER_LINK_MARKER in link.lower():
            raise ExtractionItemError(f"Placeholder detail link: {link}")
        return NetImoveisRawListing(link=link)

    def _has_next(self, soup: BeautifulSoup) -> bool:
        item = soup.select_one(NEXT_PAGE_SELECTOR)
        return item is not None and 'disabled' not in (item.get('class') or [])

    async def _go_to_next_page(self) -> None:
        # The pager is script driven, so wait for the network to calm down
        # instead of a navigation event.
        page = self._require_page()
        await page.click(NEXT_PAGE_SELECTOR)
        await page.wait_for_load_state(self.wait_until)

    async def complete_items(self, items: Iterable[RawListing]) -> PageExtraction:
        """
        Visits the detail page of every collected link.

        A detail page that fails to load or parse is skipped on its own.

        Args:
            items: Link-only records collected while paginating.

        Returns:
            The completed records and the reasons for skipped ones.
        """
        extraction = PageExtraction()
        for item in items:
            try:
                extraction.add(ItemResult(raw=await self._read_detail_page(item.link)))
            except (NavigationError, ExtractionItemError) as e:
                logger.warning(f"[{self.name}] Skipping detail page {item.link}: {e}")
                extraction.add(ItemResult(reason=str(e)))

        logger.info(
            f"[{self.name}] Read {len(extraction.items)} detail pages "
            f"({extraction.skipped_count} skipped)."
        )
        return extraction

    async def _read_detail_page(self, url: str) -> NetImoveisRawListing:
        await self.load(url)
        try:
            await self._require_page().wait_for_selector(
                DETAIL_TITLE_SELECTOR, timeout=ITEM_WAIT_TIMEOUT_MS
            )
        except PlaywrightTimeoutError as e:
            raise ExtractionItemError(f"Detail page never rendered its title: {url}") from e
        except PlaywrightError as e:
            raise NavigationError(f"[{self.name}] Page became unavailable: {e}") from e

        soup = await self._current_document()
        return self._parse_detail(soup, url)

    def _parse_detail(self, soup: BeautifulSoup, url: str) -> NetImoveisRawListing:
        """
        Reads a property detail page.

        Args:
            soup: The parsed detail page.
            url: The page's link, used as the record's identity.

        Returns:
            The raw NetImóveis record.
        """
        price_details = {}
        for detail in soup.select('section.details.prices div.detail'):
            name = self._text(detail.select_one('.detail-name')).lower()
            if name:
                price_details[name] = self._text(detail.select_one('.detail-value'))

        return NetImoveisRawListing(
            link=url,
            title=self._text(soup.select_one(DETAIL_TITLE_SELECTOR)),
            location=self._text(soup.select_one('section.section-title > div.text-gray')),
            price_details=price_details,
            feature_values=[self._text(value) for value in soup.select('.detail-value')],
        )
