"""
This module defines the OlxScraper class.
"""
import logging

from bs4 import BeautifulSoup, Tag

from aluguel.core.constants import NOT_AVAILABLE
from aluguel.core.errors import ExtractionItemError
from aluguel.core.listing import Origin
from aluguel.core.raw import OlxRawListing
from aluguel.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)

NEXT_PAGE_SELECTOR = 'a[rel="next"]'


class OlxScraper(BaseScraper):
    """Handles extraction and pagination of rental listings on olx.com.br."""

    origin = Origin.OLX
    base_url = "https://www.olx.com.br"
    item_selector = "section.olx-adcard"

    def _parse_card(self, card: Tag) -> OlxRawListing:
        """
        Parses a single ad card.

        Args:
            card: The card's <section class="olx-adcard"> element.

        Returns:
            The raw OLX record.

        Raises:
            ExtractionItemError: If the card has no link.
        """
        link_element = card.select_one('a.olx-adcard__link[href]')
        if link_element is None:
            raise ExtractionItemError("OLX card without a link.")

        title = link_element.get('title') or self._text(link_element)
        detail_labels = [
            (detail.get('aria-label', ''), self._text(detail))
            for detail in card.select('.olx-adcard__detail')
        ]

        return OlxRawListing(
            link=self._absolute_url(link_element['href']),
            title=title,
            detail_labels=detail_labels,
            price_text=self._text(card.select_one('h3.olx-adcard__price')),
            price_info_texts=[
                self._text(info) for info in card.select('div.olx-adcard__price-info')
            ],
            location=self._text(card.select_one('p.olx-adcard__location'), NOT_AVAILABLE),
            date_posted=self._text(card.select_one('p.olx-adcard__date'), NOT_AVAILABLE),
        )

    def _has_next(self, soup: BeautifulSoup) -> bool:
        return soup.select_one(NEXT_PAGE_SELECTOR) is not None

    async def _go_to_next_page(self) -> None:
        page = self._require_page()
        async with page.expect_navigation(wait_until=self.wait_until):
            await page.click(NEXT_PAGE_SELECTOR)
