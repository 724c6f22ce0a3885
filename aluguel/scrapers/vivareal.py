"""
This module defines the VivaRealScraper class.
"""
import logging

from bs4 import BeautifulSoup, Tag

from aluguel.core.constants import NOT_AVAILABLE
from aluguel.core.errors import ExtractionItemError
from aluguel.core.listing import Origin
from aluguel.core.raw import VivaRealRawListing
from aluguel.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)

NEXT_PAGE_SELECTOR = 'button[data-testid="next-page"]'


class VivaRealScraper(BaseScraper):
    """Handles extraction and pagination of rental listings on vivareal.com.br."""

    origin = Origin.VIVA_REAL
    base_url = "https://www.vivareal.com.br"
    item_selector = 'li[data-cy="rp-property-cd"]'

    def _parse_card(self, card: Tag) -> VivaRealRawListing:
        """
        Parses a single property card.

        Args:
            card: The card's <li data-cy="rp-property-cd"> element.

        Returns:
            The raw Viva Real record.

        Raises:
            ExtractionItemError: If the card has no link.
        """
        link_element = card.select_one('a[href]')
        if link_element is None:
            raise ExtractionItemError("Viva Real card without a link.")

        details = {
            item['data-cy']: self._text(item)
            for item in card.select('li[data-cy^="rp-cardProperty-"]')
        }

        price_text = ""
        fee_texts = []
        price_container = card.select_one('div[data-cy="rp-cardProperty-price-txt"]')
        if price_container is not None:
            price_text = self._text(price_container.select_one('p.text-2-25'))
            fee_texts = [self._text(fee) for fee in price_container.select('p.text-1-75')]

        return VivaRealRawListing(
            link=self._absolute_url(link_element['href']),
            title=self._text(card.select_one('h2[data-cy="rp-cardProperty-location-txt"]')),
            street=self._text(
                card.select_one('p[data-cy="rp-cardProperty-street-txt"]'), NOT_AVAILABLE
            ),
            details=details,
            price_text=price_text,
            fee_texts=fee_texts,
        )

    def _has_next(self, soup: BeautifulSoup) -> bool:
        button = soup.select_one(NEXT_PAGE_SELECTOR)
        return button is not None and not button.has_attr('disabled')

    async def _go_to_next_page(self) -> None:
        page = self._require_page()
        async with page.expect_navigation(wait_until=self.wait_until):
            await page.click(NEXT_PAGE_SELECTOR)
