"""
This module defines the ZapImoveisScraper class.
"""
import logging

from bs4 import BeautifulSoup, NavigableString, Tag

from aluguel.core.errors import ExtractionItemError
from aluguel.core.listing import Origin
from aluguel.core.raw import ZapImoveisRawListing
from aluguel.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)

NEXT_PAGE_SELECTOR = 'nav[data-testid="l-pagination"] button[aria-label="Próxima página"]'
PRICE_SELECTOR = 'div[data-cy="rp-cardProperty-price-txt"]'


class ZapImoveisScraper(BaseScraper):
    """Handles extraction and pagination of rental listings on zapimoveis.com.br."""

    origin = Origin.ZAP_IMOVEIS
    base_url = "https://www.zapimoveis.com.br"
    item_selector = 'li[data-cy="rp-property-cd"] > a'

    def _parse_card(self, card: Tag) -> ZapImoveisRawListing:
        """
        Parses a single property anchor.

        Args:
            card: The <a> element wrapping the whole card.

        Returns:
            The raw ZAP Imóveis record.

        Raises:
            ExtractionItemError: If the anchor has no href.
        """
        href = card.get('href')
        if not href:
            raise ExtractionItemError("ZAP Imóveis card without a link.")

        heading = card.select_one('h2[data-cy="rp-cardProperty-location-txt"]')
        street = card.select_one('p[data-cy="rp-cardProperty-street-txt"]')
        title = " - ".join(part for part in (self._text(heading), self._text(street)) if part)

        return ZapImoveisRawListing(
            link=self._absolute_url(href),
            title=title,
            location=self._extract_location(heading),
            bedrooms_text=self._feature(card, 'bedroomQuantity'),
            bathrooms_text=self._feature(card, 'bathroomQuantity'),
            area_text=self._feature(card, 'propertyArea'),
            price_text=self._text(card.select_one(f'{PRICE_SELECTOR} p.text-2-25')),
            fees_text=self._text(card.select_one(f'{PRICE_SELECTOR} p.text-1-75')),
        )

    def _feature(self, card: Tag, name: str) -> str:
        return self._text(card.select_one(f'li[data-cy="rp-cardProperty-{name}-txt"] h3'))

    @staticmethod
    def _extract_location(heading: Tag) -> str:
        """
        Returns the neighbourhood, which is the last text node of the card heading.

        The heading reads like '<span>Apartamento para alugar em</span> Prado, Belo Horizonte'.
        """
        if heading is None:
            return ""
        children = [
            child for child in heading.children
            if not (isinstance(child, NavigableString) and not child.strip())
        ]
        if len(children) < 2:
            return ""
        last = children[-1]
        text = last.get_text(" ", strip=True) if isinstance(last, Tag) else str(last)
        return text.strip()

    def _has_next(self, soup: BeautifulSoup) -> bool:
        button = soup.select_one(NEXT_PAGE_SELECTOR)
        return button is not None and not button.has_attr('disabled')

    async def _go_to_next_page(self) -> None:
        page = self._require_page()
        async with page.expect_navigation(wait_until=self.wait_until):
            await page.click(NEXT_PAGE_SELECTOR)
