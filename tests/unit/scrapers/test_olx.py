"""
Unit tests for the OlxScraper class.
"""
import unittest

from bs4 import BeautifulSoup

from aluguel.core.errors import ExtractionItemError
from aluguel.core.listing import Origin
from aluguel.scrapers.olx import NEXT_PAGE_SELECTOR, OlxScraper
from aluguel.services.normalizer import normalize
from tests.fakes import FakePage

SEARCH_URL = "https://www.olx.com.br/imoveis/aluguel/estado-mg/belo-horizonte-e-regiao"

FULL_CARD = """
<section class="olx-adcard">
  <a class="olx-adcard__link" href="https://mg.olx.com.br/belo-horizonte/imoveis/apartamento-1"
     title="Apartamento 2 quartos no Prado">Apartamento 2 quartos no Prado</a>
  <div class="olx-adcard__details">
    <div class="olx-adcard__detail" aria-label="2 quartos">2</div>
    <div class="olx-adcard__detail" aria-label="55 metros quadrados">55m²</div>
    <div class="olx-adcard__detail" aria-label="1 banheiro">1</div>
  </div>
  <h3 class="olx-adcard__price">R$ 1.200</h3>
  <div class="olx-adcard__price-info">IPTU R$ 80</div>
  <div class="olx-adcard__price-info">Condomínio R$ 300</div>
  <p class="olx-adcard__location">Prado, Belo Horizonte</p>
  <p class="olx-adcard__date">Hoje, 10:15</p>
</section>
"""

BARE_CARD = """
<section class="olx-adcard">
  <a class="olx-adcard__link" href="/imoveis/apartamento-2">Kitnet no Centro</a>
</section>
"""

LINKLESS_CARD = """
<section class="olx-adcard"><h3 class="olx-adcard__price">R$ 900</h3></section>
"""

NEXT_LINK = '<a rel="next" href="?o=2">Próxima página</a>'


def _page(*cards, next_link=True):
    return f"<html><body>{''.join(cards)}{NEXT_LINK if next_link else ''}</body></html>"


class TestOlxScraperParsing(unittest.TestCase):
    """Test cases for card parsing."""

    def setUp(self):
        """Set up test fixtures."""
        self.scraper = OlxScraper("olx")

    def _card(self, html):
        return BeautifulSoup(html, 'html.parser').select_one(self.scraper.item_selector)

    def test_parse_full_card(self):
        """Test that every card field is extracted."""
        raw = self.scraper._parse_card(self._card(FULL_CARD))

        self.assertEqual(raw.link, "https://mg.olx.com.br/belo-horizonte/imoveis/apartamento-1")
        self.assertEqual(raw.title, "Apartamento 2 quartos no Prado")
        self.assertEqual(raw.detail_labels[1], ("55 metros quadrados", "55m²"))
        self.assertEqual(raw.price_text, "R$ 1.200")
        self.assertEqual(raw.price_info_texts, ["IPTU R$ 80", "Condomínio R$ 300"])
        self.assertEqual(raw.location, "Prado, Belo Horizonte")
        self.assertEqual(raw.date_posted, "Hoje, 10:15")

    def test_full_card_normalizes(self):
        """Test the card's numbers once normalized."""
        listing = normalize(self.scraper._parse_card(self._card(FULL_CARD)))

        self.assertEqual(listing.origin, Origin.OLX)
        self.assertEqual((listing.bedrooms, listing.bathrooms, listing.area), (2, 1, 55))
        self.assertEqual(listing.total_price, 1580)

    def test_parse_bare_card_uses_defaults(self):
        """Test that missing sub-elements fall back to defaults."""
        raw = self.scraper._parse_card(self._card(BARE_CARD))

        self.assertEqual(raw.link, "https://www.olx.com.br/imoveis/apartamento-2")
        self.assertEqual(raw.title, "Kitnet no Centro")
        self.assertEqual(raw.detail_labels, [])
        self.assertEqual(raw.location, "N/A")
        self.assertEqual(raw.date_posted, "N/A")

    def test_card_without_link_is_rejected(self):
        """Test that a card without link cannot produce a record."""
        with self.assertRaises(ExtractionItemError):
            self.scraper._parse_card(self._card(LINKLESS_CARD))


class TestOlxScraperPagination(unittest.IsolatedAsyncioTestCase):
    """Test cases for page extraction and pagination."""

    def setUp(self):
        """Set up test fixtures."""
        self.page = FakePage(
            routes={SEARCH_URL: _page(FULL_CARD, LINKLESS_CARD, BARE_CARD)},
            sequence=[_page(BARE_CARD, next_link=False)],
        )
        self.scraper = OlxScraper("olx", [SEARCH_URL])
        self.scraper.bind(self.page)

    async def test_extract_page_skips_linkless_card(self):
        """Test that the bad card is skipped and the rest kept in order."""
        await self.scraper.load(SEARCH_URL)
        extraction = await self.scraper.extract_page_items()

        self.assertEqual(len(extraction.items), 2)
        self.assertEqual(extraction.skipped_count, 1)
        self.assertTrue(extraction.items[0].link.endswith("apartamento-1"))

    async def test_next_link_presence(self):
        """Test that the rel=next link drives has_next_page()."""
        await self.scraper.load(SEARCH_URL)
        self.assertTrue(await self.scraper.has_next_page())

        self.assertTrue(await self.scraper.advance_page())
        self.assertEqual(self.page.clicks, [NEXT_PAGE_SELECTOR])
        self.assertFalse(await self.scraper.has_next_page())

    async def test_advance_failure(self):
        """Test that a click error reports a failed advance."""
        self.page.fail_clicks = True
        self.assertFalse(await self.scraper.advance_page())


if __name__ == '__main__':
    unittest.main()
