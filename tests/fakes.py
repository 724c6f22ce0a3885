"""
In-memory stand-ins for the browser collaborator and helpers shared by tests.
"""
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from aluguel.core.listing import Listing, Origin
from aluguel.scrapers.base import PageExtraction


class FakePage:
    """
    Mimics the subset of playwright's Page used by the scrapers.

    ``routes`` maps URLs to HTML served by goto(); every click() replaces the
    current document with the next entry of ``sequence``.
    """

    def __init__(
        self,
        routes: Optional[Dict[str, str]] = None,
        sequence: Optional[Iterable[str]] = None,
    ):
        self.routes = dict(routes or {})
        self.sequence = list(sequence or [])
        self.html = "<html><body></body></html>"
        self.url = "about:blank"
        self.visited: List[str] = []
        self.clicks: List[str] = []
        self.failing_urls = set()
        self.missing_selectors = set()
        self.fail_clicks = False
        self.closed = False

    async def goto(self, url: str, wait_until: Optional[str] = None, **kwargs):
        self.visited.append(url)
        if url in self.failing_urls:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")
        self.url = url
        self.html = self.routes.get(url, "<html><body></body></html>")

    async def content(self) -> str:
        return self.html

    async def wait_for_selector(self, selector: str, timeout: Optional[float] = None, **kwargs):
        if selector in self.missing_selectors:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def click(self, selector: str, **kwargs):
        self.clicks.append(selector)
        if self.fail_clicks or not self.sequence:
            raise PlaywrightError(f"Element {selector} is not attached to the DOM")
        self.html = self.sequence.pop(0)

    @asynccontextmanager
    async def expect_navigation(self, **kwargs):
        yield

    async def wait_for_load_state(self, state: Optional[str] = None, **kwargs):
        return None

    async def close(self):
        self.closed = True


class FakeSession:
    """Hands out prepared pages in order, like BrowserSession.new_page()."""

    def __init__(self, pages: Iterable[FakePage]):
        self.pages = list(pages)
        self.opened: List[FakePage] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def new_page(self) -> FakePage:
        page = self.pages.pop(0) if self.pages else FakePage()
        self.opened.append(page)
        return page


class RawStub:
    """Minimal raw record carrying only a link, for driver tests."""

    def __init__(self, link: str):
        self.link = link


class StubScraper:
    """
    Scripted scraper exposing the capability set the pagination driver uses.

    ``pages`` holds the links of each page; ``has_next`` answers are consumed
    in order, and ``advance_results`` likewise (True by default).
    """

    def __init__(
        self,
        pages: List[List[str]],
        has_next: Iterable[bool],
        advance_results: Optional[Iterable[bool]] = None,
        name: str = "stub",
    ):
        self.name = name
        self.pages = pages
        self.has_next_answers = list(has_next)
        self.advance_results = list(advance_results or [])
        self.page_index = 0
        self.loads: List[str] = []
        self.advance_calls = 0
        self.load_error: Optional[Exception] = None

    async def load(self, url: str) -> None:
        self.loads.append(url)
        if self.load_error is not None:
            raise self.load_error

    async def extract_page_items(self) -> PageExtraction:
        links = self.pages[min(self.page_index, len(self.pages) - 1)]
        return PageExtraction(items=[RawStub(link) for link in links])

    async def has_next_page(self) -> bool:
        return self.has_next_answers.pop(0) if self.has_next_answers else False

    async def advance_page(self) -> bool:
        self.advance_calls += 1
        ok = self.advance_results.pop(0) if self.advance_results else True
        if ok:
            self.page_index += 1
        return ok


def make_listing(link: str = "https://example.com/imovel/1", **kwargs) -> Listing:
    """Creates a Listing with typical values, overridable per field."""
    defaults = {
        "origin": Origin.OLX,
        "title": "Apartamento 2 quartos",
        "location": "Centro, Belo Horizonte",
        "bedrooms": 2,
        "bathrooms": 1,
        "area": 50,
        "price": 1200,
        "iptu": 100,
        "condominio": 200,
    }
    defaults.update(kwargs)
    return Listing(link=link, **defaults)
