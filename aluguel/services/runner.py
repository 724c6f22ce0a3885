"""
This module defines the ScraperRunner class, which runs every configured
scraper concurrently and persists what each of them collected.

Each scraper gets its own asyncio task and its own browser page. The tasks
are awaited with settle-all semantics: a source that fails, even entirely,
never cancels or starves the others, and whatever it collected before
failing is still written to the buffer store.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError

from aluguel.core.constants import Colors, DEFAULT_MAX_PAGES, DEFAULT_SOURCE_TIMEOUT_SECONDS
from aluguel.scrapers import BaseScraper
from aluguel.services.browser import BrowserSession
from aluguel.services.normalizer import normalize_batch
from aluguel.services.pagination import PaginationDriver
from aluguel.services.store import BufferStore

logger = logging.getLogger(__name__)


@dataclass
class SourceReport:
    """Summary of one source's run."""
    name: str
    listings: int = 0
    pages: int = 0
    skipped: int = 0
    failed: bool = False
    errors: List[str] = field(default_factory=list)
    batches: List[Path] = field(default_factory=list)


class ScraperRunner:
    # pylint: disable=too-few-public-methods
    """Manages the concurrent execution of scrapers and collects their results."""

    def __init__(
        self,
        scrapers: List[BaseScraper],
        session: BrowserSession,
        store: BufferStore,
        max_pages: int = DEFAULT_MAX_PAGES,
        source_timeout: Optional[float] = DEFAULT_SOURCE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initializes the scraper runner.

        Args:
            scrapers: Scraper instances to run, each with its start URLs.
            session: Browser session handing out one page per scraper.
            store: Buffer store receiving one batch per start URL.
            max_pages: Page cap per start URL.
            source_timeout: Wall-clock budget per source in seconds, or None.
            clock: Monotonic time source.
        """
        self.scrapers = scrapers
        self.session = session
        self.store = store
        self.max_pages = max_pages
        self.source_timeout = source_timeout
        self.clock = clock

    async def run(self) -> Dict[str, SourceReport]:
        """
        Executes all scrapers concurrently and waits for every one to settle.

        Returns:
            A dictionary mapping scraper names to their reports.
        """
        outcomes = await asyncio.gather(
            *(self._run_source(scraper) for scraper in self.scrapers),
            return_exceptions=True,
        )

        reports: Dict[str, SourceReport] = {}
        for scraper, outcome in zip(self.scrapers, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"{Colors.RED}Scraper '{scraper.name}' crashed: {outcome!r}{Colors.RESET}"
                )
                reports[scraper.name] = SourceReport(
                    name=scraper.name, failed=True, errors=[repr(outcome)]
                )
            else:
                reports[scraper.name] = outcome
        return reports

    async def _run_source(self, scraper: BaseScraper) -> SourceReport:
        report = SourceReport(name=scraper.name)
        deadline = self.clock() + self.source_timeout if self.source_timeout else None

        page = await self.session.new_page()
        scraper.bind(page)
        try:
            # Batches from an earlier run of this source are replaced, not merged.
            await asyncio.to_thread(self.store.clear, scraper.name)
            for url in scraper.start_urls:
                if deadline is not None and self.clock() >= deadline:
                    report.failed = True
                    report.errors.append(f"Time budget exhausted before {url}")
                    break
                await self._crawl_start_url(scraper, url, deadline, report)
        finally:
            await self._close_page(scraper, page)

        self._log_report(report)
        return report

    async def _crawl_start_url(
        self, scraper: BaseScraper, url: str, deadline: Optional[float], report: SourceReport
    ) -> None:
        driver = PaginationDriver(scraper, max_pages=self.max_pages, clock=self.clock)
        crawl = await driver.run(url, deadline=deadline)
        completed = await scraper.complete_items(crawl.items)
        listings, rejected = normalize_batch(completed.items)

        report.pages += crawl.pages
        report.skipped += crawl.skipped + completed.skipped_count + rejected
        report.listings += len(listings)
        if crawl.failed:
            report.failed = True
            report.errors.append(str(crawl.error))

        path = await asyncio.to_thread(self.store.write, scraper.name, listings)
        report.batches.append(path)

    @staticmethod
    async def _close_page(scraper: BaseScraper, page) -> None:
        try:
            await page.close()
        except PlaywrightError as e:
            logger.debug(f"[{scraper.name}] Page was already closed: {e}")

    @staticmethod
    def _log_report(report: SourceReport) -> None:
        summary = (
            f"Scraper '{report.name}' returned {report.listings} listing(s) "
            f"from {report.pages} page(s), {report.skipped} skipped"
        )
        if report.failed and report.listings == 0:
            logger.error(f"{Colors.RED}{summary}; failed: {'; '.join(report.errors)}{Colors.RESET}")
        elif report.failed:
            logger.warning(
                f"{Colors.YELLOW}{summary}; partial: {'; '.join(report.errors)}{Colors.RESET}"
            )
        else:
            logger.info(f"{Colors.GREEN}{summary}.{Colors.RESET}")
