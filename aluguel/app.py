"""
Main application module for the aggregator.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError

from aluguel.core.config import Config
from aluguel.core.errors import AggregationIOError
from aluguel.scrapers import BaseScraper
from aluguel.services.aggregator import AggregationResult, ListingAggregator
from aluguel.services.browser import BrowserSession
from aluguel.services.report import ReportPaths, ReportRenderer
from aluguel.services.runner import ScraperRunner, SourceReport
from aluguel.services.store import BufferStore

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What a complete run produced."""
    sources: Dict[str, SourceReport] = field(default_factory=dict)
    aggregation: Optional[AggregationResult] = None
    report: Optional[ReportPaths] = None
    aggregation_error: Optional[AggregationIOError] = None

    @property
    def failed_sources(self) -> List[str]:
        return [name for name, report in self.sources.items() if report.failed]


class App:
    """The main application class orchestrating crawl, aggregation and report."""

    def __init__(
        self,
        config: Config,
        scrapers: List[BaseScraper],
        store: BufferStore,
        renderer: ReportRenderer,
        aggregator: Optional[ListingAggregator] = None,
        session_factory: Callable[..., BrowserSession] = BrowserSession,
    ):
        """
        Initialize the App with configuration and components.

        Args:
            config: Configuration object with application settings.
            scrapers: Scraper instances to run.
            store: Buffer store shared by the crawl and aggregation stages.
            renderer: Writer of the canonical output and the HTML report.
            aggregator: Aggregator to use; built from the config when omitted.
            session_factory: Callable returning a browser session context manager.
        """
        self.config = config
        self.scrapers = scrapers
        self.store = store
        self.renderer = renderer
        self.aggregator = aggregator or ListingAggregator.from_config(config)
        self.session_factory = session_factory

    async def run(
        self, crawl: bool = True, fresh: bool = False, clear_buffer: bool = False
    ) -> RunSummary:
        """
        Runs the whole pipeline.

        Aggregation always runs once crawling has settled, whatever the
        outcome of individual sources.

        Args:
            crawl: Run the scrapers before aggregating.
            fresh: Clear the buffer before crawling.
            clear_buffer: Clear the buffer after a successful aggregation.

        Returns:
            The per-source reports and the aggregation outcome.
        """
        summary = RunSummary()

        if crawl:
            if fresh:
                self.store.clear()
            summary.sources = await self.crawl()
            if summary.failed_sources:
                logger.warning(
                    f"Sources {', '.join(summary.failed_sources)} failed. "
                    "Their partial results are kept."
                )

        try:
            summary.aggregation, summary.report = self.aggregate()
        except AggregationIOError as e:
            logger.error(f"Aggregation failed, buffer left untouched: {e}")
            summary.aggregation_error = e
            return summary

        if clear_buffer:
            self.store.clear()
        return summary

    async def crawl(self) -> Dict[str, SourceReport]:
        """Runs every scraper in one shared browser session."""
        logger.info(f"Crawling {len(self.scrapers)} source(s)...")
        try:
            async with self.session_factory(
                headless=self.config.headless,
                navigation_timeout_ms=self.config.navigation_timeout_ms,
            ) as session:
                runner = ScraperRunner(
                    self.scrapers,
                    session,
                    self.store,
                    max_pages=self.config.max_pages,
                    source_timeout=self.config.source_timeout,
                )
                return await runner.run()
        except PlaywrightError as e:
            logger.error(f"Browser session failed: {e}")
            return {
                scraper.name: SourceReport(name=scraper.name, failed=True, errors=[str(e)])
                for scraper in self.scrapers
            }

    def aggregate(self):
        """
        Aggregates the buffer and renders the report.

        Returns:
            A tuple of (AggregationResult, ReportPaths).

        Raises:
            AggregationIOError: If a buffered batch cannot be read.
        """
        result = self.aggregator.run(self.store)
        paths = self.renderer.render(result.listings)
        return result, paths
