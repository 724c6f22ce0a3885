"""
This module defines the PaginationDriver, the state machine that walks a
scraper through consecutive result pages.

    LOADING -> EXTRACTING -> CHECKING_NEXT -> ADVANCING -> EXTRACTING ...
                                   |              |
                                  DONE          FAILED

Both terminal states return every item collected so far. Besides the site's
own "no next page" signal, the run is bounded by a page cap, an optional
wall-clock deadline, and stall detection (a page repeating the previous
page's links).
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from aluguel.core.constants import Colors, DEFAULT_MAX_PAGES
from aluguel.core.errors import AluguelError, NavigationError, PaginationAdvanceError
from aluguel.core.raw import RawListing
from aluguel.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)


class PaginationState(Enum):
    """States of a single pagination run."""
    LOADING = "loading"
    EXTRACTING = "extracting"
    CHECKING_NEXT = "checking_next"
    ADVANCING = "advancing"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = (PaginationState.DONE, PaginationState.FAILED)


@dataclass
class PaginationCursor:
    """Mutable position of one pagination run."""
    url: str
    page_number: int = 0
    state: PaginationState = PaginationState.LOADING
    exhausted: bool = False
    failed: bool = False
    error: Optional[AluguelError] = None
    last_signature: Tuple[str, ...] = ()

    def finish(self) -> None:
        self.exhausted = True
        self.state = PaginationState.DONE

    def fail(self, error: AluguelError) -> None:
        self.failed = True
        self.error = error
        self.state = PaginationState.FAILED


@dataclass
class CrawlResult:
    """Everything a pagination run produced, whether it finished or failed."""
    url: str
    state: PaginationState
    items: List[RawListing] = field(default_factory=list)
    pages: int = 0
    advances: int = 0
    skipped: int = 0
    error: Optional[AluguelError] = None

    @property
    def failed(self) -> bool:
        return self.state is PaginationState.FAILED


class PaginationDriver:
    """Runs a scraper's extract / has-next / advance cycle until it stops."""

    def __init__(
        self,
        scraper: BaseScraper,
        max_pages: int = DEFAULT_MAX_PAGES,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initializes the driver.

        Args:
            scraper: The scraper to drive. It must already be bound to a page.
            max_pages: Maximum number of pages extracted per run.
            clock: Monotonic time source, compared against run deadlines.
        """
        self.scraper = scraper
        self.max_pages = max_pages
        self.clock = clock

    async def run(self, url: str, deadline: Optional[float] = None) -> CrawlResult:
        """
        Crawls every result page reachable from ``url``.

        Args:
            url: The search page to start from.
            deadline: Optional clock value after which no further page is requested.

        Returns:
            The collected items in page order and the terminal state.
        """
        cursor = PaginationCursor(url=url)
        result = CrawlResult(url=url, state=cursor.state)

        while cursor.state not in TERMINAL_STATES:
            try:
                await self._step(cursor, result, deadline)
            except NavigationError as e:
                cursor.fail(e)
            except Exception as e:  # pylint: disable=broad-except
                logger.exception(f"[{self.scraper.name}] Adapter error while {cursor.state.value}")
                error = PaginationAdvanceError(
                    f"Adapter error on page {cursor.page_number}: {type(e).__name__}: {e}"
                )
                error.__cause__ = e
                cursor.fail(error)

        result.state = cursor.state
        result.error = cursor.error
        self._log_outcome(result)
        return result

    async def _step(
        self, cursor: PaginationCursor, result: CrawlResult, deadline: Optional[float]
    ) -> None:
        if cursor.state is PaginationState.LOADING:
            await self.scraper.load(cursor.url)
            cursor.page_number = 1
            cursor.state = PaginationState.EXTRACTING

        elif cursor.state is PaginationState.EXTRACTING:
            extraction = await self.scraper.extract_page_items()
            signature = extraction.signature
            if signature and signature == cursor.last_signature:
                cursor.fail(PaginationAdvanceError(
                    f"Page {cursor.page_number} repeated the previous page; cursor stalled."
                ))
                return
            cursor.last_signature = signature
            result.items.extend(extraction.items)
            result.skipped += extraction.skipped_count
            result.pages += 1
            cursor.state = PaginationState.CHECKING_NEXT

        elif cursor.state is PaginationState.CHECKING_NEXT:
            if await self.scraper.has_next_page():
                cursor.state = PaginationState.ADVANCING
            else:
                cursor.finish()

        elif cursor.state is PaginationState.ADVANCING:
            bound_error = self._check_bounds(cursor, deadline)
            if bound_error is not None:
                cursor.fail(bound_error)
                return
            result.advances += 1
            if await self.scraper.advance_page():
                cursor.page_number += 1
                cursor.state = PaginationState.EXTRACTING
            else:
                cursor.fail(PaginationAdvanceError(
                    f"Could not advance past page {cursor.page_number}."
                ))

    def _check_bounds(
        self, cursor: PaginationCursor, deadline: Optional[float]
    ) -> Optional[PaginationAdvanceError]:
        if cursor.page_number >= self.max_pages:
            return PaginationAdvanceError(f"Page limit of {self.max_pages} reached.")
        if deadline is not None and self.clock() >= deadline:
            return PaginationAdvanceError("Source time budget exhausted.")
        return None

    def _log_outcome(self, result: CrawlResult) -> None:
        summary = (
            f"[{self.scraper.name}] {len(result.items)} item(s) from {result.pages} page(s) "
            f"of {result.url}"
        )
        if result.failed:
            logger.warning(
                f"{Colors.YELLOW}{summary}; stopped early: {result.error}{Colors.RESET}"
            )
        else:
            logger.info(f"{summary}.")
