"""
Business logic services for the aluguel aggregator.
"""
from aluguel.services.aggregator import AggregationResult, ListingAggregator
from aluguel.services.browser import BrowserSession
from aluguel.services.normalizer import normalize, normalize_batch
from aluguel.services.pagination import CrawlResult, PaginationDriver, PaginationState
from aluguel.services.report import ReportRenderer
from aluguel.services.runner import ScraperRunner, SourceReport
from aluguel.services.store import BufferStore

__all__ = [
    "AggregationResult",
    "ListingAggregator",
    "BrowserSession",
    "normalize",
    "normalize_batch",
    "CrawlResult",
    "PaginationDriver",
    "PaginationState",
    "ReportRenderer",
    "ScraperRunner",
    "SourceReport",
    "BufferStore",
]
