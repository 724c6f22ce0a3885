"""
This module defines the ListingAggregator class, which merges the batches of
all sources into the final, ranked result.

The steps always run in this order: flatten, deduplicate by link (first
occurrence wins), filter by total price and area, and a stable sort by area.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, TYPE_CHECKING

from aluguel.core.config import Config
from aluguel.core.constants import (
    Colors,
    DEFAULT_MAX_TOTAL,
    DEFAULT_MIN_AREA,
    DEFAULT_MIN_TOTAL,
    DEFAULT_SORT_ORDER,
)
from aluguel.core.listing import Listing

if TYPE_CHECKING:
    from aluguel.services.store import BufferStore

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """The canonical listings plus counters describing how they were obtained."""
    listings: List[Listing] = field(default_factory=list)
    total: int = 0
    duplicates: int = 0
    filtered: int = 0


class ListingAggregator:
    """Encapsulates deduplication, filtering and ordering of listings."""

    def __init__(
        self,
        min_total: int = DEFAULT_MIN_TOTAL,
        max_total: int = DEFAULT_MAX_TOTAL,
        min_area: int = DEFAULT_MIN_AREA,
        sort_order: str = DEFAULT_SORT_ORDER,
    ):
        """
        Initialize the aggregator.

        Args:
            min_total: Lowest accepted total price, inclusive.
            max_total: Highest accepted total price, inclusive.
            min_area: Smallest accepted area, inclusive. An area of 0 is never accepted.
            sort_order: 'asc' or 'desc' ordering by area.
        """
        self.min_total = min_total
        self.max_total = max_total
        self.min_area = min_area
        self.descending = sort_order == 'desc'

    @classmethod
    def from_config(cls, config: Config) -> ListingAggregator:
        """Builds an aggregator from the 'filters' section of the configuration."""
        filters = config.filters
        return cls(
            min_total=filters['min_total'],
            max_total=filters['max_total'],
            min_area=filters['min_area'],
            sort_order=filters['sort_order'],
        )

    def aggregate(self, batches: Iterable[Iterable[Listing]]) -> AggregationResult:
        """
        Produces the canonical listing sequence from any number of batches.

        Args:
            batches: Listing batches in discovery order.

        Returns:
            The deduplicated, filtered and sorted listings with counters.
        """
        flat = self.flatten(batches)
        unique = self.deduplicate(flat)
        kept = [listing for listing in unique if not self.is_filtered(listing)]
        ordered = self.sort(kept)

        result = AggregationResult(
            listings=ordered,
            total=len(flat),
            duplicates=len(flat) - len(unique),
            filtered=len(unique) - len(kept),
        )
        logger.info(
            f"{Colors.GREEN}Aggregated {len(ordered)} listing(s){Colors.RESET} "
            f"from {result.total} ({result.duplicates} duplicate(s), "
            f"{result.filtered} filtered)."
        )
        return result

    def run(self, store: BufferStore) -> AggregationResult:
        """
        Aggregates everything currently held by a buffer store.

        Raises:
            AggregationIOError: If a buffered batch cannot be read.
        """
        return self.aggregate(store.read_batches())

    @staticmethod
    def flatten(batches: Iterable[Iterable[Listing]]) -> List[Listing]:
        return [listing for batch in batches for listing in batch]

    @staticmethod
    def deduplicate(listings: Iterable[Listing]) -> List[Listing]:
        """Keeps the first listing seen for every link, preserving order."""
        unique: Dict[str, Listing] = {}
        for listing in listings:
            if listing.link in unique:
                logger.debug(f"Dropping duplicate of {listing.link} from {listing.origin.value}")
                continue
            unique[listing.link] = listing
        return list(unique.values())

    def is_filtered(self, listing: Listing) -> bool:
        """Checks if a listing should be filtered out based on any criteria."""
        if self._is_filtered_by_total(listing):
            return True
        if self._is_filtered_by_area(listing):
            return True
        return False

    def sort(self, listings: List[Listing]) -> List[Listing]:
        """Orders listings by area; ties keep their relative order."""
        return sorted(listings, key=lambda listing: listing.area, reverse=self.descending)

    def _is_filtered_by_total(self, listing: Listing) -> bool:
        if self.min_total <= listing.total_price <= self.max_total:
            return False
        logger.debug(
            f"{Colors.YELLOW}FILTERED (Total): R$ {listing.total_price} "
            f"{listing.link}{Colors.RESET}"
        )
        return True

    def _is_filtered_by_area(self, listing: Listing) -> bool:
        if listing.area > 0 and listing.area >= self.min_area:
            return False
        logger.debug(f"{Colors.YELLOW}FILTERED (Area): {listing.area}m² {listing.link}{Colors.RESET}")
        return True
