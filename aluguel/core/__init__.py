"""
Core module containing domain models, errors, constants, and configuration.
"""
from aluguel.core.config import Config
from aluguel.core.constants import (
    Colors,
    BUFFER_DIR,
    OUTPUT_DIR,
    DEFAULT_MAX_PAGES,
    DEFAULT_SOURCE_TIMEOUT_SECONDS,
    NOT_AVAILABLE,
)
from aluguel.core.errors import (
    AggregationIOError,
    AluguelError,
    ConfigurationError,
    ExtractionItemError,
    NavigationError,
    PaginationAdvanceError,
)
from aluguel.core.listing import Listing, Origin

__all__ = [
    "Config",
    "Colors",
    "BUFFER_DIR",
    "OUTPUT_DIR",
    "DEFAULT_MAX_PAGES",
    "DEFAULT_SOURCE_TIMEOUT_SECONDS",
    "NOT_AVAILABLE",
    "AggregationIOError",
    "AluguelError",
    "ConfigurationError",
    "ExtractionItemError",
    "NavigationError",
    "PaginationAdvanceError",
    "Listing",
    "Origin",
]
