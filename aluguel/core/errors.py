"""
Error taxonomy of the aggregation pipeline.

Each class marks the granularity at which the failure is contained:
configuration errors abort the run, item errors skip a single card,
navigation errors end a single source, and aggregation I/O errors end
only the aggregation stage.
"""


class AluguelError(Exception):
    """Base class for all errors raised by the aggregator."""


class ConfigurationError(AluguelError, ValueError):
    """The configuration is missing or invalid. Fatal before crawling starts."""


class ExtractionItemError(AluguelError):
    """A single listing card or record could not be processed."""


class NavigationError(AluguelError):
    """A page navigation failed; the affected source stops paginating."""


class PaginationAdvanceError(NavigationError):
    """Moving to the next result page failed or was refused by a safety bound."""


class AggregationIOError(AluguelError):
    """A buffered batch could not be read or decoded."""
