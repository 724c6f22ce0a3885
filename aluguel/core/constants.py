"""
Centralized constants for the aluguel aggregator.

This module provides a single source of truth for all application-wide
constants, including file paths, timing values, colors, and browser settings.
"""


# =============================================================================
# File Paths
# =============================================================================

CONFIG_FILE = 'config.json'
"""Default path to the configuration file."""

BUFFER_DIR = 'buffer'
"""Default directory holding one sub-directory of batches per source."""

OUTPUT_DIR = 'output'
"""Default directory for the canonical result and the rendered report."""


# =============================================================================
# Pagination and Timing
# =============================================================================

DEFAULT_MAX_PAGES = 50
"""Maximum number of result pages visited per start URL."""

DEFAULT_SOURCE_TIMEOUT_SECONDS = 1800
"""Wall-clock budget for one source's pagination run (30 minutes)."""

NAVIGATION_TIMEOUT_MS = 30000
"""Default timeout for page navigations, in milliseconds."""

ITEM_WAIT_TIMEOUT_MS = 15000
"""How long to wait for a page's listing cards to appear, in milliseconds."""


# =============================================================================
# Filtering and Reporting
# =============================================================================

DEFAULT_MIN_TOTAL = 1300
"""Lowest accepted monthly total (rent + IPTU + condo fee)."""

DEFAULT_MAX_TOTAL = 1700
"""Highest accepted monthly total (rent + IPTU + condo fee)."""

DEFAULT_MIN_AREA = 35
"""Smallest accepted area in square meters."""

DEFAULT_SORT_ORDER = 'asc'
"""Direction of the area ordering in the final result."""

DEFAULT_ROWS_PER_PAGE = 15
"""Rows shown per page of the HTML report."""

NOT_AVAILABLE = 'N/A'
"""Placeholder for free-text fields that could not be extracted."""


# =============================================================================
# Console Colors (ANSI escape codes)
# =============================================================================

class Colors:
    """
    ANSI color codes for console output.

    Usage:
        logger.info(f"{Colors.GREEN}Success!{Colors.RESET}")
    """
    GREEN = "\033[92m"
    """Green text for success messages."""

    YELLOW = "\033[93m"
    """Yellow text for warning messages."""

    RED = "\033[91m"
    """Red text for error messages."""

    RESET = "\033[0m"
    """Reset to default terminal color."""


# =============================================================================
# Browser Settings
# =============================================================================

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) '
    'AppleWebKit/537.36 (KHTML, like Gecko) '
    'Chrome/112.0.0.0 Safari/537.36'
)
"""Default User-Agent for the browser context."""
