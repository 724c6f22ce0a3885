"""
Configuration module for the aggregator.
"""
import json
from typing import Any, Dict, List

from aluguel.core.constants import (
    BUFFER_DIR,
    CONFIG_FILE,
    DEFAULT_MAX_PAGES,
    DEFAULT_MAX_TOTAL,
    DEFAULT_MIN_AREA,
    DEFAULT_MIN_TOTAL,
    DEFAULT_ROWS_PER_PAGE,
    DEFAULT_SORT_ORDER,
    DEFAULT_SOURCE_TIMEOUT_SECONDS,
    NAVIGATION_TIMEOUT_MS,
    OUTPUT_DIR,
)
from aluguel.core.errors import ConfigurationError

KNOWN_SOURCES = ("olx", "viva-real", "zap-imoveis", "netimoveis")
SORT_ORDERS = ("asc", "desc")


class Config:
    """Handles loading and validation of settings from a JSON file."""

    def __init__(self, settings_data: Dict[str, Any]):
        self.settings = settings_data
        self._validate()

    @classmethod
    def from_file(cls, filepath: str = CONFIG_FILE):
        """Loads settings from a specified JSON file."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return cls(json.load(f))
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"FATAL: {filepath} not found. Please create it."
            ) from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"FATAL: {filepath} is not valid JSON.") from exc

    def _validate(self):
        """Validates the structure and content of the settings."""
        if not isinstance(self.settings.get('sources'), dict):
            raise ConfigurationError("config.json is missing the 'sources' section.")

        for name, source in self.settings['sources'].items():
            if name not in KNOWN_SOURCES:
                raise ConfigurationError(
                    f"Unknown source '{name}'. Expected one of: {', '.join(KNOWN_SOURCES)}."
                )
            if not isinstance(source, dict):
                raise ConfigurationError(f"Source '{name}' must be an object.")
            if source.get('enabled', True) and not self._as_url_list(source.get('start_urls')):
                raise ConfigurationError(f"Source '{name}' is missing 'start_urls'.")

        if not self.enabled_sources:
            raise ConfigurationError("No sources enabled in config.json.")

        self._validate_filters()

        if self.max_pages <= 0:
            raise ConfigurationError("'pagination.max_pages' must be a positive number.")

    def _validate_filters(self):
        filters = self.filters
        for key in ('min_total', 'max_total', 'min_area'):
            value = filters[key]
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"Filter '{key}' must be a non-negative number.")
        if filters['min_total'] > filters['max_total']:
            raise ConfigurationError("Filter 'min_total' is greater than 'max_total'.")
        if filters['sort_order'] not in SORT_ORDERS:
            raise ConfigurationError(
                f"Filter 'sort_order' must be one of: {', '.join(SORT_ORDERS)}."
            )

    @staticmethod
    def _as_url_list(value: Any) -> List[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        return [url.strip() for url in value if isinstance(url, str) and url.strip()]

    @property
    def sources(self) -> Dict[str, Any]:
        """Returns the sources settings."""
        return self.settings.get('sources', {})

    @property
    def enabled_sources(self) -> Dict[str, List[str]]:
        """Returns the start URLs of every enabled source, keyed by source name."""
        return {
            name: self._as_url_list(source.get('start_urls'))
            for name, source in self.sources.items()
            if isinstance(source, dict) and source.get('enabled', True)
        }

    @property
    def filters(self) -> Dict[str, Any]:
        """Returns the filters settings merged over their defaults."""
        filters = {
            'min_total': DEFAULT_MIN_TOTAL,
            'max_total': DEFAULT_MAX_TOTAL,
            'min_area': DEFAULT_MIN_AREA,
            'sort_order': DEFAULT_SORT_ORDER,
        }
        filters.update(self.settings.get('filters', {}))
        return filters

    @property
    def max_pages(self) -> int:
        """Returns the page cap per start URL."""
        return self.settings.get('pagination', {}).get('max_pages', DEFAULT_MAX_PAGES)

    @property
    def source_timeout(self) -> float:
        """Returns the wall-clock budget per source, in seconds."""
        return self.settings.get('pagination', {}).get(
            'source_timeout_seconds', DEFAULT_SOURCE_TIMEOUT_SECONDS
        )

    @property
    def headless(self) -> bool:
        """Returns whether the browser runs headless."""
        return self.settings.get('browser', {}).get('headless', True)

    @property
    def navigation_timeout_ms(self) -> int:
        """Returns the default navigation timeout in milliseconds."""
        return self.settings.get('browser', {}).get(
            'navigation_timeout_ms', NAVIGATION_TIMEOUT_MS
        )

    @property
    def buffer_dir(self) -> str:
        """Returns the buffer directory path."""
        return self.settings.get('buffer_dir', BUFFER_DIR)

    @property
    def output_dir(self) -> str:
        """Returns the output directory path."""
        return self.settings.get('output_dir', OUTPUT_DIR)

    @property
    def rows_per_page(self) -> int:
        """Returns the number of rows per page of the HTML report."""
        return self.settings.get('report', {}).get('rows_per_page', DEFAULT_ROWS_PER_PAGE)
