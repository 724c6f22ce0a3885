"""
This package contains all the scraper implementations.
"""
from .base import BaseScraper, ItemResult, PageExtraction
from .netimoveis import NetImoveisScraper
from .olx import OlxScraper
from .vivareal import VivaRealScraper
from .zapimoveis import ZapImoveisScraper

# A dictionary to map source names to their classes
SCRAPER_CLASSES = {
    "olx": OlxScraper,
    "viva-real": VivaRealScraper,
    "zap-imoveis": ZapImoveisScraper,
    "netimoveis": NetImoveisScraper,
}

__all__ = [
    "BaseScraper",
    "ItemResult",
    "PageExtraction",
    "NetImoveisScraper",
    "OlxScraper",
    "VivaRealScraper",
    "ZapImoveisScraper",
    "SCRAPER_CLASSES",
]
