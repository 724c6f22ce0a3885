"""
This module is the main entry point for the application.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

from aluguel.app import App
from aluguel.core.config import Config
from aluguel.core.constants import CONFIG_FILE
from aluguel.core.errors import ConfigurationError
from aluguel.scrapers import SCRAPER_CLASSES, BaseScraper
from aluguel.services.report import ReportRenderer
from aluguel.services.store import BufferStore

logger = logging.getLogger(__name__)


def load_scrapers(config: Config, only: Optional[Sequence[str]] = None) -> List[BaseScraper]:
    """
    Load enabled scrapers based on configuration.

    Args:
        config: Application configuration object.
        only: Optional subset of source names to run.

    Returns:
        List of instantiated scraper objects.

    Raises:
        ConfigurationError: If a requested source is not enabled in the configuration.
    """
    enabled = config.enabled_sources
    names = list(only) if only else list(enabled)

    scrapers = []
    for name in names:
        if name not in enabled:
            raise ConfigurationError(f"Source '{name}' is not enabled in the configuration.")
        scrapers.append(SCRAPER_CLASSES[name](name=name, start_urls=enabled[name]))
        logger.info(f"Enabled scraper: {name} ({len(enabled[name])} start URL(s))")
    return scrapers


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aluguel",
        description="Crawl rental listings from several sites and aggregate them into one report.",
    )
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration.")
    parser.add_argument(
        "--sources",
        type=lambda value: [name.strip() for name in value.split(",") if name.strip()],
        help="Comma-separated subset of sources to crawl (default: all enabled).",
    )
    parser.add_argument(
        "--aggregate-only", action="store_true", help="Skip crawling and aggregate the buffer."
    )
    parser.add_argument(
        "--fresh", action="store_true", help="Clear the buffer before crawling."
    )
    parser.add_argument(
        "--clear-buffer", action="store_true", help="Clear the buffer after aggregating."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Runs the crawl and aggregation pipeline. Returns the process exit code."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)-8s - [%(filename)s:%(lineno)d] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        config = Config.from_file(args.config)
        logger.info(
            f"Loaded source configurations:\n{json.dumps(config.sources, indent=2)}"
        )
        logger.info(f"Loaded filter configuration:\n{json.dumps(config.filters, indent=2)}")
        scrapers = [] if args.aggregate_only else load_scrapers(config, args.sources)
    except ConfigurationError as e:
        logger.fatal(f"Application failed to start: {e}")
        return 1

    app = App(
        config,
        scrapers,
        BufferStore(config.buffer_dir),
        ReportRenderer(config.output_dir, config.rows_per_page),
    )

    try:
        summary = asyncio.run(
            app.run(
                crawl=not args.aggregate_only,
                fresh=args.fresh,
                clear_buffer=args.clear_buffer,
            )
        )
    except KeyboardInterrupt:
        logger.info("\nRun stopped by user.")
        return 130

    if summary.report is not None:
        logger.info(f"Result: {summary.report.json_path}")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
