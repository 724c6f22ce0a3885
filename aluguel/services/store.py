"""
This module defines the BufferStore class, which persists each source's
normalized batches until the aggregation stage reads them back.

Layout on disk:

    <root>/<source>/<source>-<timestamp_ms>-<seq>.json   (one JSON array each)

Nested directories are read recursively, so batches may be grouped further.
"""
import itertools
import json
import logging
import shutil
import time
from pathlib import Path
from typing import Iterable, List, Optional

from aluguel.core.constants import BUFFER_DIR
from aluguel.core.errors import AggregationIOError
from aluguel.core.listing import Listing

logger = logging.getLogger(__name__)


class BufferStore:
    """Reads and writes listing batches under a buffer directory."""

    def __init__(self, root: str = BUFFER_DIR):
        """
        Initialize the BufferStore.

        Args:
            root: Directory holding the batches. Created on first write.
        """
        self.root = Path(root)
        self._sequence = itertools.count()
        logger.debug(f"BufferStore initialized at: {self.root}")

    def write(self, source: str, listings: Iterable[Listing]) -> Path:
        """
        Writes one batch for a source under a unique file name.

        Args:
            source: Source name, used as sub-directory and file prefix.
            listings: The batch to persist.

        Returns:
            Path of the written file.
        """
        directory = self.root / source
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time() * 1000)
        path = directory / f"{source}-{timestamp}-{next(self._sequence):03d}.json"

        batch = [listing.to_dict() for listing in listings]
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(batch, f, ensure_ascii=False, indent=2)
        logger.info(f"Saved {len(batch)} listing(s) to {path}")
        return path

    def list_batches(self, source: Optional[str] = None) -> List[Path]:
        """
        Lists batch files, recursively and in path order.

        Args:
            source: Restrict the listing to one source's sub-directory.
        """
        base = self.root / source if source else self.root
        if not base.exists():
            return []
        return sorted(path for path in base.rglob('*.json') if path.is_file())

    def read_batch(self, path: Path) -> List[Listing]:
        """
        Reads one batch file.

        Raises:
            AggregationIOError: If the file is unreadable or not a valid batch.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise AggregationIOError(f"Could not read buffer file {path}: {e}") from e

        if not isinstance(data, list):
            raise AggregationIOError(f"Buffer file {path} does not hold a JSON array.")
        try:
            return [Listing.from_dict(record) for record in data]
        except (AttributeError, TypeError, ValueError) as e:
            raise AggregationIOError(f"Invalid listing record in {path}: {e}") from e

    def read_batches(self, source: Optional[str] = None) -> List[List[Listing]]:
        """Reads every batch file, in path order."""
        batches = [self.read_batch(path) for path in self.list_batches(source)]
        logger.info(f"Loaded {len(batches)} batch(es) from {self.root}")
        return batches

    def clear(self, source: Optional[str] = None) -> None:
        """Removes every batch, or only those of one source."""
        target = self.root / source if source else self.root
        if target.exists():
            shutil.rmtree(target)
            logger.info(f"Cleared buffer at {target}")
