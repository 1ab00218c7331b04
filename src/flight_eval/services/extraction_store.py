"""Persistent store of extraction provider outputs.

Handles saving and loading extracted flight records so that evaluation runs
can be replayed and re-scored without calling the provider again.
"""

import hashlib
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..evaluation.types import FlightRecord

logger = logging.getLogger(__name__)


class ExtractionStore:
    """Manages a directory of JSON files, one per query."""

    def __init__(self, store_dir: Path | str):
        """Initialize the store.

        Args:
            store_dir: Directory holding the JSON files (created if missing)
        """
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Extraction store directory: {self.store_dir}")

    def get_path(self, query: str) -> Path:
        """Get path to the JSON file for a query.

        The file name is a readable slug of the query plus a short hash, so
        queries differing only in punctuation do not collide.

        Args:
            query: Natural-language flight query

        Returns:
            Path to JSON file
        """
        slug = re.sub(r"[^a-z0-9]+", "-", query.lower()).strip("-")[:60]
        digest = hashlib.sha1(query.encode("utf-8")).hexdigest()[:10]
        return self.store_dir / f"{slug}-{digest}.json"

    def has(self, query: str) -> bool:
        return self.get_path(query).exists()

    def load(self, query: str) -> Optional[FlightRecord]:
        """Load the stored record for a query.

        Args:
            query: Natural-language flight query

        Returns:
            FlightRecord if stored, None otherwise
        """
        path = self.get_path(query)

        if not path.exists():
            logger.debug(f"No stored extraction for {query!r}")
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            record = FlightRecord.model_validate(data["extracted"])
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Failed to load stored extraction for {query!r}: {e}")
            return None

        logger.debug(f"Loaded stored extraction for {query!r} (saved at {data.get('saved_at')})")
        return record

    def save(self, query: str, record: FlightRecord, provider: str | None = None) -> Path:
        """Save an extracted record.

        Args:
            query: Natural-language flight query
            record: Extracted flight record
            provider: Name of the provider that produced it

        Returns:
            Path of the written file
        """
        path = self.get_path(query)
        data = {
            "query": query,
            "provider": provider,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "extracted": record.model_dump(by_alias=True),
        }

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved extraction for {query!r} to {path}")
        return path

    def delete(self, query: str) -> bool:
        """Delete the stored record for a query.

        Returns:
            True if a file was deleted, False if none existed
        """
        path = self.get_path(query)

        if path.exists():
            path.unlink()
            logger.info(f"Deleted stored extraction for {query!r}")
            return True

        return False

    def list_queries(self) -> list[str]:
        """Queries with a stored extraction."""
        queries = []
        for path in sorted(self.store_dir.glob("*.json")):
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    queries.append(json.load(f)["query"])
            except (OSError, ValueError, KeyError) as e:
                logger.warning(f"Skipping unreadable store file {path.name}: {e}")
        return queries

    def clear(self) -> int:
        """Delete all stored records.

        Returns:
            Number of files deleted
        """
        count = 0
        for path in self.store_dir.glob("*.json"):
            path.unlink()
            count += 1

        logger.info(f"Cleared {count} stored extractions")
        return count
