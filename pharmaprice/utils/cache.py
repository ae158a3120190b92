"""
In-memory, time-expiring cache of per-source search results.

Keyed by (source_id, case-folded query). Entries expire lazily: a read
after the TTL is a miss and drops the entry; there is no sweeper.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from pharmaprice.config import settings
from pharmaprice.schemas.search import ResultRecord
from pharmaprice.utils.normalization import normalize_query

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    results: list[ResultRecord]
    fetched_at: float


class ResultCache:
    """Thread-safe TTL map from (source, query) to result lists."""

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(source_id: str, query: str) -> tuple[str, str]:
        return source_id, normalize_query(query).casefold()

    def get(self, source_id: str, query: str) -> list[ResultRecord] | None:
        """Cached results, or None on a miss or an expired entry."""
        key = self.make_key(source_id, query)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.fetched_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry expired for {key}")
                return None
            return list(entry.results)

    def put(self, source_id: str, query: str, results: list[ResultRecord]) -> None:
        key = self.make_key(source_id, query)
        with self._lock:
            self._entries[key] = CacheEntry(results=list(results), fetched_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
