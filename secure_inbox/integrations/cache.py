"""
Time-bounded reputation verdict cache.

Entries are keyed by URL and belong to a single provider client. An
entry older than the TTL is treated as absent and dropped on lookup,
so stale verdicts are never served.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from secure_inbox.email_processing.models import ReputationVerdict

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry:
    verdict: ReputationVerdict
    stored_at: float


class ReputationCache:
    """
    In-memory URL -> verdict cache with expiry.

    Args:
        ttl_seconds: Lifetime of an entry
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("Cache TTL must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def get(self, url: str) -> Optional[ReputationVerdict]:
        entry = self._entries.get(url)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[url]
            return None
        return entry.verdict

    def set(self, url: str, verdict: ReputationVerdict) -> None:
        self._entries[url] = CacheEntry(verdict=verdict, stored_at=self._clock())

    def purge_expired(self) -> int:
        """Drop expired entries. Returns the number removed."""
        expired = [url for url, entry in self._entries.items() if self._is_expired(entry)]
        for url in expired:
            del self._entries[url]
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)
