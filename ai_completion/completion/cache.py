# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Time-expiring suggestion cache.

Keys combine document identity, cursor position and the text already
typed on the line, so a changed prefix simply produces a new key. Keys
are almost never reused, which means stale entries must be actively
swept or the cache would grow without bound: every write purges expired
entries and then trims the oldest entries beyond ``max_entries``.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ai_completion.completion.protocol import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_MAX_ENTRIES = 500


@dataclass
class CacheStats:
    """Statistics for cache activity."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expirations": self.expirations,
            "evictions": self.evictions,
            "hit_rate": f"{self.hit_rate:.1%}",
        }


class CompletionCache:
    """Bounded TTL store of suggestion text.

    An entry written at time T is live for reads at T' with
    ``T' - T < ttl_seconds`` and gone from then on.

    Usage:
        cache = CompletionCache(ttl_seconds=30)

        text = cache.get(key)
        if text is None:
            text = await fetch()
            cache.set(key, text)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Time-to-live for entries
            max_entries: Maximum number of entries kept after a write
            clock: Time source in seconds (injectable for tests)
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._stats = CacheStats()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Get a live entry, removing it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            self._stats.expirations += 1
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        return entry

    def get(self, key: str) -> Optional[str]:
        """Get live suggestion text for a key."""
        entry = self.get_entry(key)
        return entry.suggestion_text if entry else None

    def set(self, key: str, suggestion_text: str, context_snapshot: str = "") -> None:
        """Store suggestion text, then sweep expired and excess entries."""
        # Re-inserting moves the key to the newest position
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(
            suggestion_text=suggestion_text,
            created_at=self._clock(),
            context_snapshot=context_snapshot,
        )
        self.purge_expired()
        self._evict_excess()

    def purge_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            self._stats.expirations += len(expired)
            logger.debug(f"Purged {len(expired)} expired completion cache entries")
        return len(expired)

    def invalidate(self, key: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Cleared completion cache ({count} entries)")

    def _evict_excess(self) -> None:
        while len(self._entries) > self._max_entries:
            # dicts iterate in insertion order; the first key is the oldest
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            self._stats.evictions += 1

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self._ttl

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry, self._clock())

    def __len__(self) -> int:
        return len(self._entries)
