"""In-memory TTL cache shared by the search and content layers.

One instance is created per process and injected into the services that need
it. Keys are namespaced by prefix (``search:`` / ``content:``) so the
aggregator and the enricher never collide.
"""

import asyncio
import copy
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from metasearch.core.constants import CACHE_SWEEP_FRACTION, DEFAULT_CACHE_TTL_SECONDS
from metasearch.core.models import CacheStats

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value and its expiry (monotonic seconds, None = never)."""

    key: str
    value: Any
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class SearchCache:
    """Thread-safe in-memory cache with per-entry TTL.

    Expired entries are evicted lazily on ``get`` and periodically by a
    background sweep (every ``0.2 * default_ttl`` seconds) once ``start()``
    has been awaited. A ``ttl`` of 0 stores the entry without expiry.

    Values are stored by reference unless ``copy_values`` is set, in which
    case they are deep-copied on the way in and out. With references, callers
    must treat returned values as read-only.
    """

    def __init__(
        self,
        default_ttl: int = DEFAULT_CACHE_TTL_SECONDS,
        copy_values: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            default_ttl: TTL in seconds used when ``set`` gets no ttl
            copy_values: Deep-copy values on set/get
            clock: Time source in seconds (monotonic); overridable for tests
        """
        self.default_ttl = default_ttl
        self.copy_values = copy_values
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._sweep_task: Optional[asyncio.Task] = None

        logger.info(f"Cache initialized with TTL of {default_ttl} seconds")

    @property
    def check_period(self) -> float:
        """Seconds between background sweeps."""
        return max(self.default_ttl * CACHE_SWEEP_FRACTION, 1.0)

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock()):
                del self._entries[key]
                entry = None

            if entry is None:
                self._misses += 1
                return None

            self._hits += 1
            value = entry.value

        logger.debug(f"Cache HIT for key: {key}")
        return copy.deepcopy(value) if self.copy_values else value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Seconds to live; None uses the default, 0 never expires
        """
        ttl = self.default_ttl if ttl is None else ttl
        if ttl < 0:
            raise ValueError(f"ttl must be >= 0, got {ttl}")

        stored = copy.deepcopy(value) if self.copy_values else value
        with self._lock:
            expires_at = self._clock() + ttl if ttl > 0 else None
            self._entries[key] = CacheEntry(key=key, value=stored, expires_at=expires_at)
            self._sets += 1
            count = len(self._entries)

        logger.debug(f"Cache set key: {key} (items: {count})")

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        logger.debug(f"Cache delete key: {key} (present: {removed})")
        return removed

    def flush(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()
        logger.info("Cache flushed")

    def keys(self) -> List[str]:
        """Return keys of entries that have not expired."""
        now = self._clock()
        with self._lock:
            return [k for k, e in self._entries.items() if not e.is_expired(now)]

    def stats(self) -> CacheStats:
        """Return hit/miss/set counters and the live item count."""
        keys = self.keys()
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                sets=self._sets,
                item_count=len(keys),
                keys=keys,
            )

    def sweep_expired(self) -> int:
        """Evict expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Cache sweep evicted {len(expired)} entries")
        return len(expired)

    def __contains__(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(now)

    def __len__(self) -> int:
        return len(self.keys())

    async def start(self) -> None:
        """Start the background expiry sweep."""
        if self._sweep_task is not None:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Cache sweeper started (every {self.check_period:.1f}s)")

    async def stop(self) -> None:
        """Cancel the background expiry sweep."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
            logger.info("Cache sweeper stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            self.sweep_expired()
