"""Concrete implementation of the in-memory TTL Caching Service.

Entries are created on the first successful fetch of a key, overwritten on
refetch after expiry, and removed lazily when an expired entry is looked up.
There is no size bound and no persistence: the cache lives for the process.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from deelmcp.domain.interfaces.cache import CacheService
from deelmcp.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60  # 24 hours; Deel org data rarely changes

@dataclass
class CacheEntry:
    """Internal representation of a cache entry with expiry."""
    value: Any
    expiry_time: float  # Clock reading after which the entry is stale

class InMemoryCache(CacheService):
    """Process-local cache keyed by fully resolved request URL."""

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        """Initializes the caching service.

        Args:
            ttl: Default time-to-live in seconds.
            clock: Time source, in seconds.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self.ttl = ttl
        self._clock = clock
        logger.info(f"CachingService initialized (ttl={ttl}s)")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and not self._is_expired(entry)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() > entry.expiry_time

    # --- CacheService Interface Implementation ---

    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Retrieves a live entry, dropping it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss for key: {key}")
            return default
        if self._is_expired(entry):
            logger.debug(f"Cache entry expired for key: {key}. Removing.")
            del self._entries[key]
            return default
        logger.debug(f"Cache hit for key: {key}")
        return entry.value

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        """Stores an item with expiry = now + ttl."""
        expiry = self._clock() + (ttl if ttl is not None else self.ttl)
        self._entries[key] = CacheEntry(value=value, expiry_time=expiry)
        logger.debug(f"Stored item in cache: key={key}")

    def delete(self, key: CacheKey) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug(f"Deleted item from cache: key={key}")

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Cleared in-memory cache.")
