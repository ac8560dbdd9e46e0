"""Interface for caching mechanisms.

Defines the contract for storing and retrieving upstream responses with a
TTL. Lookups are synchronous: a cache consult never suspends the caller.
"""

import abc
from typing import Any, Optional

from deelmcp.domain.models.common import CacheKey

class CacheService(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Retrieves an item from the cache.

        Args:
            key: The cache key to retrieve.
            default: Returned on a miss. Pass a sentinel to tell a miss apart
                from a cached None.

        Returns:
            The cached item if found and not expired, otherwise `default`.
        """
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        """Stores an item, overwriting any existing entry for the key.

        Args:
            key: The cache key to store the item under.
            value: The item to store.
            ttl: Time-to-live in seconds (uses the cache default if None).
        """
        pass

    @abc.abstractmethod
    def delete(self, key: CacheKey) -> None:
        """Deletes an item from the cache."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Clears all items from the cache."""
        pass
