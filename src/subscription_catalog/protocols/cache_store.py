"""Cache storage protocol.

Defines the key-value capability set the catalog core needs for its
cache-aside reads: get, set-with-ttl and delete.

Implementations can include:
- Redis (default)
- In-process dictionary (tests, local development)
- Memcached or any other key-value store with expiry
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache backends.

    Values are JSON-compatible structures (dicts, lists, strings, numbers).
    Implementations may raise on connection problems; the catalog core
    treats such errors as misses and never lets them reach callers.

    Example:
        ```python
        from subscription_catalog.protocols import CacheStore

        cache: CacheStore = RedisCacheRepository.create()
        cache.set("subscriptions:all", [...], ttl=3600)
        ```
    """

    def get(self, key: str) -> Any | None:
        """Fetch a cached value.

        Args:
            key: The cache key

        Returns:
            The stored value, or None if absent or expired
        """
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value with an expiry.

        Args:
            key: The cache key
            value: JSON-compatible value
            ttl: Time-to-live in seconds
        """
        ...

    def delete(self, *keys: str) -> int:
        """Remove one or more keys.

        Args:
            keys: Keys to remove

        Returns:
            Number of keys that existed and were removed
        """
        ...

    def health_check(self) -> bool:
        """Check if the cache backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
