"""Redis implementation of CacheStore.

Values are stored as JSON strings under plain keys with a per-key expiry
(``SET key value EX ttl``). It's the default implementation and satisfies
the CacheStore protocol.
"""

import json
import logging
from typing import Any

import redis

from subscription_catalog.config import get_redis_client

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis key-value cache with per-entry TTL.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Connection errors propagate as ``redis.RedisError``; the catalog
    service absorbs them.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
        """
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            redis_client: Redis client. If None, builds one from settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=redis_client)

    def get(self, key: str) -> Any | None:
        """Fetch and decode a cached value.

        Args:
            key: The cache key

        Returns:
            The decoded value, or None if the key is missing
        """
        raw = self._client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry: %s", key)
            self._client.delete(key)
            return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Encode and store a value.

        Args:
            key: The cache key
            value: JSON-compatible value
            ttl: Time-to-live in seconds
        """
        self._client.set(key, json.dumps(value), ex=ttl)

    def delete(self, *keys: str) -> int:
        """Delete keys.

        Args:
            keys: Keys to remove

        Returns:
            Number of keys removed
        """
        if not keys:
            return 0
        result: int = self._client.delete(*keys)  # type: ignore[assignment]
        return result

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
