"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> in-memory, SQLite -> PostgreSQL, SMTP -> log)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from subscription_catalog.protocols import CacheStore

    # Type hints work with any implementation
    cache: CacheStore = RedisCacheRepository.create()    # works
    cache: CacheStore = InMemoryCacheRepository()        # also works
    ```
"""

from .cache_store import CacheStore
from .notifier import Notifier
from .subscription_store import SubscriptionStore

__all__ = [
    "CacheStore",
    "Notifier",
    "SubscriptionStore",
]
