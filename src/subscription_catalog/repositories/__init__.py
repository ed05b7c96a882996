"""Repository layer for data access.

This layer abstracts external dependencies (database, Redis, SMTP)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis -> in-memory, SQLite -> PostgreSQL, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from subscription_catalog.protocols import CacheStore, Notifier, SubscriptionStore

from .email_notifier import LoggingNotifier, SmtpNotifier, create_notifier
from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository
from .sqlalchemy_repository import SqlAlchemySubscriptionRepository

__all__ = [
    "CacheStore",
    "Notifier",
    "SubscriptionStore",
    "InMemoryCacheRepository",
    "LoggingNotifier",
    "RedisCacheRepository",
    "SmtpNotifier",
    "SqlAlchemySubscriptionRepository",
    "create_notifier",
]
