"""Subscription Catalog - subscription offerings with cache-aside reads.

This package provides a layered architecture for the catalog:

Layers:
    - protocols: Interface contracts (SubscriptionStore, CacheStore, Notifier)
    - repositories: Data access implementations
    - services: Business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from subscription_catalog.repositories import InMemoryCacheRepository, SqlAlchemySubscriptionRepository
    from subscription_catalog.services import CatalogService

    store = SqlAlchemySubscriptionRepository.create()
    catalog = CatalogService.create(store=store, cache=InMemoryCacheRepository())
    ```

For HTTP API:
    ```python
    from subscription_catalog.api.app import app
    ```
"""

from subscription_catalog.config import Settings, get_redis_client, settings
from subscription_catalog.dto import SubscriptionItem, SubscriptionRequest
from subscription_catalog.entities import (
    CatalogStatistics,
    Page,
    PageRequest,
    SubscriptionDraft,
    SubscriptionEntity,
    SubscriptionStatus,
)
from subscription_catalog.errors import (
    CatalogError,
    InvalidQueryError,
    SubscriptionConflictError,
    SubscriptionNotFoundError,
)
from subscription_catalog.handlers import SubscriptionHandler
from subscription_catalog.protocols import CacheStore, Notifier, SubscriptionStore
from subscription_catalog.repositories import (
    InMemoryCacheRepository,
    RedisCacheRepository,
    SqlAlchemySubscriptionRepository,
)
from subscription_catalog.services import CatalogService, NotificationService

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "Notifier",
    "SubscriptionStore",
    # Services (business logic)
    "CatalogService",
    "NotificationService",
    # Handlers (HTTP)
    "SubscriptionHandler",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "SqlAlchemySubscriptionRepository",
    # Entities (domain models)
    "CatalogStatistics",
    "Page",
    "PageRequest",
    "SubscriptionDraft",
    "SubscriptionEntity",
    "SubscriptionStatus",
    # Errors
    "CatalogError",
    "InvalidQueryError",
    "SubscriptionConflictError",
    "SubscriptionNotFoundError",
    # DTOs (API contracts)
    "SubscriptionItem",
    "SubscriptionRequest",
]
