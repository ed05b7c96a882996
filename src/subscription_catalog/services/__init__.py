"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from subscription_catalog.services import CatalogService

    # Using factory method (recommended)
    catalog = CatalogService.create(store=store, cache=cache)

    # Or manual creation
    catalog = CatalogService(store=store, cache=cache, notifications=notifications, ttl=600)
    ```
"""

from .catalog_service import CatalogService
from .notification_service import NotificationService
from .seed_service import DEFAULT_CATALOG, seed_catalog

__all__ = [
    "CatalogService",
    "DEFAULT_CATALOG",
    "NotificationService",
    "seed_catalog",
]
