"""Catalog service for core business logic.

This service orchestrates reads and writes against the subscription store,
serves the hot public read paths cache-aside, and triggers lifecycle
notifications.

Cache policy:
    - Reads check the cache first and populate it on a miss (TTL = settings.cache_ttl).
    - Every write synchronously drops the two global keys (all active, all
      categories). Per-id and per-category keys are left to expire, so they
      may be stale for at most one TTL after a write.
    - The cache is never authoritative. A failing cache read is a miss; a
      failing cache write or delete is logged and ignored.
"""

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from subscription_catalog.config import settings
from subscription_catalog.entities import (
    CatalogStatistics,
    Page,
    PageRequest,
    SubscriptionDraft,
    SubscriptionEntity,
    SubscriptionStatus,
)
from subscription_catalog.errors import SubscriptionConflictError, SubscriptionNotFoundError
from subscription_catalog.protocols import CacheStore, SubscriptionStore
from subscription_catalog.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_ACTIVE_KEY = "subscriptions:all"
ALL_CATEGORIES_KEY = "subscriptions:categories"
GLOBAL_KEYS = (ALL_ACTIVE_KEY, ALL_CATEGORIES_KEY)


def subscription_key(subscription_id: int) -> str:
    return f"subscription:{subscription_id}"


def category_key(category: str) -> str:
    return f"subscriptions:category:{category}"


def _encode_list(items: list[SubscriptionEntity]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


def _decode_list(data: Any) -> list[SubscriptionEntity]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list, got {type(data).__name__}")
    return [SubscriptionEntity.from_dict(item) for item in data]


def _decode_categories(data: Any) -> list[str]:
    if not isinstance(data, list) or not all(isinstance(category, str) for category in data):
        raise TypeError("expected a list of category names")
    return list(data)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogService:
    """Core catalog orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - SubscriptionStore: SQLAlchemy over SQLite/PostgreSQL, or a fake
    - CacheStore: Redis, in-memory, or None to disable caching

    The service never looks at who is calling; role checks belong to the API.

    Example:
        ```python
        from subscription_catalog.repositories import InMemoryCacheRepository, SqlAlchemySubscriptionRepository
        from subscription_catalog.services import CatalogService

        catalog = CatalogService.create(
            store=SqlAlchemySubscriptionRepository.create(),
            cache=InMemoryCacheRepository(),
        )
        catalog.get_all()
        ```
    """

    def __init__(
        self,
        store: SubscriptionStore,
        cache: CacheStore | None = None,
        notifications: NotificationService | None = None,
        ttl: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the catalog service.

        Args:
            store: Durable subscription store (required).
            cache: Cache backend. None disables caching.
            notifications: Lifecycle notifications. None disables them.
            ttl: Time-to-live for cache entries in seconds. Defaults to settings.
            clock: Source of the current time, timezone-aware.
        """
        self._store = store
        self._cache = cache
        self._notifications = notifications
        self._ttl = ttl or settings.cache_ttl
        self._clock = clock

    @classmethod
    def create(
        cls,
        store: SubscriptionStore,
        cache: CacheStore | None = None,
        notifications: NotificationService | None = None,
        ttl: int | None = None,
    ) -> "CatalogService":
        """Factory method to create CatalogService with sensible defaults.

        Args:
            store: Durable subscription store (required).
            cache: Cache backend. If None, reads always go to the store.
            notifications: Lifecycle notifications. If None, nothing is sent.
            ttl: Cache TTL in seconds. If None, uses settings.

        Returns:
            Configured CatalogService instance
        """
        return cls(store=store, cache=cache, notifications=notifications, ttl=ttl)

    # ------------------------------------------------------------------ #
    # Public reads (cache-aside)
    # ------------------------------------------------------------------ #
    def get_all(self) -> list[SubscriptionEntity]:
        """All active subscriptions."""
        return self._cached(
            ALL_ACTIVE_KEY,
            lambda: self._store.list_by_status(active=True),
            _encode_list,
            _decode_list,
        )

    def get_by_id(self, subscription_id: int) -> SubscriptionEntity:
        """An active subscription by id.

        Raises:
            SubscriptionNotFoundError: If absent or inactive
        """

        def load() -> SubscriptionEntity:
            entity = self._store.get(subscription_id)
            if entity is None or not entity.is_active:
                logger.warning("Active subscription not found: %s", subscription_id)
                raise SubscriptionNotFoundError(subscription_id)
            return entity

        return self._cached(
            subscription_key(subscription_id),
            load,
            SubscriptionEntity.to_dict,
            SubscriptionEntity.from_dict,
        )

    def get_by_category(self, category: str) -> list[SubscriptionEntity]:
        """Active subscriptions in one category."""
        return self._cached(
            category_key(category),
            lambda: self._store.list_by_category(category, active=True),
            _encode_list,
            _decode_list,
        )

    def get_all_categories(self) -> list[str]:
        """Distinct categories among active subscriptions."""
        return self._cached(
            ALL_CATEGORIES_KEY,
            self._store.list_active_categories,
            list,
            _decode_categories,
        )

    def search(self, term: str) -> list[SubscriptionEntity]:
        """Active subscriptions whose name contains ``term``, case-insensitively.

        Search results are never cached.
        """
        logger.info("Searching active subscriptions by name: %s", term)
        return self._store.search_active_by_name(term)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def create(self, draft: SubscriptionDraft) -> SubscriptionEntity:
        """Create a new active subscription.

        Raises:
            SubscriptionConflictError: If any subscription already uses the name
        """
        logger.info("Creating new subscription: %s", draft.name)

        if self._store.exists_by_name(draft.name):
            logger.warning("Subscription already exists: %s", draft.name)
            raise SubscriptionConflictError(draft.name)

        entity = self._store.add(draft, now=self._clock())
        logger.info("Successfully created subscription with ID: %s", entity.id)

        self._invalidate_global()
        if self._notifications:
            self._notifications.subscription_created(entity.name)
        return entity

    def update(self, subscription_id: int, draft: SubscriptionDraft) -> SubscriptionEntity:
        """Overwrite every mutable field of an active subscription.

        Raises:
            SubscriptionNotFoundError: If no active subscription exists at the id
            SubscriptionConflictError: If the new name is used by another subscription
        """
        logger.info("Updating subscription: %s", subscription_id)

        current = self._store.get(subscription_id)
        if current is None or not current.is_active:
            raise SubscriptionNotFoundError(subscription_id)

        if draft.name != current.name and self._store.exists_by_name(draft.name):
            logger.warning("Cannot rename subscription %s, name taken: %s", subscription_id, draft.name)
            raise SubscriptionConflictError(draft.name)

        changed = dataclasses.replace(
            current,
            name=draft.name,
            description=draft.description,
            price=draft.price,
            currency=draft.currency,
            category=draft.category,
            billing_period=draft.billing_period,
            website_url=draft.website_url,
            logo_url=draft.logo_url,
            updated_at=self._next_timestamp(current),
        )
        updated = self._store.update(changed)
        logger.info("Successfully updated subscription: %s", subscription_id)

        self._invalidate_global()
        if self._notifications:
            self._notifications.subscription_updated(updated.name)
        return updated

    def deactivate(self, subscription_id: int) -> None:
        """Soft-delete a subscription. Deactivating an inactive record succeeds.

        Raises:
            SubscriptionNotFoundError: If no subscription exists at the id
        """
        logger.info("Deactivating subscription: %s", subscription_id)
        entity = self._set_status(subscription_id, SubscriptionStatus.INACTIVE)
        logger.info("Successfully deactivated subscription: %s", subscription_id)

        if self._notifications:
            self._notifications.subscription_deactivated(entity.name)

    def activate(self, subscription_id: int) -> SubscriptionEntity:
        """Reactivate a subscription.

        Raises:
            SubscriptionNotFoundError: If no subscription exists at the id
        """
        logger.info("Activating subscription: %s", subscription_id)
        entity = self._set_status(subscription_id, SubscriptionStatus.ACTIVE)
        logger.info("Successfully activated subscription: %s", subscription_id)

        if self._notifications:
            self._notifications.subscription_activated(entity.name)
        return entity

    # ------------------------------------------------------------------ #
    # Admin reads (never cached)
    # ------------------------------------------------------------------ #
    def get_by_id_for_admin(self, subscription_id: int) -> SubscriptionEntity:
        """A subscription by id regardless of status.

        Raises:
            SubscriptionNotFoundError: If absent
        """
        entity = self._store.get(subscription_id)
        if entity is None:
            logger.warning("Subscription not found for admin: %s", subscription_id)
            raise SubscriptionNotFoundError(subscription_id)
        return entity

    def list_for_admin(self, request: PageRequest, active: bool | None = None) -> Page[SubscriptionEntity]:
        """One page over all subscriptions, optionally filtered by status.

        Raises:
            InvalidQueryError: If the sort field is unknown
        """
        logger.info("Listing subscriptions for admin: %s, active filter: %s", request, active)
        return self._store.find_page(request, active=active)

    def search_for_admin(self, term: str, request: PageRequest) -> Page[SubscriptionEntity]:
        """One page of subscriptions matching ``term`` in name, description or category."""
        logger.info("Admin searching subscriptions with term: %s", term)
        return self._store.search_page(term, request)

    def statistics(self) -> CatalogStatistics:
        """Aggregate counts, always computed fresh from the store."""
        stats = CatalogStatistics(
            active=self._store.count_by_status(active=True),
            inactive=self._store.count_by_status(active=False),
            active_categories=self._store.count_active_categories(),
            by_category=self._store.count_active_by_category(),
        )
        logger.info(
            "Generated subscription statistics: active=%s, categories=%s",
            stats.active,
            stats.active_categories,
        )
        return stats

    # ------------------------------------------------------------------ #
    # Health
    # ------------------------------------------------------------------ #
    def is_healthy(self) -> bool:
        """The store is reachable. Cache health never affects this."""
        return self._store.health_check()

    def cache_healthy(self) -> bool | None:
        """Cache reachability, or None when caching is disabled."""
        if self._cache is None:
            return None
        try:
            return self._cache.health_check()
        except Exception as e:
            logger.warning("Cache health check failed: %s", e)
            return False

    @property
    def ttl(self) -> int:
        """Get the cache TTL in seconds."""
        return self._ttl

    @property
    def store(self) -> SubscriptionStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def cache(self) -> CacheStore | None:
        """Get the underlying cache (for testing)."""
        return self._cache

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _set_status(self, subscription_id: int, status: SubscriptionStatus) -> SubscriptionEntity:
        current = self._store.get(subscription_id)
        if current is None:
            raise SubscriptionNotFoundError(subscription_id)

        entity = self._store.update(
            dataclasses.replace(current, status=status, updated_at=self._next_timestamp(current))
        )
        self._invalidate_global()
        return entity

    def _next_timestamp(self, current: SubscriptionEntity) -> datetime:
        # updated_at never moves backwards, even if the clock does
        return max(self._clock(), current.updated_at)

    def _cached(
        self,
        key: str,
        load: Callable[[], T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> T:
        cached = self._cache_get(key)
        if cached is not None:
            try:
                value = decode(cached)
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning("Ignoring malformed cache entry %s: %s", key, e)
            else:
                logger.debug("Cache hit: %s", key)
                return value

        logger.debug("Cache miss: %s", key)
        value = load()
        self._cache_set(key, encode(value))
        return value

    def _cache_get(self, key: str) -> Any | None:
        if self._cache is None:
            return None
        try:
            return self._cache.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s, falling back to store: %s", key, e)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, value, self._ttl)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    def _invalidate_global(self) -> None:
        if self._cache is None:
            return
        try:
            self._cache.delete(*GLOBAL_KEYS)
        except Exception as e:
            logger.warning("Cache invalidation failed for %s: %s", ", ".join(GLOBAL_KEYS), e)
