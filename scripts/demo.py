#!/usr/bin/env python3
"""
Demo script for the subscription catalog.

This script seeds an in-memory catalog and walks through cache-aside reads,
invalidation on writes, soft delete and admin statistics. Pass ``--redis``
to use the Redis cache from REDIS_URL instead of the in-process one.
"""

import sys
import time
from decimal import Decimal

from subscription_catalog.config import configure_logging, get_redis_client
from subscription_catalog.database import build_engine
from subscription_catalog.entities import PageRequest, SortDirection, SubscriptionDraft
from subscription_catalog.errors import SubscriptionConflictError, SubscriptionNotFoundError
from subscription_catalog.repositories import (
    InMemoryCacheRepository,
    LoggingNotifier,
    RedisCacheRepository,
    SqlAlchemySubscriptionRepository,
)
from subscription_catalog.services import CatalogService, NotificationService, seed_catalog
from subscription_catalog.services.catalog_service import ALL_ACTIVE_KEY


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def build_catalog(use_redis: bool) -> CatalogService:
    store = SqlAlchemySubscriptionRepository.create(engine=build_engine("sqlite://", echo=False))
    inserted = seed_catalog(store)
    print(f"\n📦 Seeded {inserted} subscriptions into an in-memory database")

    if use_redis:
        cache = RedisCacheRepository.create(redis_client=get_redis_client())
        cache.delete(ALL_ACTIVE_KEY)
    else:
        cache = InMemoryCacheRepository()

    notifications = NotificationService(notifier=LoggingNotifier(), admin_email="admin@example.com")
    return CatalogService.create(store=store, cache=cache, notifications=notifications, ttl=300)


def demo_cache_aside(catalog: CatalogService) -> None:
    """Demonstrate cache misses followed by hits."""
    print_section("Cache-Aside Reads")

    for attempt in ("cold", "warm"):
        start = time.perf_counter()
        subscriptions = catalog.get_all()
        duration = (time.perf_counter() - start) * 1000
        print(f"  {attempt:<5} get_all: {len(subscriptions)} items in {duration:.2f}ms")

    print("\n🗂  Categories:", ", ".join(catalog.get_all_categories()))
    for item in catalog.get_by_category("Gaming"):
        print(f"  🎮 {item.name:<20} {item.price} {item.currency}")


def demo_writes(catalog: CatalogService) -> None:
    """Demonstrate writes and cache invalidation."""
    print_section("Writes and Invalidation")

    before = len(catalog.get_all())
    created = catalog.create(
        SubscriptionDraft(
            name="Disney+",
            description="Family streaming",
            price=Decimal("7.99"),
            category="Streaming",
        )
    )
    after = len(catalog.get_all())
    print(f"  ✓ Created '{created.name}' (id={created.id}); active count {before} -> {after}")

    try:
        catalog.create(SubscriptionDraft(name="Disney+", price=Decimal("1.00"), category="Streaming"))
    except SubscriptionConflictError as e:
        print(f"  ✓ Duplicate rejected: {e}")

    updated = catalog.update(
        created.id,
        SubscriptionDraft(name="Disney+", price=Decimal("8.99"), category="Streaming", billing_period="YEARLY"),
    )
    print(f"  ✓ Updated price to {updated.price} {updated.currency}/{updated.billing_period.lower()}")

    catalog.deactivate(created.id)
    try:
        catalog.get_by_id(created.id)
    except SubscriptionNotFoundError:
        print("  ✓ Deactivated subscription is hidden from public reads")
    print(f"  ✓ Admin still sees it: active={catalog.get_by_id_for_admin(created.id).is_active}")

    catalog.activate(created.id)
    print(f"  ✓ Reactivated: {catalog.get_by_id(created.id).name}")


def demo_admin(catalog: CatalogService) -> None:
    """Demonstrate admin paging, search and statistics."""
    print_section("Admin Views")

    page = catalog.list_for_admin(PageRequest(page=0, size=3, sort_by="price", direction=SortDirection.DESC))
    print(f"\n💰 Most expensive (page 1 of {page.total_pages}):")
    for item in page.items:
        print(f"  {item.name:<22} {item.price}")

    results = catalog.search_for_admin("storage", PageRequest(size=5))
    print(f"\n🔍 Admin search 'storage': {[item.name for item in results.items]}")

    stats = catalog.statistics()
    print("\n📊 Statistics:")
    print(f"  Active: {stats.active}, inactive: {stats.inactive}, total: {stats.total}")
    print(f"  Categories: {stats.active_categories}")
    for category, count in stats.by_category.items():
        print(f"    {category:<12} {count}")


def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")
    use_redis = "--redis" in sys.argv[1:]

    print("\n🚀 Subscription Catalog Demo")
    print("=" * 70)
    print(f"Cache backend: {'redis' if use_redis else 'in-memory'}")

    try:
        catalog = build_catalog(use_redis)
        demo_cache_aside(catalog)
        demo_writes(catalog)
        demo_admin(catalog)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        if use_redis:
            print("\nMake sure Redis is running:")
            print("  docker compose up -d")
            print("\nOr set REDIS_URL to your Redis instance.")


if __name__ == "__main__":
    main()
