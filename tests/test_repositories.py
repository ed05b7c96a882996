"""
Tests for the SQLAlchemy store, the in-memory cache, seeding and settings.
"""

import dataclasses
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from subscription_catalog.config import Settings
from subscription_catalog.entities import Page, PageRequest, SortDirection, SubscriptionStatus
from subscription_catalog.errors import InvalidQueryError, SubscriptionConflictError
from subscription_catalog.protocols import CacheStore, SubscriptionStore
from subscription_catalog.repositories import InMemoryCacheRepository, SqlAlchemySubscriptionRepository
from subscription_catalog.services import DEFAULT_CATALOG, seed_catalog

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def populated(store, make_draft):
    """Five subscriptions, the last two inactive."""
    rows = [
        ("Netflix", "9.99", "Streaming"),
        ("Spotify", "7.99", "Music"),
        ("Xbox Game Pass", "14.99", "Gaming"),
        ("Tidal", "10.99", "Music"),
        ("Stadia", "4.99", "Gaming"),
    ]
    for name, price, category in rows:
        store.add(make_draft(name, price=Decimal(price), category=category), now=NOW)
    for subscription_id in (4, 5):
        entity = store.get(subscription_id)
        store.update(dataclasses.replace(entity, status=SubscriptionStatus.INACTIVE))
    return store


def test_implementations_satisfy_protocols(store, cache):
    """Structural typing: the concrete classes satisfy their protocols."""
    assert isinstance(store, SubscriptionStore)
    assert isinstance(cache, CacheStore)


def test_add_assigns_ids_and_timestamps(store, make_draft):
    """Inserted rows get sequential ids and the given timestamp in UTC."""
    first = store.add(make_draft("Netflix"), now=NOW)
    second = store.add(make_draft("Spotify"), now=NOW)

    assert (first.id, second.id) == (1, 2)
    fetched = store.get(first.id)
    assert fetched.created_at == NOW
    assert fetched.created_at.tzinfo is not None
    assert fetched.is_active


def test_unique_name_constraint(store, make_draft):
    """The database rejects a second row with the same name."""
    store.add(make_draft("Netflix"), now=NOW)

    with pytest.raises(SubscriptionConflictError):
        store.add(make_draft("Netflix"), now=NOW)
    assert store.count_all() == 1


def test_get_missing_returns_none(store):
    """Unknown ids are absent, not errors."""
    assert store.get(404) is None


def test_exists_by_name(store, make_draft):
    """Lookup by exact name."""
    store.add(make_draft("Netflix"), now=NOW)

    assert store.exists_by_name("Netflix")
    assert not store.exists_by_name("netflix")


def test_listings_filter_by_status(populated):
    """Status-filtered listings, ordered by id."""
    assert [e.name for e in populated.list_by_status(active=True)] == ["Netflix", "Spotify", "Xbox Game Pass"]
    assert [e.name for e in populated.list_by_status(active=False)] == ["Tidal", "Stadia"]
    assert [e.name for e in populated.list_by_category("Music", active=True)] == ["Spotify"]
    assert populated.list_active_categories() == ["Gaming", "Music", "Streaming"]


def test_search_escapes_wildcards(store, make_draft):
    """LIKE wildcards in the term match literally."""
    store.add(make_draft("100% Music"), now=NOW)
    store.add(make_draft("Spotify"), now=NOW)

    assert [e.name for e in store.search_active_by_name("%")] == ["100% Music"]
    assert store.search_active_by_name("_") == []


def test_find_page_counts_and_slices(populated):
    """Pages carry totals and the requested slice."""
    page = populated.find_page(PageRequest(page=1, size=2, sort_by="id", direction=SortDirection.ASC))

    assert [e.id for e in page.items] == [3, 4]
    assert page.total_items == 5
    assert page.total_pages == 3
    assert page.page == 1


def test_find_page_sorts_by_api_field(populated):
    """Sort fields use API names, e.g. price and isActive."""
    by_price = populated.find_page(PageRequest(size=5, sort_by="price", direction=SortDirection.ASC))
    by_status = populated.find_page(PageRequest(size=5, sort_by="isActive", direction=SortDirection.DESC))

    assert [e.name for e in by_price.items] == ["Stadia", "Spotify", "Netflix", "Tidal", "Xbox Game Pass"]
    assert [e.id for e in by_status.items] == [1, 2, 3, 4, 5]


def test_find_page_filters_by_status(populated):
    """The active filter narrows items and totals."""
    page = populated.find_page(PageRequest(size=10), active=False)

    assert page.total_items == 2
    assert all(not e.is_active for e in page.items)


def test_find_page_rejects_unknown_sort_field(populated):
    """Only whitelisted columns may be sorted on."""
    with pytest.raises(InvalidQueryError):
        populated.find_page(PageRequest(sort_by="name; DROP TABLE subscriptions"))


def test_page_past_the_end_is_empty(populated):
    """Pages beyond the last one are empty but keep totals."""
    page = populated.find_page(PageRequest(page=10, size=2))

    assert page.items == []
    assert page.total_items == 5


def test_search_page_covers_all_statuses(populated):
    """Admin search includes inactive rows and matches category."""
    page = populated.search_page("music", PageRequest(size=10, direction=SortDirection.ASC))

    assert [e.name for e in page.items] == ["Spotify", "Tidal"]


def test_counts(populated):
    """Aggregate counts used by statistics."""
    assert populated.count_by_status(active=True) == 3
    assert populated.count_by_status(active=False) == 2
    assert populated.count_active_categories() == 3
    assert populated.count_active_by_category() == {"Gaming": 1, "Music": 1, "Streaming": 1}
    assert populated.count_all() == 5


def test_empty_counts(store):
    """Counts on an empty store are zero."""
    assert store.count_by_status(active=True) == 0
    assert store.count_active_categories() == 0
    assert store.count_active_by_category() == {}


def test_store_health_check(store):
    """A live database is healthy."""
    assert store.health_check() is True


def test_create_builds_tables(engine, make_draft):
    """The factory creates missing tables."""
    store = SqlAlchemySubscriptionRepository.create(engine=engine)

    store.add(make_draft("Netflix"), now=NOW)
    assert store.count_all() == 1


def test_page_total_pages():
    """total_pages rounds up and is zero for an empty result."""
    assert Page(items=[], page=0, size=10, total_items=0).total_pages == 0
    assert Page(items=[], page=0, size=10, total_items=10).total_pages == 1
    assert Page(items=[], page=0, size=10, total_items=11).total_pages == 2
    assert Page(items=[1, 2], page=0, size=2, total_items=2).map(str).items == ["1", "2"]


@pytest.mark.parametrize("kwargs", [{"page": -1}, {"size": 0}])
def test_page_request_validation(kwargs):
    """Negative pages and empty sizes are rejected."""
    with pytest.raises(ValueError):
        PageRequest(**kwargs)


def test_memory_cache_ttl():
    """Entries expire once their TTL has elapsed."""
    now = [100.0]
    cache = InMemoryCacheRepository(clock=lambda: now[0])
    cache.set("k", {"v": 1}, 10)

    now[0] = 109.9
    assert cache.get("k") == {"v": 1}
    now[0] = 110.0
    assert cache.get("k") is None
    assert cache.keys() == []


def test_memory_cache_evicts_expired_keys_on_write():
    """Expired keys that are never read again are dropped by later writes."""
    now = [0.0]
    cache = InMemoryCacheRepository(clock=lambda: now[0])
    for i in range(1000):
        cache.set(f"subscriptions:category:junk-{i}", [], 10)

    now[0] = 20.0
    cache.set("fresh", 1, 10)

    assert cache.keys() == ["fresh"]


def test_memory_cache_rewritten_key_outlives_old_expiry():
    """Overwriting a key with a new TTL keeps it past the first expiry."""
    now = [0.0]
    cache = InMemoryCacheRepository(clock=lambda: now[0])
    cache.set("k", 1, 10)
    now[0] = 5.0
    cache.set("k", 2, 10)

    now[0] = 12.0
    cache.set("other", 3, 10)

    assert cache.get("k") == 2
    assert sorted(cache.keys()) == ["k", "other"]


def test_memory_cache_copies_values(cache):
    """Mutating a returned value does not change the cache."""
    cache.set("k", [1, 2], 60)

    cache.get("k").append(3)

    assert cache.get("k") == [1, 2]


def test_memory_cache_delete_counts_removed(cache):
    """delete reports how many keys existed."""
    cache.set("a", 1, 60)
    cache.set("b", 2, 60)

    assert cache.delete("a", "missing") == 1
    assert cache.keys() == ["b"]
    cache.clear()
    assert cache.keys() == []


def test_memory_cache_ignores_non_positive_ttl(cache):
    """A zero TTL stores nothing."""
    cache.set("k", 1, 0)

    assert cache.get("k") is None


def test_seed_catalog_loads_defaults_once(store):
    """Seeding fills an empty store and is a no-op afterwards."""
    assert seed_catalog(store) == len(DEFAULT_CATALOG)
    assert seed_catalog(store) == 0

    names = [e.name for e in store.list_by_status(active=True)]
    assert "Netflix" in names
    assert "iCloud+" in names
    assert all(e.currency == "AZN" and e.billing_period == "MONTHLY" for e in store.list_by_status(active=True))


def test_seed_catalog_skips_non_empty_store(store, make_draft):
    """An existing catalog is left alone."""
    store.add(make_draft("Custom"), now=NOW)

    assert seed_catalog(store) == 0
    assert store.count_all() == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"cache_ttl": 0},
        {"cache_backend": "memcached"},
        {"email_provider": "carrier-pigeon"},
        {"default_page_size": 500, "max_page_size": 100},
    ],
)
def test_settings_validation(overrides):
    """Invalid settings fail fast."""
    with pytest.raises(ValueError):
        Settings(**overrides)


def test_settings_cors_origin_list():
    """CORS origins are split and trimmed."""
    config = Settings(cors_origins=" http://a.test , ,http://b.test")

    assert config.cors_origin_list == ["http://a.test", "http://b.test"]
