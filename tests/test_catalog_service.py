"""
Tests for the catalog service: lifecycle, uniqueness, search and statistics.
"""

import dataclasses
from datetime import timedelta
from decimal import Decimal

import pytest

from subscription_catalog.entities import PageRequest, SubscriptionStatus
from subscription_catalog.errors import InvalidQueryError, SubscriptionConflictError, SubscriptionNotFoundError
from subscription_catalog.services import CatalogService


def test_create_then_get_returns_submitted_fields(catalog, make_draft):
    """A created subscription reads back field-for-field and active."""
    draft = make_draft("Netflix", price=Decimal("12.50"), billing_period="YEARLY", currency="USD")
    created = catalog.create(draft)

    fetched = catalog.get_by_id(created.id)

    assert fetched == created
    assert fetched.is_active
    for field in dataclasses.fields(draft):
        assert getattr(fetched, field.name) == getattr(draft, field.name)
    assert fetched.created_at == fetched.updated_at


def test_create_duplicate_name_conflicts(catalog, store, make_draft):
    """The second create with the same name fails and only one record exists."""
    catalog.create(make_draft("Spotify"))

    with pytest.raises(SubscriptionConflictError):
        catalog.create(make_draft("Spotify", price=Decimal("1.00")))

    assert store.count_all() == 1


def test_create_conflicts_with_inactive_name(catalog, make_draft):
    """Names stay reserved by inactive subscriptions."""
    entity = catalog.create(make_draft("Dropbox"))
    catalog.deactivate(entity.id)

    with pytest.raises(SubscriptionConflictError):
        catalog.create(make_draft("Dropbox"))


def test_names_are_case_sensitive(catalog, make_draft):
    """Names differing only in case are distinct."""
    catalog.create(make_draft("Netflix"))
    other = catalog.create(make_draft("NETFLIX"))

    assert other.name == "NETFLIX"


def test_deactivate_hides_from_public_but_not_admin(catalog, make_draft):
    """Deactivated subscriptions are 404 publicly but visible to admins."""
    entity = catalog.create(make_draft("Netflix"))

    catalog.deactivate(entity.id)

    with pytest.raises(SubscriptionNotFoundError):
        catalog.get_by_id(entity.id)
    admin_view = catalog.get_by_id_for_admin(entity.id)
    assert admin_view.status is SubscriptionStatus.INACTIVE
    assert not admin_view.is_active
    assert catalog.get_all() == []


def test_deactivate_is_idempotent(catalog, make_draft):
    """Deactivating an inactive subscription succeeds."""
    entity = catalog.create(make_draft("Netflix"))

    catalog.deactivate(entity.id)
    catalog.deactivate(entity.id)

    assert not catalog.get_by_id_for_admin(entity.id).is_active


def test_deactivate_missing_raises_not_found(catalog):
    """Deactivating an unknown id fails."""
    with pytest.raises(SubscriptionNotFoundError):
        catalog.deactivate(999)


def test_activate_restores_previous_fields(catalog, make_draft):
    """Reactivation brings back the same record, only status and timestamp change."""
    entity = catalog.create(make_draft("Netflix"))
    before = catalog.get_by_id_for_admin(entity.id)

    catalog.deactivate(entity.id)
    activated = catalog.activate(entity.id)
    after = catalog.get_by_id(entity.id)

    assert activated.is_active
    assert activated.updated_at > before.updated_at
    ignored = {"status": SubscriptionStatus.ACTIVE, "updated_at": before.updated_at}
    assert dataclasses.replace(after, **ignored) == dataclasses.replace(before, **ignored)


def test_activate_missing_raises_not_found(catalog):
    """Activating an unknown id fails."""
    with pytest.raises(SubscriptionNotFoundError):
        catalog.activate(42)


def test_update_overwrites_fields(catalog, make_draft):
    """Update replaces every mutable field and bumps updatedAt."""
    entity = catalog.create(make_draft("Netflix"))

    updated = catalog.update(
        entity.id,
        make_draft("Netflix Premium", price=Decimal("15.99"), category="Video", website_url=None),
    )

    assert updated.id == entity.id
    assert updated.name == "Netflix Premium"
    assert updated.price == Decimal("15.99")
    assert updated.category == "Video"
    assert updated.website_url is None
    assert updated.created_at == entity.created_at
    assert updated.updated_at > entity.updated_at


def test_update_keeping_own_name_is_allowed(catalog, make_draft):
    """An update that keeps the current name is not a conflict."""
    entity = catalog.create(make_draft("Netflix"))

    updated = catalog.update(entity.id, make_draft("Netflix", price=Decimal("10.99")))

    assert updated.price == Decimal("10.99")


def test_update_rename_to_taken_name_conflicts(catalog, make_draft):
    """Renaming onto another record's name fails and leaves the original untouched."""
    target = catalog.create(make_draft("Netflix"))
    other = catalog.create(make_draft("Hulu"))
    catalog.deactivate(other.id)
    before = catalog.get_by_id_for_admin(target.id)

    with pytest.raises(SubscriptionConflictError):
        catalog.update(target.id, make_draft("Hulu", price=Decimal("1.00")))

    assert catalog.get_by_id_for_admin(target.id) == before


def test_update_inactive_raises_not_found(catalog, make_draft):
    """Only active subscriptions can be updated."""
    entity = catalog.create(make_draft("Netflix"))
    catalog.deactivate(entity.id)

    with pytest.raises(SubscriptionNotFoundError):
        catalog.update(entity.id, make_draft("Netflix"))


def test_update_missing_raises_not_found(catalog, make_draft):
    """Updating an unknown id fails."""
    with pytest.raises(SubscriptionNotFoundError):
        catalog.update(7, make_draft("Netflix"))


def test_updated_at_never_moves_backwards(store, make_draft, clock):
    """A clock that goes backwards does not rewind updatedAt."""
    clock.step = timedelta(hours=-1)
    catalog = CatalogService(store=store, ttl=60, clock=clock)
    entity = catalog.create(make_draft("Netflix"))

    updated = catalog.update(entity.id, make_draft("Netflix", price=Decimal("1.99")))

    assert updated.updated_at >= entity.updated_at


def test_search_returns_only_active_matches(catalog, make_draft):
    """search("Net") finds active Netflix but not inactive Net Extra."""
    catalog.create(make_draft("Netflix"))
    extra = catalog.create(make_draft("Net Extra"))
    catalog.create(make_draft("Spotify", category="Music"))
    catalog.deactivate(extra.id)

    results = catalog.search("Net")

    assert [entity.name for entity in results] == ["Netflix"]


def test_search_is_case_insensitive(catalog, make_draft):
    """Name search ignores case."""
    catalog.create(make_draft("Netflix"))

    assert [entity.name for entity in catalog.search("nEtF")] == ["Netflix"]


def test_get_by_category_and_categories(catalog, make_draft):
    """Category listings only include active subscriptions."""
    catalog.create(make_draft("Netflix", category="Streaming"))
    catalog.create(make_draft("Spotify", category="Music"))
    hidden = catalog.create(make_draft("Xbox Game Pass", category="Gaming"))
    catalog.deactivate(hidden.id)

    assert [entity.name for entity in catalog.get_by_category("Music")] == ["Spotify"]
    assert catalog.get_by_category("Gaming") == []
    assert catalog.get_all_categories() == ["Music", "Streaming"]


def test_statistics(catalog, make_draft):
    """3 active and 2 inactive records over 2 active categories."""
    catalog.create(make_draft("Netflix", category="Streaming"))
    catalog.create(make_draft("YouTube Premium", category="Streaming"))
    catalog.create(make_draft("Spotify", category="Music"))
    for name in ("Old One", "Old Two"):
        catalog.deactivate(catalog.create(make_draft(name, category="Legacy")).id)

    stats = catalog.statistics()

    assert stats.active == 3
    assert stats.inactive == 2
    assert stats.total == 5
    assert stats.active_categories == 2
    assert stats.by_category == {"Music": 1, "Streaming": 2}
    assert sum(stats.by_category.values()) == 3


def test_list_for_admin_includes_inactive(catalog, make_draft):
    """The admin listing covers every status unless filtered."""
    for name in ("A", "B", "C"):
        catalog.create(make_draft(name))
    catalog.deactivate(1)

    everything = catalog.list_for_admin(PageRequest(size=10))
    inactive = catalog.list_for_admin(PageRequest(size=10), active=False)

    assert everything.total_items == 3
    assert [entity.id for entity in everything.items] == [3, 2, 1]
    assert [entity.name for entity in inactive.items] == ["A"]


def test_list_for_admin_rejects_unknown_sort(catalog):
    """Unknown sort fields are rejected."""
    with pytest.raises(InvalidQueryError):
        catalog.list_for_admin(PageRequest(sort_by="password"))


def test_search_for_admin_matches_description_and_category(catalog, make_draft):
    """Admin search looks at name, description and category, any status."""
    catalog.create(make_draft("Netflix", description="Video streaming"))
    music = catalog.create(make_draft("Spotify", description="Songs", category="Music"))
    catalog.deactivate(music.id)

    by_description = catalog.search_for_admin("streaming", PageRequest())
    by_category = catalog.search_for_admin("music", PageRequest())

    assert [entity.name for entity in by_description.items] == ["Netflix"]
    assert [entity.name for entity in by_category.items] == ["Spotify"]


def test_health(catalog):
    """The store and the in-memory cache are reachable."""
    assert catalog.is_healthy() is True
    assert catalog.cache_healthy() is True
