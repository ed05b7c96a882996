"""Initial catalog content loaded into an empty store."""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from subscription_catalog.entities import SubscriptionDraft
from subscription_catalog.errors import SubscriptionConflictError
from subscription_catalog.protocols import SubscriptionStore

logger = logging.getLogger(__name__)


def _draft(name: str, description: str, price: str, category: str, domain: str) -> SubscriptionDraft:
    return SubscriptionDraft(
        name=name,
        description=description,
        price=Decimal(price),
        currency="AZN",
        category=category,
        billing_period="MONTHLY",
        website_url=f"https://{domain}",
        logo_url=f"https://logo.clearbit.com/{domain}",
    )


DEFAULT_CATALOG: tuple[SubscriptionDraft, ...] = (
    # Streaming
    _draft("Netflix", "Video streaming service", "9.99", "Streaming", "netflix.com"),
    _draft("Spotify", "Music streaming service", "9.99", "Music", "spotify.com"),
    _draft("YouTube Premium", "Ad-free YouTube and music", "11.99", "Streaming", "youtube.com"),
    _draft("Amazon Prime", "Shopping and streaming benefits", "8.99", "Shopping", "amazon.com"),
    # Gaming
    _draft("PlayStation Plus", "Gaming subscription", "9.99", "Gaming", "playstation.com"),
    _draft("Xbox Game Pass", "Gaming subscription", "14.99", "Gaming", "xbox.com"),
    # Software
    _draft("Microsoft 365", "Office suite", "6.99", "Software", "microsoft.com"),
    _draft("Adobe Creative Cloud", "Design software suite", "20.99", "Software", "adobe.com"),
    # Cloud storage
    _draft("Dropbox", "Cloud storage service", "9.99", "Storage", "dropbox.com"),
    _draft("iCloud+", "Apple cloud storage", "0.99", "Storage", "apple.com"),
)


def seed_catalog(
    store: SubscriptionStore,
    drafts: tuple[SubscriptionDraft, ...] = DEFAULT_CATALOG,
) -> int:
    """Load ``drafts`` if the store is empty.

    Entries whose name already exists are skipped.

    Returns:
        Number of subscriptions inserted
    """
    if store.count_all() > 0:
        return 0

    logger.info("Loading initial subscription data...")
    now = datetime.now(timezone.utc)
    inserted = 0
    for draft in drafts:
        if store.exists_by_name(draft.name):
            continue
        try:
            store.add(draft, now=now)
        except SubscriptionConflictError:
            # another worker seeded the same name first
            continue
        inserted += 1
        logger.debug("Created subscription: %s", draft.name)

    logger.info("Initial subscription data loaded: %d entries", inserted)
    return inserted
