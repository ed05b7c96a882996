"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic beyond plain dict conversion for the cache
- No Pydantic validation
- No external dependencies
"""

from .pagination import Page, PageRequest, SortDirection
from .statistics import CatalogStatistics
from .subscription import BillingPeriod, SubscriptionDraft, SubscriptionEntity, SubscriptionStatus

__all__ = [
    "BillingPeriod",
    "CatalogStatistics",
    "Page",
    "PageRequest",
    "SortDirection",
    "SubscriptionDraft",
    "SubscriptionEntity",
    "SubscriptionStatus",
]
