"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import SubscriptionRequest
from .responses import (
    CategoryListResponse,
    CategorySubscriptionsResponse,
    HealthCheckResponse,
    MessageResponse,
    SearchResultsResponse,
    StatisticsPayload,
    StatisticsResponse,
    SubscriptionDetailResponse,
    SubscriptionItem,
    SubscriptionListResponse,
    SubscriptionMutationResponse,
    SubscriptionPageResponse,
    SubscriptionSearchPageResponse,
)

__all__ = [
    "SubscriptionRequest",
    "SubscriptionItem",
    "MessageResponse",
    "SubscriptionListResponse",
    "CategorySubscriptionsResponse",
    "SearchResultsResponse",
    "CategoryListResponse",
    "SubscriptionDetailResponse",
    "SubscriptionMutationResponse",
    "SubscriptionPageResponse",
    "SubscriptionSearchPageResponse",
    "StatisticsPayload",
    "StatisticsResponse",
    "HealthCheckResponse",
]
