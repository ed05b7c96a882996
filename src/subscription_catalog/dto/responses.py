"""Response DTOs for API endpoints.

Every body is an envelope with a ``success`` flag, matching what existing
catalog clients consume.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_serializer

from subscription_catalog.dto.base import CamelModel
from subscription_catalog.entities import CatalogStatistics, SubscriptionEntity


class SubscriptionItem(CamelModel):
    """Single subscription as returned to clients."""

    id: int = Field(..., description="Subscription identifier")
    name: str
    description: str | None = None
    price: Decimal
    currency: str
    category: str
    billing_period: str
    website_url: str | None = None
    logo_url: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("price", when_used="json")
    def _price_as_number(self, price: Decimal) -> float:
        return float(price)

    @classmethod
    def from_entity(cls, entity: SubscriptionEntity) -> "SubscriptionItem":
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            price=entity.price,
            currency=entity.currency,
            category=entity.category,
            billing_period=entity.billing_period,
            website_url=entity.website_url,
            logo_url=entity.logo_url,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class MessageResponse(CamelModel):
    """Envelope carrying only a status and a human-readable message.

    Also the shape of every error body (``success`` = false).
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable status message")


class SubscriptionListResponse(CamelModel):
    """Response DTO for public listings."""

    success: bool = True
    subscriptions: list[SubscriptionItem] = Field(default_factory=list)
    count: int = Field(..., ge=0)


class CategorySubscriptionsResponse(SubscriptionListResponse):
    category: str


class SearchResultsResponse(SubscriptionListResponse):
    search_term: str


class CategoryListResponse(CamelModel):
    success: bool = True
    categories: list[str] = Field(default_factory=list)
    count: int = Field(..., ge=0)


class SubscriptionDetailResponse(CamelModel):
    success: bool = True
    subscription: SubscriptionItem


class SubscriptionMutationResponse(CamelModel):
    """Response DTO for create, update and activate."""

    success: bool = True
    message: str
    subscription: SubscriptionItem


class SubscriptionPageResponse(CamelModel):
    """Response DTO for paginated admin listings."""

    success: bool = True
    subscriptions: list[SubscriptionItem] = Field(default_factory=list)
    current_page: int = Field(..., ge=0, description="Zero-based page index")
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)


class SubscriptionSearchPageResponse(SubscriptionPageResponse):
    search_term: str


class StatisticsPayload(CamelModel):
    active_subscriptions: int = Field(..., ge=0)
    inactive_subscriptions: int = Field(..., ge=0)
    total_subscriptions: int = Field(..., ge=0)
    active_categories: int = Field(..., ge=0)
    subscriptions_by_category: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, stats: CatalogStatistics) -> "StatisticsPayload":
        return cls(
            active_subscriptions=stats.active,
            inactive_subscriptions=stats.inactive,
            total_subscriptions=stats.total,
            active_categories=stats.active_categories,
            subscriptions_by_category=dict(stats.by_category),
        )


class StatisticsResponse(CamelModel):
    success: bool = True
    statistics: StatisticsPayload


class HealthCheckResponse(CamelModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    database_healthy: bool = Field(..., description="Whether the subscription store is reachable")
    cache_healthy: bool | None = Field(
        None,
        description="Whether the cache backend is reachable (null when caching is disabled)",
    )
