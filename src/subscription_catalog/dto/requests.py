"""Request DTOs for API endpoints."""

from decimal import Decimal

from pydantic import ConfigDict, Field, field_validator

from subscription_catalog.dto.base import CamelModel
from subscription_catalog.entities import BillingPeriod, SubscriptionDraft


class SubscriptionRequest(CamelModel):
    """Request DTO for creating or updating a subscription.

    The handler converts this to a SubscriptionDraft for the service layer.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Subscription name, unique in the catalog", min_length=1, max_length=255)
    description: str | None = Field(None, description="Short description")
    price: Decimal = Field(..., description="Price per billing period", gt=0, max_digits=10, decimal_places=2)
    currency: str = Field("AZN", description="Currency code", min_length=1, max_length=10)
    category: str = Field(..., description="Category, e.g. Streaming", min_length=1, max_length=100)
    billing_period: str = Field(BillingPeriod.MONTHLY.value, description="MONTHLY or YEARLY")
    website_url: str | None = Field(None, description="Product website", max_length=500)
    logo_url: str | None = Field(None, description="Logo image URL", max_length=500)

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, value: object) -> object:
        return "AZN" if value is None else value

    @field_validator("billing_period", mode="before")
    @classmethod
    def _normalize_billing_period(cls, value: object) -> object:
        if value is None:
            return BillingPeriod.MONTHLY.value
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized not in {period.value for period in BillingPeriod}:
                raise ValueError("billingPeriod must be MONTHLY or YEARLY")
            return normalized
        return value

    def to_draft(self) -> SubscriptionDraft:
        return SubscriptionDraft(
            name=self.name,
            description=self.description,
            price=self.price,
            currency=self.currency,
            category=self.category,
            billing_period=self.billing_period,
            website_url=self.website_url,
            logo_url=self.logo_url,
        )
