"""Subscription domain entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class SubscriptionStatus(str, Enum):
    """Two-state lifecycle of a catalog entry.

    INACTIVE is a soft delete: the record stays in the store and is
    visible to admins, but is hidden from every public listing.
    """

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    @classmethod
    def from_flag(cls, is_active: bool) -> "SubscriptionStatus":
        return cls.ACTIVE if is_active else cls.INACTIVE

    @property
    def is_active(self) -> bool:
        return self is SubscriptionStatus.ACTIVE


class BillingPeriod(str, Enum):
    """Supported billing periods."""

    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class SubscriptionDraft:
    """The mutable fields of a subscription, as supplied on create or update.

    Attributes:
        name: Display name, unique across the whole catalog
        price: Price per billing period, strictly positive
        category: Free-form category (e.g. "Streaming")
        description: Optional short description
        currency: ISO-like currency code
        billing_period: MONTHLY or YEARLY
        website_url: Optional product website
        logo_url: Optional logo image
    """

    name: str
    price: Decimal
    category: str
    description: str | None = None
    currency: str = "AZN"
    billing_period: str = BillingPeriod.MONTHLY.value
    website_url: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class SubscriptionEntity:
    """Domain entity for a persisted catalog entry.

    This is an internal representation used by services and repositories,
    and the shape stored in the cache. For API contracts, use the DTO
    classes from the dto package.
    """

    id: int
    name: str
    price: Decimal
    category: str
    status: SubscriptionStatus
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    currency: str = "AZN"
    billing_period: str = BillingPeriod.MONTHLY.value
    website_url: str | None = None
    logo_url: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict (Decimal and datetimes as strings)."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "currency": self.currency,
            "category": self.category,
            "billing_period": self.billing_period,
            "website_url": self.website_url,
            "logo_url": self.logo_url,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubscriptionEntity":
        """Rebuild an entity from the output of :meth:`to_dict`."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            description=data.get("description"),
            price=Decimal(data["price"]),
            currency=data["currency"],
            category=data["category"],
            billing_period=data["billing_period"],
            website_url=data.get("website_url"),
            logo_url=data.get("logo_url"),
            status=SubscriptionStatus(data["status"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
