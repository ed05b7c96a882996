"""Catalog error hierarchy.

Services raise these; the handler layer maps them to HTTP status codes.
"""


class CatalogError(Exception):
    """Base class for errors raised by the catalog core."""


class SubscriptionNotFoundError(CatalogError):
    """No subscription exists at the id, or it is not visible to the caller."""

    def __init__(self, subscription_id: int) -> None:
        super().__init__("Subscription not found")
        self.subscription_id = subscription_id


class SubscriptionConflictError(CatalogError):
    """Another subscription already uses the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__("Subscription with this name already exists")
        self.name = name


class InvalidQueryError(CatalogError):
    """A listing or search query has unusable parameters (e.g. unknown sort field)."""
