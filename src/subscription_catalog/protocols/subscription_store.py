"""Subscription storage protocol.

Defines the durable store the catalog core reads and writes. The store is
the single source of truth; it owns name uniqueness and soft-delete state.

Implementations can include:
- SQLAlchemy over SQLite or PostgreSQL (default)
- Any other transactional store honouring the unique-name constraint
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from subscription_catalog.entities import Page, PageRequest, SubscriptionDraft, SubscriptionEntity


@runtime_checkable
class SubscriptionStore(Protocol):
    """Protocol for subscription persistence.

    Every method runs in its own transaction and is durable on return.
    Violating the unique-name constraint raises SubscriptionConflictError.
    """

    def add(self, draft: SubscriptionDraft, now: datetime) -> SubscriptionEntity:
        """Insert a new active subscription with created/updated set to ``now``.

        Raises:
            SubscriptionConflictError: If the name is already taken
        """
        ...

    def get(self, subscription_id: int) -> SubscriptionEntity | None:
        """Fetch a subscription by id regardless of status."""
        ...

    def exists_by_name(self, name: str) -> bool:
        """Check whether any subscription, active or not, uses ``name``."""
        ...

    def update(self, entity: SubscriptionEntity) -> SubscriptionEntity:
        """Overwrite every mutable field (and status) of an existing record.

        Raises:
            SubscriptionNotFoundError: If the record vanished
            SubscriptionConflictError: If the new name is already taken
        """
        ...

    def list_by_status(self, active: bool) -> list[SubscriptionEntity]:
        """All subscriptions with the given status, ordered by id."""
        ...

    def list_by_category(self, category: str, active: bool) -> list[SubscriptionEntity]:
        """Subscriptions in ``category`` with the given status, ordered by id."""
        ...

    def list_active_categories(self) -> list[str]:
        """Distinct categories among active subscriptions, sorted."""
        ...

    def search_active_by_name(self, term: str) -> list[SubscriptionEntity]:
        """Active subscriptions whose name contains ``term``, case-insensitively."""
        ...

    def find_page(self, request: PageRequest, active: bool | None = None) -> Page[SubscriptionEntity]:
        """One page over all subscriptions, optionally filtered by status.

        Raises:
            InvalidQueryError: If ``request.sort_by`` is not a sortable field
        """
        ...

    def search_page(self, term: str, request: PageRequest) -> Page[SubscriptionEntity]:
        """One page of subscriptions matching ``term`` in name, description or category."""
        ...

    def count_by_status(self, active: bool) -> int:
        ...

    def count_active_categories(self) -> int:
        ...

    def count_active_by_category(self) -> dict[str, int]:
        ...

    def count_all(self) -> int:
        ...

    def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
