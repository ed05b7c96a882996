"""Catalog statistics domain entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogStatistics:
    """Aggregate counts over the whole catalog.

    Attributes:
        active: Number of active subscriptions
        inactive: Number of soft-deleted subscriptions
        active_categories: Distinct categories among active subscriptions
        by_category: Active subscription count per category
    """

    active: int
    inactive: int
    active_categories: int
    by_category: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.active + self.inactive
