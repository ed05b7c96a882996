"""HTTP handlers for catalog operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error translation.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from subscription_catalog.dto import (
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
    SubscriptionRequest,
    SubscriptionSearchPageResponse,
)
from subscription_catalog.entities import Page, PageRequest, SortDirection, SubscriptionEntity
from subscription_catalog.errors import InvalidQueryError, SubscriptionConflictError, SubscriptionNotFoundError
from subscription_catalog.services import CatalogService

logger = logging.getLogger(__name__)


def _items(entities: list[SubscriptionEntity]) -> list[SubscriptionItem]:
    return [SubscriptionItem.from_entity(entity) for entity in entities]


def _page_fields(page: Page[SubscriptionEntity]) -> dict:
    return {
        "subscriptions": _items(page.items),
        "current_page": page.page,
        "total_items": page.total_items,
        "total_pages": page.total_pages,
    }


class SubscriptionHandler:
    """HTTP handlers for catalog operations.

    This handler delegates business logic to CatalogService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = SubscriptionHandler(catalog_service=catalog)

        @router.get("/available", response_model=SubscriptionListResponse)
        def list_available(handler: HandlerDep):
            return handler.list_available()
        ```
    """

    def __init__(self, catalog_service: CatalogService) -> None:
        """Initialize the subscription handler.

        Args:
            catalog_service: The catalog service for business logic (required).
        """
        self._catalog = catalog_service

    @property
    def catalog(self) -> CatalogService:
        return self._catalog

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """Map catalog errors to HTTP errors; anything unexpected becomes a 500."""
        try:
            yield
        except SubscriptionNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except (SubscriptionConflictError, InvalidQueryError) as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except HTTPException:
            raise
        except Exception as e:
            logger.exception("Failed to %s", action)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to {action}: {e}",
            ) from e

    # ------------------------------------------------------------------ #
    # Public
    # ------------------------------------------------------------------ #
    def list_available(self) -> SubscriptionListResponse:
        """Handle GET /api/subscriptions requests."""
        with self._translate_errors("get available subscriptions"):
            subscriptions = self._catalog.get_all()
        return SubscriptionListResponse(subscriptions=_items(subscriptions), count=len(subscriptions))

    def get_available(self, subscription_id: int) -> SubscriptionDetailResponse:
        """Handle GET /api/subscriptions/{id} requests.

        Raises:
            HTTPException: 404 if the subscription is missing or inactive
        """
        with self._translate_errors("get subscription"):
            entity = self._catalog.get_by_id(subscription_id)
        return SubscriptionDetailResponse(subscription=SubscriptionItem.from_entity(entity))

    def list_by_category(self, category: str) -> CategorySubscriptionsResponse:
        with self._translate_errors("get subscriptions by category"):
            subscriptions = self._catalog.get_by_category(category)
        return CategorySubscriptionsResponse(
            subscriptions=_items(subscriptions),
            category=category,
            count=len(subscriptions),
        )

    def list_categories(self) -> CategoryListResponse:
        with self._translate_errors("get categories"):
            categories = self._catalog.get_all_categories()
        return CategoryListResponse(categories=categories, count=len(categories))

    def search(self, name: str) -> SearchResultsResponse:
        with self._translate_errors("search subscriptions"):
            subscriptions = self._catalog.search(name)
        return SearchResultsResponse(
            subscriptions=_items(subscriptions),
            search_term=name,
            count=len(subscriptions),
        )

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def create(self, request: SubscriptionRequest) -> SubscriptionMutationResponse:
        """Handle subscription creation.

        Raises:
            HTTPException: 400 if the name is already taken
        """
        with self._translate_errors("create subscription"):
            entity = self._catalog.create(request.to_draft())
        return SubscriptionMutationResponse(
            message="Subscription created successfully",
            subscription=SubscriptionItem.from_entity(entity),
        )

    def update(self, subscription_id: int, request: SubscriptionRequest) -> SubscriptionMutationResponse:
        """Handle subscription updates.

        Raises:
            HTTPException: 404 if no active subscription exists, 400 on a name clash
        """
        with self._translate_errors("update subscription"):
            entity = self._catalog.update(subscription_id, request.to_draft())
        return SubscriptionMutationResponse(
            message="Subscription updated successfully",
            subscription=SubscriptionItem.from_entity(entity),
        )

    def deactivate(self, subscription_id: int) -> MessageResponse:
        with self._translate_errors("delete subscription"):
            self._catalog.deactivate(subscription_id)
        return MessageResponse(success=True, message="Subscription deleted successfully")

    def activate(self, subscription_id: int) -> SubscriptionMutationResponse:
        with self._translate_errors("activate subscription"):
            entity = self._catalog.activate(subscription_id)
        return SubscriptionMutationResponse(
            message="Subscription activated successfully",
            subscription=SubscriptionItem.from_entity(entity),
        )

    # ------------------------------------------------------------------ #
    # Admin reads
    # ------------------------------------------------------------------ #
    def list_for_admin(
        self,
        page: int,
        size: int,
        sort_by: str,
        sort_dir: str,
        is_active: bool | None,
    ) -> SubscriptionPageResponse:
        """Handle GET /api/subscriptions/admin/all requests.

        Raises:
            HTTPException: 400 on an unknown sort field
        """
        direction = SortDirection.DESC if sort_dir.lower() == "desc" else SortDirection.ASC
        request = PageRequest(page=page, size=size, sort_by=sort_by, direction=direction)
        with self._translate_errors("get subscriptions for admin"):
            result = self._catalog.list_for_admin(request, active=is_active)
        return SubscriptionPageResponse(**_page_fields(result))

    def get_for_admin(self, subscription_id: int) -> SubscriptionDetailResponse:
        with self._translate_errors("get subscription for admin"):
            entity = self._catalog.get_by_id_for_admin(subscription_id)
        return SubscriptionDetailResponse(subscription=SubscriptionItem.from_entity(entity))

    def search_for_admin(self, search_term: str, page: int, size: int) -> SubscriptionSearchPageResponse:
        request = PageRequest(page=page, size=size)
        with self._translate_errors("search subscriptions for admin"):
            result = self._catalog.search_for_admin(search_term, request)
        return SubscriptionSearchPageResponse(search_term=search_term, **_page_fields(result))

    def statistics(self) -> StatisticsResponse:
        with self._translate_errors("generate statistics"):
            stats = self._catalog.statistics()
        return StatisticsResponse(statistics=StatisticsPayload.from_entity(stats))

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        database_healthy = self._catalog.is_healthy()
        return HealthCheckResponse(
            status="healthy" if database_healthy else "unhealthy",
            database_healthy=database_healthy,
            cache_healthy=self._catalog.cache_healthy(),
        )
