"""Catalog routes.

Static paths are registered before ``/{subscription_id}`` so they are not
captured by the id parameter.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from subscription_catalog.api.dependencies import HandlerDep
from subscription_catalog.api.security import AdminDep, WriterDep, settings_for
from subscription_catalog.dto import (
    CategoryListResponse,
    CategorySubscriptionsResponse,
    MessageResponse,
    SearchResultsResponse,
    StatisticsResponse,
    SubscriptionDetailResponse,
    SubscriptionListResponse,
    SubscriptionMutationResponse,
    SubscriptionPageResponse,
    SubscriptionRequest,
    SubscriptionSearchPageResponse,
)

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


def page_size(request: Request, size: int | None = Query(None, ge=1)) -> int:
    """Page size bounded by the running app's settings."""
    config = settings_for(request)
    if size is None:
        return config.default_page_size
    if size > config.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"size must not exceed {config.max_page_size}",
        )
    return size


PageSizeDep = Annotated[int, Depends(page_size)]


# ---------------------------------------------------------------------- #
# Admin
# ---------------------------------------------------------------------- #
@router.get("/admin/all", response_model=SubscriptionPageResponse)
def list_for_admin(
    admin: AdminDep,
    handler: HandlerDep,
    size: PageSizeDep,
    page: int = Query(0, ge=0, description="Zero-based page index"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("desc", alias="sortDir", pattern="(?i)^(asc|desc)$"),
    is_active: bool | None = Query(None, alias="isActive"),
) -> SubscriptionPageResponse:
    """List every subscription, paginated, optionally filtered by status."""
    return handler.list_for_admin(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir, is_active=is_active)


@router.get("/admin/statistics", response_model=StatisticsResponse)
def get_statistics(admin: AdminDep, handler: HandlerDep) -> StatisticsResponse:
    return handler.statistics()


@router.get("/admin/search", response_model=SubscriptionSearchPageResponse)
def search_for_admin(
    admin: AdminDep,
    handler: HandlerDep,
    size: PageSizeDep,
    search_term: str = Query(..., alias="searchTerm", min_length=1),
    page: int = Query(0, ge=0),
) -> SubscriptionSearchPageResponse:
    """Search name, description and category across active and inactive subscriptions."""
    return handler.search_for_admin(search_term=search_term, page=page, size=size)


@router.post("/admin", response_model=SubscriptionMutationResponse, status_code=status.HTTP_201_CREATED)
def create_as_admin(admin: AdminDep, handler: HandlerDep, request: SubscriptionRequest) -> SubscriptionMutationResponse:
    return handler.create(request)


@router.get("/admin/{subscription_id}", response_model=SubscriptionDetailResponse)
def get_for_admin(admin: AdminDep, handler: HandlerDep, subscription_id: int) -> SubscriptionDetailResponse:
    """Fetch a subscription regardless of whether it is active."""
    return handler.get_for_admin(subscription_id)


@router.put("/admin/{subscription_id}", response_model=SubscriptionMutationResponse)
def update_as_admin(
    admin: AdminDep,
    handler: HandlerDep,
    subscription_id: int,
    request: SubscriptionRequest,
) -> SubscriptionMutationResponse:
    return handler.update(subscription_id, request)


@router.delete("/admin/{subscription_id}", response_model=MessageResponse)
def deactivate_as_admin(admin: AdminDep, handler: HandlerDep, subscription_id: int) -> MessageResponse:
    return handler.deactivate(subscription_id)


@router.post("/admin/{subscription_id}/activate", response_model=SubscriptionMutationResponse)
@router.post("/{subscription_id}/activate", response_model=SubscriptionMutationResponse)
def activate(admin: AdminDep, handler: HandlerDep, subscription_id: int) -> SubscriptionMutationResponse:
    return handler.activate(subscription_id)


# ---------------------------------------------------------------------- #
# Public
# ---------------------------------------------------------------------- #
@router.get("", response_model=SubscriptionListResponse)
@router.get("/available", response_model=SubscriptionListResponse)
def list_available(handler: HandlerDep) -> SubscriptionListResponse:
    """All active subscriptions."""
    return handler.list_available()


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(handler: HandlerDep) -> CategoryListResponse:
    return handler.list_categories()


@router.get("/category/{category}", response_model=CategorySubscriptionsResponse)
def list_by_category(handler: HandlerDep, category: str) -> CategorySubscriptionsResponse:
    return handler.list_by_category(category)


@router.get("/search", response_model=SearchResultsResponse)
def search(handler: HandlerDep, name: str = Query(..., min_length=1)) -> SearchResultsResponse:
    """Active subscriptions whose name contains ``name`` (case-insensitive)."""
    return handler.search(name)


@router.get("/{subscription_id}", response_model=SubscriptionDetailResponse)
def get_available(handler: HandlerDep, subscription_id: int) -> SubscriptionDetailResponse:
    return handler.get_available(subscription_id)


@router.post("", response_model=SubscriptionMutationResponse, status_code=status.HTTP_201_CREATED)
def create(writer: WriterDep, handler: HandlerDep, request: SubscriptionRequest) -> SubscriptionMutationResponse:
    return handler.create(request)


@router.put("/{subscription_id}", response_model=SubscriptionMutationResponse)
def update(
    writer: WriterDep,
    handler: HandlerDep,
    subscription_id: int,
    request: SubscriptionRequest,
) -> SubscriptionMutationResponse:
    return handler.update(subscription_id, request)


@router.delete("/{subscription_id}", response_model=MessageResponse)
def deactivate(writer: WriterDep, handler: HandlerDep, subscription_id: int) -> MessageResponse:
    return handler.deactivate(subscription_id)
