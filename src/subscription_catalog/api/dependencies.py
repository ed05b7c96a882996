"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
    - A handler placed in app.state before startup (tests) is used as-is
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from subscription_catalog.config import Settings, configure_logging, get_redis_client, settings
from subscription_catalog.database import build_engine, build_session_factory, init_db
from subscription_catalog.handlers import SubscriptionHandler
from subscription_catalog.protocols import CacheStore
from subscription_catalog.repositories import (
    InMemoryCacheRepository,
    RedisCacheRepository,
    SqlAlchemySubscriptionRepository,
    create_notifier,
)
from subscription_catalog.services import CatalogService, NotificationService, seed_catalog

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> SubscriptionHandler:
    """Dependency injection for SubscriptionHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The SubscriptionHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "subscription_handler", None)
    if handler is None:
        raise RuntimeError("SubscriptionHandler not initialized. Check lifespan setup.")
    return handler


def build_cache(config: Settings) -> CacheStore | None:
    """Create the cache named by CACHE_BACKEND (None when disabled)."""
    if config.cache_backend == "redis":
        return RedisCacheRepository.create(redis_client=get_redis_client(config))
    if config.cache_backend == "memory":
        return InMemoryCacheRepository()
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Store, cache and notifier (data access) - created explicitly
    2. Service (business logic) - reachable via the handler
    3. Handler (HTTP endpoints) - stored in app.state.subscription_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Disposes the engine and removes what this lifespan created from app.state
    """
    config: Settings = getattr(app.state, "settings", None) or settings
    app.state.settings = config
    configure_logging(config.log_level)

    if getattr(app.state, "subscription_handler", None) is not None:
        logger.info("Using preconfigured subscription handler")
        yield
        return

    engine = build_engine(config=config)
    init_db(engine)
    store = SqlAlchemySubscriptionRepository(build_session_factory(engine))

    if config.seed_on_startup:
        seed_catalog(store)

    cache = build_cache(config)
    notifications = NotificationService.create(notifier=create_notifier(config), config=config)
    catalog_service = CatalogService.create(
        store=store,
        cache=cache,
        notifications=notifications,
        ttl=config.cache_ttl,
    )
    app.state.subscription_handler = SubscriptionHandler(catalog_service=catalog_service)

    logger.info("Catalog service initialized")
    logger.info("Cache backend: %s (ttl=%ss)", config.cache_backend, catalog_service.ttl)
    logger.info("Database healthy: %s", catalog_service.is_healthy())
    if cache is not None and not catalog_service.cache_healthy():
        logger.warning("Cache is unreachable; reads will go to the database until it recovers")

    yield

    del app.state.subscription_handler
    engine.dispose()
    logger.info("Catalog service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[SubscriptionHandler, Depends(get_handler)]