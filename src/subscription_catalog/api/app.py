from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from subscription_catalog.api.dependencies import HandlerDep, lifespan
from subscription_catalog.api.routes import router
from subscription_catalog.config import Settings, settings
from subscription_catalog.dto import HealthCheckResponse
from subscription_catalog.handlers import SubscriptionHandler

API_TITLE = "Subscription Catalog API"
API_VERSION = "0.1.0"
API_DESCRIPTION = "Catalog of subscription offerings with cache-aside reads backed by Redis"


def _envelope(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error in the common envelope."""
    return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with a readable message."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return _envelope(status.HTTP_400_BAD_REQUEST, "; ".join(problems) or "Invalid request")


def create_app(config: Settings | None = None, handler: SubscriptionHandler | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings to run with. Defaults to the environment-derived settings.
        handler: Preconfigured handler. When given, the lifespan skips building
            the database, cache and notifier.

    Returns:
        Configured FastAPI app
    """
    config = config or settings

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = config
    if handler is not None:
        app.state.subscription_handler = handler

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=config.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.include_router(router)

    @app.get("/")
    def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": API_TITLE,
            "version": API_VERSION,
            "description": API_DESCRIPTION,
            "endpoints": {
                "subscriptions": "/api/subscriptions",
                "admin": "/api/subscriptions/admin",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HandlerDep, response: Response) -> HealthCheckResponse:
        """Health check endpoint."""
        result = handler.health_check()
        if not result.database_healthy:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return result

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "subscription_catalog.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
