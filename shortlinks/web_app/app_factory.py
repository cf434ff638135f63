"""FastAPI application factory."""

from fastapi import FastAPI

from .api import api_router, redirect_router
from .middleware import LoggingMiddleware


def create_app(
    service_instance,
    resolver_instance,
    config,
    logger=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Link service (may be set later in a lifespan)
        resolver_instance: Redirect resolver (may be set later in a lifespan)
        config: Configuration instance
        logger: Optional logger for request logging

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="Multi-user URL shortener",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.service = service_instance
    app.state.resolver = resolver_instance
    app.state.config = config

    app.add_middleware(LoggingMiddleware, logger=logger)

    app.include_router(api_router, prefix="/api", tags=["API"])
    # Registered last so /api/* always wins over the catch-all code route
    app.include_router(redirect_router, tags=["Redirect"])

    return app
