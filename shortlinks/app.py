"""
Main entry point for the short links service.

Usage:
    shortlinks            (console script)
    python -m shortlinks.app

Environment variables:
    DATABASE_URL - Link store URL (sqlite:///... or postgresql://...)
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links
    OWNER_HEADER - Header carrying the authenticated user id
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .common.logging_config import setup_logging
from .config import Config, load_config
from .database import RedisCache, create_store
from .resolver import RedirectResolver
from .service import LinkService
from .shortcode import ShortCodeGenerator
from .web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store, cache, service and resolver for the app's lifetime."""
    config: Config = app.state.config
    logger = app.state.logger

    logger.info("Starting short links service...")

    store = create_store(
        config.database_url,
        operation_timeout=config.store_timeout_seconds,
        create_tables=config.create_tables,
        logger=logger,
    )
    await store.connect()

    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    generator = ShortCodeGenerator(length=config.short_code_length)
    service = LinkService(
        store=store,
        generator=generator,
        cache=cache,
        logger=logger,
        max_attempts=config.max_collision_retries,
        store_retries=config.store_retries,
    )
    app.state.service = service
    app.state.resolver = RedirectResolver(
        store=store,
        cache=cache,
        generator=generator,
        logger=logger,
        store_retries=config.store_retries,
    )

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short links service...")
    await service.close()
    logger.info("Service stopped")


def build_app(config: Config, logger) -> FastAPI:
    """Create the app with its components built in the lifespan."""
    app = create_app(
        service_instance=None,
        resolver_instance=None,
        config=config,
        logger=logger,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    return app


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short Links Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'redis_url', 'database_url'})}")

    app = build_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
