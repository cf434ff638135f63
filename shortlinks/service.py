"""Link creation service."""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from .common.validators import is_valid_owner_id, is_valid_url
from .database.base import LinkStore
from .database.cache import RedisCache
from .database.models import Link
from .errors import (
    CollisionError,
    ExhaustedError,
    InvalidLinkError,
    LinkNotFoundError,
    StoreUnavailable,
)
from .shortcode import ShortCodeGenerator

T = TypeVar("T")


async def call_with_store_retries(
    operation: Callable[[], Awaitable[T]],
    attempts: int,
    logger: logging.Logger,
    description: str,
) -> T:
    """Run ``operation``, retrying it while the store is unavailable.

    Args:
        operation: Zero-argument callable returning a fresh awaitable
        attempts: Total number of tries (at least one)
        logger: Logger for retry messages
        description: What is being attempted, for log lines

    Raises:
        StoreUnavailable: If every attempt failed
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except StoreUnavailable as e:
            if attempt >= attempts:
                logger.error(f"{description} failed after {attempt} attempts: {e}")
                raise
            logger.warning(f"{description} attempt {attempt} failed, retrying: {e}")
            attempt += 1


class LinkService:
    """Service layer for creating and listing short links."""

    def __init__(
        self,
        store: LinkStore,
        generator: Optional[ShortCodeGenerator] = None,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
        max_attempts: int = 10,
        store_retries: int = 3,
    ):
        """Initialize link service.

        Args:
            store: Link store instance
            generator: Optional short code generator
            cache: Optional cache warmed with new links
            logger: Optional logger
            max_attempts: Candidate codes tried before giving up
            store_retries: Tries per call while the store is unavailable
        """
        self.store = store
        self.generator = generator or ShortCodeGenerator()
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.max_attempts = max_attempts
        self.store_retries = store_retries

    async def create_link(self, owner_id: str, original_url: str) -> Link:
        """Create a new short link for a user.

        Candidate codes are inserted directly; a collision reported by the
        store's uniqueness constraint just moves on to the next candidate.

        Args:
            owner_id: Identifier supplied by the auth layer
            original_url: The original long URL

        Returns:
            The stored link

        Raises:
            InvalidLinkError: If the owner id or URL is not acceptable
            ExhaustedError: If ``max_attempts`` candidates all collided
            StoreUnavailable: If the store kept failing
        """
        is_valid, error = is_valid_owner_id(owner_id)
        if not is_valid:
            raise InvalidLinkError(error)
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidLinkError(f"Invalid URL: {error}")

        owner_id = str(owner_id)
        store_failures = 0
        collisions = 0

        while collisions < self.max_attempts:
            short_code = self.generator.generate()
            try:
                link = await self.store.insert(original_url, short_code, owner_id)
            except CollisionError:
                collisions += 1
                self.logger.warning(
                    f"Short code collision on {short_code} "
                    f"(attempt {collisions}/{self.max_attempts})"
                )
                continue
            except StoreUnavailable as e:
                store_failures += 1
                if store_failures >= self.store_retries:
                    self.logger.error(
                        f"Creating link failed after {store_failures} store errors: {e}"
                    )
                    raise
                self.logger.warning(f"Store unavailable while creating link, retrying: {e}")
                continue

            if self.cache:
                await self.cache.set_link(link.short_code, link.id, link.original_url)

            self.logger.info(
                f"Created short link: {link.short_code} -> {original_url} (owner {owner_id})"
            )
            return link

        self.logger.error(
            f"Short code space exhausted: {self.max_attempts} consecutive collisions"
        )
        raise ExhaustedError(self.max_attempts)

    async def list_links(self, owner_id: str) -> List[Link]:
        """List an owner's links in creation order."""
        is_valid, error = is_valid_owner_id(owner_id)
        if not is_valid:
            raise InvalidLinkError(error)

        return await call_with_store_retries(
            lambda: self.store.list_by_owner(str(owner_id)),
            self.store_retries,
            self.logger,
            f"Listing links for owner {owner_id}",
        )

    async def get_link(self, short_code: str) -> Link:
        """Get a link with its current click count, without counting a click.

        Raises:
            LinkNotFoundError: If the code is unknown
        """
        link = await call_with_store_retries(
            lambda: self.store.find_by_code(short_code),
            self.store_retries,
            self.logger,
            f"Looking up {short_code}",
        )
        if link is None:
            raise LinkNotFoundError(short_code)
        return link

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
