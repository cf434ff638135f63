"""Redirect resolution for short codes."""

import logging
from typing import Optional

from .database.base import LinkStore
from .database.cache import RedisCache
from .errors import LinkNotFoundError
from .service import call_with_store_retries
from .shortcode import ShortCodeGenerator


class RedirectResolver:
    """Resolve visited short codes to their target URL and count the visit."""

    def __init__(
        self,
        store: LinkStore,
        cache: Optional[RedisCache] = None,
        generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        store_retries: int = 3,
    ):
        self.store = store
        self.cache = cache
        self.generator = generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.store_retries = store_retries

    async def resolve(self, short_code: str) -> str:
        """Resolve a short code and record one click.

        The click increment is attempted exactly once. If it fails the
        error is logged and the original URL is still returned, so a
        struggling store never blocks redirects.

        Args:
            short_code: The visited short code

        Returns:
            The original URL

        Raises:
            LinkNotFoundError: If the code is malformed or unknown
            StoreUnavailable: If the lookup itself kept failing
        """
        if not self.generator.is_valid_format(short_code):
            self.logger.debug(f"Rejected malformed short code: {short_code!r}")
            raise LinkNotFoundError(short_code)

        link_id, original_url = await self._lookup(short_code)

        try:
            await self.store.increment_clicks(link_id)
        except Exception as e:
            self.logger.error(
                f"Failed to record click for {short_code} (link {link_id}): {e}"
            )

        return original_url

    async def _lookup(self, short_code: str):
        """Return (link id, original URL) from the cache or the store."""
        if self.cache:
            cached = await self.cache.get_link(short_code)
            if cached:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached

        link = await call_with_store_retries(
            lambda: self.store.find_by_code(short_code),
            self.store_retries,
            self.logger,
            f"Resolving {short_code}",
        )
        if link is None:
            self.logger.info(f"Short code not found: {short_code}")
            raise LinkNotFoundError(short_code)

        if self.cache:
            await self.cache.set_link(short_code, link.id, link.original_url)

        self.logger.debug(f"Resolved {short_code} -> {link.original_url}")
        return link.id, link.original_url
