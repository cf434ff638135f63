"""Redis cache layer for short link lookups."""

import json
import logging
from typing import Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisCache:
    """Redis cache of short code -> (link id, original URL).

    Links never change after creation, so entries only expire by TTL.
    Cache failures are logged and treated as misses.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except RedisError as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get(self, key: str) -> Optional[str]:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(key)
        except RedisError as e:
            self.logger.error(f"Cache get error: {e}")
            return None

    async def set(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
    ) -> bool:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Optional TTL override (seconds)

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        try:
            ttl = ttl or self.ttl_seconds
            await self.client.setex(key, ttl, value)
            return True
        except RedisError as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def get_link(self, short_code: str) -> Optional[Tuple[int, str]]:
        """Get the cached (link id, original URL) for a short code."""
        value = await self.get(self.get_cache_key(short_code))
        if value is None:
            return None

        try:
            data = json.loads(value)
            return int(data["id"]), data["original_url"]
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Ignoring malformed cache entry for {short_code}: {e}")
            return None

    async def set_link(self, short_code: str, link_id: int, original_url: str) -> bool:
        """Cache the mapping for a short code."""
        value = json.dumps({"id": link_id, "original_url": original_url})
        return await self.set(self.get_cache_key(short_code), value)

    async def ping(self) -> bool:
        """Check that Redis answers."""
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.ping()
            return True
        except RedisError as e:
            self.logger.error(f"Cache ping error: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")

    def get_cache_key(self, short_code: str) -> str:
        """Generate cache key for short code.

        Args:
            short_code: The short code

        Returns:
            Cache key
        """
        return f"shortlinks:link:{short_code}"
