"""Shared async Redis client used for request counters."""
from typing import Optional
import logging
from redis import asyncio as aioredis
from app.core.config import settings

logger = logging.getLogger(__name__)


class RedisCache:
    def __init__(self):
        self.redis_url = settings.REDIS_URL
        self.redis: Optional[aioredis.Redis] = None

    async def connect(self):
        if not self.redis:
            try:
                self.redis = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                logger.info("Connected to Redis cache.")
            except Exception as e:
                logger.error(f"Failed to connect to Redis: {e}")

    async def incr(self, key: str, ttl: int) -> Optional[int]:
        """Increment a fixed-window counter, starting its expiry on first hit.

        Returns the new count, or None when Redis is unreachable.
        """
        if not self.redis:
            await self.connect()
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, ttl, nx=True)
                count, _ = await pipe.execute()
            return int(count)
        except Exception as e:
            logger.error(f"Redis incr error for key {key}: {e}")
            return None

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            self.redis = None

# Singleton instance
redis_cache = RedisCache()
