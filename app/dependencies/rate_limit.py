"""Per-IP fixed-window rate limiting backed by Redis.

Counters live in Redis so limits hold across every API instance. When Redis
is unreachable the request is allowed and the failure is logged by the cache.
"""
import logging
from fastapi import Request
from app.cache.cache_service import redis_cache
from app.core.config import settings
from app.utils.errors import TooManyRequests
from app.utils.helpers import get_client_ip

logger = logging.getLogger(__name__)


async def hit(key: str, limit: int, window_seconds: int) -> bool:
    """Count one request against `key`; False once the window's limit is exceeded."""
    count = await redis_cache.incr(f"ratelimit:{key}", window_seconds)
    if count is None:
        return True
    return count <= limit


async def rate_limit(request: Request):
    if not settings.RATE_LIMIT_ENABLED:
        return True

    key = f"{get_client_ip(request)}:{request.url.path}"
    if not await hit(key, settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_PERIOD_SECONDS):
        raise TooManyRequests()
    return True


async def support_rate_limit(request: Request):
    """Bound support-form submissions per source address."""
    if not settings.RATE_LIMIT_ENABLED:
        return True

    client_ip = get_client_ip(request)
    if not await hit(f"support:{client_ip}", settings.SUPPORT_RATE_LIMIT, settings.SUPPORT_RATE_LIMIT_WINDOW_SECONDS):
        logger.warning("Support form rate limit exceeded for %s", client_ip)
        raise TooManyRequests("Rate limit exceeded. Please wait before submitting again.")
    return True
