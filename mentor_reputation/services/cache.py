"""
Reputation Cache - Mentor Reputation Service
mentor_reputation/services/cache.py

Process-wide RedisCache singleton plus the reputation key scheme.
Redis is optional: when it cannot be reached get_cache() returns None and
callers skip caching and fall back to process-local mentor locks.
"""
import logging
import redis
from typing import Optional
from uuid import UUID
from mentor_reputation.services.redis_cache import RedisCache
from mentor_reputation.config import settings

logger = logging.getLogger(__name__)

TTL_REPUTATION = settings.CACHE_TTL_REPUTATION

_cache: Optional[RedisCache] = None


def reputation_cache_key(mentor_id: UUID) -> str:
    return f"reputation:{mentor_id}"


def get_cache() -> Optional[RedisCache]:
    """Connected RedisCache, or None while Redis is unreachable."""
    global _cache
    if _cache is None:
        try:
            cache = RedisCache()
            cache.ping()
        except (redis.RedisError, ConnectionError) as e:
            logger.warning(f"Redis unavailable, reputation cache disabled: {e}")
            return None
        _cache = cache
    return _cache


def reset_cache() -> None:
    """Drop the singleton so the next get_cache() reconnects."""
    global _cache
    _cache = None
