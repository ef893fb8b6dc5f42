"""
Services module for the Mentor Reputation Service.
"""

from mentor_reputation.services.cache import get_cache
from mentor_reputation.services.redis_cache import RedisCache
from mentor_reputation.services.snowflake import get_snowflake_connection

__all__ = [
    "get_cache",
    "RedisCache",
    "get_snowflake_connection",
]
