import redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel
from mentor_reputation.config import settings

T = TypeVar("T", bound=BaseModel)


class RedisCache:
    """Thin pydantic-aware wrapper over a redis-py client.

    Holds the serialised MentorReputationResponse per mentor and hands out
    the per-mentor recomputation locks.
    """

    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Read a JSON entry back into `model`; None on a miss."""
        data = self.client.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self.client.setex(key, ttl_seconds, value.model_dump_json())

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def lock(self, name: str, timeout: int, blocking_timeout: float):
        """redis-py Lock; `timeout` is the TTL, `blocking_timeout` the wait for acquire()."""
        return self.client.lock(name, timeout=timeout, blocking_timeout=blocking_timeout)
