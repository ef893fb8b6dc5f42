"""
Per-Mentor Lock - Mentor Reputation Service
mentor_reputation/services/mentor_lock.py

Serialises "upsert review → read reviews → compute → write profile" per
mentor so two concurrent submissions cannot duplicate a review or overwrite
each other's derived state.

Uses a Redis lock when the cache is reachable. When Redis is unavailable,
either at lookup or when the lock call itself fails, the manager falls back,
with a warning, to a process-local threading.Lock per mentor; that only
serialises writers inside one process, and the optimistic VERSION check in
MentorRepository.save_reputation covers the rest.
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Callable, Iterator, Optional
from uuid import UUID

import redis
from redis.exceptions import LockError

from mentor_reputation.config import settings
from mentor_reputation.core.exceptions import MentorLockTimeoutException
from mentor_reputation.services.cache import get_cache, reset_cache
from mentor_reputation.services.redis_cache import RedisCache

logger = logging.getLogger(__name__)


def mentor_lock_name(mentor_id: UUID) -> str:
    return f"lock:mentor-reputation:{mentor_id}"


class MentorLockManager:
    """Hands out one exclusive section per mentor id."""

    def __init__(
        self,
        cache_provider: Callable[[], Optional[RedisCache]] = get_cache,
        timeout: int = settings.REPUTATION_LOCK_TIMEOUT,
        blocking_timeout: int = settings.REPUTATION_LOCK_BLOCKING_TIMEOUT,
    ):
        self._cache_provider = cache_provider
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout
        # Entries vanish once no thread holds or waits on the lock
        self._local_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._registry_lock = threading.Lock()

    @contextmanager
    def hold(self, mentor_id: UUID) -> Iterator[None]:
        cache = self._cache_provider()
        redis_lock = None
        if cache is not None:
            redis_lock = self._acquire_redis(cache, mentor_id)

        if redis_lock is not None:
            try:
                yield
            finally:
                self._release_redis(redis_lock, mentor_id)
        else:
            logger.warning(
                "Redis unavailable, using process-local mentor lock",
                extra={"mentor_id": str(mentor_id)},
            )
            with self._hold_local(mentor_id):
                yield

    def _acquire_redis(self, cache: RedisCache, mentor_id: UUID):
        """Acquired redis-py Lock, or None when Redis failed mid-call."""
        lock = cache.lock(
            mentor_lock_name(mentor_id),
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )
        try:
            acquired = lock.acquire()
        except redis.RedisError as e:
            logger.warning(
                "Redis lock acquire failed",
                extra={"mentor_id": str(mentor_id), "error": str(e)},
            )
            # Next get_cache() pings again instead of reusing the dead client
            reset_cache()
            return None
        if not acquired:
            raise MentorLockTimeoutException(str(mentor_id), self.blocking_timeout)
        return lock

    def _release_redis(self, lock, mentor_id: UUID) -> None:
        try:
            lock.release()
        except LockError as e:
            # TTL elapsed during recomputation
            logger.warning(
                "Mentor lock expired before release",
                extra={"mentor_id": str(mentor_id), "error": str(e)},
            )
        except redis.RedisError as e:
            # Key expires on its own after `timeout`
            logger.warning(
                "Mentor lock release failed",
                extra={"mentor_id": str(mentor_id), "error": str(e)},
            )

    @contextmanager
    def _hold_local(self, mentor_id: UUID) -> Iterator[None]:
        with self._registry_lock:
            lock = self._local_locks.get(str(mentor_id))
            if lock is None:
                lock = threading.Lock()
                self._local_locks[str(mentor_id)] = lock
        if not lock.acquire(timeout=self.blocking_timeout):
            raise MentorLockTimeoutException(str(mentor_id), self.blocking_timeout)
        try:
            yield
        finally:
            lock.release()
