"""Retry store singleton.

Uses Redis when ``redis_url`` is configured, otherwise a process-local store
that is only suitable for development.
"""

import logging

from redis.asyncio import Redis

from ackbot.config import get_settings
from ackbot.store.base import RetryStore
from ackbot.store.memory import InMemoryRetryStore
from ackbot.store.redis import RedisRetryStore

logger = logging.getLogger(__name__)

_store: RetryStore | None = None


def get_retry_store() -> RetryStore:
    """Return a cached retry store built from settings."""
    global _store
    if _store is None:
        settings = get_settings()
        if settings.redis_url:
            redis = Redis.from_url(settings.redis_url, decode_responses=True)
            _store = RedisRetryStore(redis, settings.retry_queue_key)
        else:
            logger.warning("REDIS_URL not set, pending checks are kept in memory only")
            _store = InMemoryRetryStore()
    return _store


def reset_store() -> None:
    """Reset the cached store. Used for testing."""
    global _store
    _store = None
