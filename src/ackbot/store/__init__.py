"""Retry queue persistence: store backends and the queue manager."""

from ackbot.store.base import RetryStore
from ackbot.store.client import get_retry_store, reset_store
from ackbot.store.memory import InMemoryRetryStore
from ackbot.store.queue import RetryQueue
from ackbot.store.redis import RedisRetryStore

__all__ = [
    "InMemoryRetryStore",
    "RedisRetryStore",
    "RetryQueue",
    "RetryStore",
    "get_retry_store",
    "reset_store",
]
