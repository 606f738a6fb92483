"""Redis sorted-set retry store."""

import logging
import math

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisRetryStore:
    """RetryStore on a single Redis sorted set.

    Members are ``channel:timestamp`` keys, scores are Unix epoch seconds.
    """

    def __init__(self, redis: Redis, name: str) -> None:
        self._redis = redis
        self._name = name

    async def upsert(self, key: str, score: float) -> None:
        # GT: new members are added, existing ones only move forward in time
        await self._redis.zadd(self._name, {key: score}, gt=True)

    async def range_by_score(self, max_score: float) -> list[str]:
        upper = "+inf" if math.isinf(max_score) else max_score
        members = await self._redis.zrangebyscore(self._name, "-inf", upper)
        return [m.decode() if isinstance(m, bytes) else m for m in members]

    async def remove(self, keys: list[str]) -> None:
        if not keys:
            return
        removed = await self._redis.zrem(self._name, *keys)
        logger.debug("Removed %s/%d keys from %s", removed, len(keys), self._name)

    async def score(self, key: str) -> float | None:
        return await self._redis.zscore(self._name, key)
