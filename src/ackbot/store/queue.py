"""Retry queue of pending acknowledgement checks, ordered by last-check time."""

import logging
import math
from collections.abc import Iterable

from ackbot.models.acks import MessageRef
from ackbot.store.base import RetryStore

logger = logging.getLogger(__name__)


class RetryQueue:
    """Pending checks keyed by ``channel:timestamp`` with a recheck score."""

    def __init__(self, store: RetryStore) -> None:
        self.store = store

    async def enqueue(self, ref: MessageRef, score: float) -> None:
        """Add ``ref`` or refresh its score. The later score wins."""
        await self.store.upsert(ref.key, score)

    async def due_entries(
        self, now: float, frequency: float, include_all: bool = False
    ) -> list[MessageRef]:
        """Return entries not rechecked within the last ``frequency`` seconds.

        That is every entry with score <= ``now - frequency``, oldest first.
        ``include_all`` ignores scores entirely (manual debugging).
        """
        upper_bound = math.inf if include_all else now - frequency
        refs: list[MessageRef] = []
        for key in await self.store.range_by_score(upper_bound):
            try:
                refs.append(MessageRef.from_key(key))
            except ValueError:
                logger.warning("Skipping unparseable retry queue key %r", key)
        return refs

    async def remove(self, refs: Iterable[MessageRef]) -> None:
        keys = [ref.key for ref in refs]
        if keys:
            await self.store.remove(keys)

    async def contains(self, ref: MessageRef) -> bool:
        return await self.store.score(ref.key) is not None
