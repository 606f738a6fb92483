"""Interface for the time-ordered store behind the retry queue."""

from typing import Protocol


class RetryStore(Protocol):
    """A key -> score set ordered by score (a Redis sorted set, in production).

    Each key appears at most once. ``upsert`` keeps the later of the stored
    and the new score.
    """

    async def upsert(self, key: str, score: float) -> None: ...

    async def range_by_score(self, max_score: float) -> list[str]: ...

    async def remove(self, keys: list[str]) -> None: ...

    async def score(self, key: str) -> float | None: ...
