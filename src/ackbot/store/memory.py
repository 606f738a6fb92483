"""Process-local retry store for development and tests."""


class InMemoryRetryStore:
    """RetryStore backed by a dict. Contents are lost on restart."""

    def __init__(self) -> None:
        self._scores: dict[str, float] = {}

    async def upsert(self, key: str, score: float) -> None:
        current = self._scores.get(key)
        if current is None or score > current:
            self._scores[key] = score

    async def range_by_score(self, max_score: float) -> list[str]:
        due = [(score, key) for key, score in self._scores.items() if score <= max_score]
        return [key for _, key in sorted(due)]

    async def remove(self, keys: list[str]) -> None:
        for key in keys:
            self._scores.pop(key, None)

    async def score(self, key: str) -> float | None:
        return self._scores.get(key)

    def __len__(self) -> int:
        return len(self._scores)
