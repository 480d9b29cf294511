from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError


def _normalize(length: int, start: int, stop: int) -> tuple[int, int]:
    if start < 0:
        start = max(length + start, 0)
    if stop < 0:
        stop = length + stop
    return start, min(stop, length - 1)


@dataclass
class FakeRedis:
    """
    In-memory fake of the redis.asyncio list commands the log store uses.

    Pipelines queue commands and apply them together on `execute()`, which
    is enough to model MULTI/EXEC on a single event loop. Set `down` to make
    every command raise a connection error.
    """

    lists: dict[str, list[str]] = field(default_factory=dict)
    down: bool = False
    closed: bool = False

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Connection refused")

    async def ping(self) -> bool:
        self._check()
        return True

    async def llen(self, key: str) -> int:
        self._check()
        return self._llen(key)

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        self._check()
        return self._lrange(key, start, stop)

    async def aclose(self) -> None:
        self.closed = True

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self)

    def _llen(self, key: str) -> int:
        return len(self.lists.get(key, []))

    def _lrange(self, key: str, start: int, stop: int) -> list[str]:
        items = self.lists.get(key, [])
        start, stop = _normalize(len(items), start, stop)
        if start > stop:
            return []
        return list(items[start : stop + 1])

    def _rpush(self, key: str, value: str) -> int:
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def _ltrim(self, key: str, start: int, stop: int) -> bool:
        self.lists[key] = self._lrange(key, start, stop)
        return True

    def _delete(self, key: str) -> int:
        return 1 if self.lists.pop(key, None) is not None else 0


class FakePipeline:
    def __init__(self, redis: FakeRedis) -> None:
        self._redis = redis
        self._commands: list[tuple[str, tuple[Any, ...]]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._commands.clear()

    def rpush(self, key: str, value: str) -> "FakePipeline":
        self._commands.append(("_rpush", (key, value)))
        return self

    def ltrim(self, key: str, start: int, stop: int) -> "FakePipeline":
        self._commands.append(("_ltrim", (key, start, stop)))
        return self

    def llen(self, key: str) -> "FakePipeline":
        self._commands.append(("_llen", (key,)))
        return self

    def lrange(self, key: str, start: int, stop: int) -> "FakePipeline":
        self._commands.append(("_lrange", (key, start, stop)))
        return self

    def delete(self, key: str) -> "FakePipeline":
        self._commands.append(("_delete", (key,)))
        return self

    async def execute(self) -> list[Any]:
        self._redis._check()
        results = [getattr(self._redis, name)(*args) for name, args in self._commands]
        self._commands.clear()
        return results
