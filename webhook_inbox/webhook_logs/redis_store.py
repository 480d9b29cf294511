"""Redis-backed webhook log store.

Entries survive a process restart. Layout: one Redis list per store, each
element a JSON-encoded entry, oldest at the head.

Atomicity comes from Redis itself: RPUSH (+ LTRIM when a retention cap is
set) runs in one MULTI/EXEC, and clear reads LLEN and DELs in one MULTI/EXEC,
so a racing append lands wholly before or wholly after a clear.
"""

from __future__ import annotations

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from webhook_inbox.kernel.errors import BackendUnavailableError
from webhook_inbox.webhook_logs.models import WebhookLogEntry
from webhook_inbox.webhook_logs.store import WebhookLogStore

logger = structlog.get_logger()


class RedisWebhookLogStore(WebhookLogStore):
    backend = "redis"

    def __init__(
        self,
        *,
        redis_url: str | None = None,
        key: str = "webhook_inbox:logs",
        max_entries: int | None = None,
        socket_timeout: float = 2.0,
        client: Redis | None = None,
    ) -> None:
        super().__init__(max_entries=max_entries)
        if client is None and not redis_url:
            raise ValueError("redis_url or client is required")
        self.redis_url = redis_url
        self.key = key
        self.socket_timeout = socket_timeout
        self._client = client

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(
                str(self.redis_url),
                decode_responses=True,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
            )
        return self._client

    async def start(self) -> None:
        # Startup does not fail when Redis is down; operations report
        # BackendUnavailableError until it comes back.
        if not await self.ping():
            logger.warning("Redis unreachable at startup", key=self.key)

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        finally:
            self._client = None

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as exc:
            logger.warning("Redis ping failed", error=str(exc))
            return False

    async def _append(self, entry: WebhookLogEntry) -> None:
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.rpush(self.key, entry.to_json())
                if self.max_entries is not None:
                    pipe.ltrim(self.key, -self.max_entries, -1)
                await pipe.execute()
        except (RedisError, OSError) as exc:
            raise self._unavailable("append", exc) from exc

    async def _list(self, offset: int, limit: int | None) -> tuple[list[WebhookLogEntry], int]:
        if limit == 0:
            try:
                return [], int(await self.client.llen(self.key))
            except (RedisError, OSError) as exc:
                raise self._unavailable("list", exc) from exc

        stop = -1 if limit is None else offset + limit - 1
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.llen(self.key)
                pipe.lrange(self.key, offset, stop)
                count, raw_entries = await pipe.execute()
        except (RedisError, OSError) as exc:
            raise self._unavailable("list", exc) from exc

        entries: list[WebhookLogEntry] = []
        for raw in raw_entries:
            try:
                entries.append(WebhookLogEntry.from_json(raw))
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning("Skipping undecodable webhook log entry", key=self.key, error=str(exc))
        return entries, int(count)

    async def _clear(self) -> int:
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.llen(self.key)
                pipe.delete(self.key)
                count, _ = await pipe.execute()
        except (RedisError, OSError) as exc:
            raise self._unavailable("clear", exc) from exc
        return int(count)

    def _unavailable(self, operation: str, exc: Exception) -> BackendUnavailableError:
        logger.error("Redis webhook log operation failed", operation=operation, key=self.key, error=str(exc))
        return BackendUnavailableError()
