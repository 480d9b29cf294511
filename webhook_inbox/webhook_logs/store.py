"""
Webhook Log Store

Append-only log of inbound webhook deliveries with three operations:
- append: record one payload with a receipt timestamp
- list: snapshot of every entry (or a window) in arrival order
- clear: drop everything and report how many entries were removed

Backends subclass `WebhookLogStore` and implement the underscored hooks.
The public methods add logging and metrics around them.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from itertools import islice
from typing import Any, Iterable

import structlog

from webhook_inbox.kernel.errors import BackendUnavailableError
from webhook_inbox.kernel.time import utc_now
from webhook_inbox.monitoring.metrics import get_metrics
from webhook_inbox.webhook_logs.models import WebhookLogEntry, WebhookLogSnapshot

logger = structlog.get_logger()


def window(entries: Iterable[WebhookLogEntry], offset: int = 0, limit: int | None = None) -> list[WebhookLogEntry]:
    """Slice an ordered entry sequence. `limit=None` means to the end."""
    if offset < 0:
        raise ValueError("offset must be >= 0")
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")
    end = None if limit is None else offset + limit
    return list(islice(entries, offset, end))


class WebhookLogStore(ABC):
    """Webhook log store interface."""

    backend: str

    def __init__(self, *, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 when set")
        self.max_entries = max_entries

    async def start(self) -> None:
        """Acquire backend resources. Called once from the app lifespan."""

    async def close(self) -> None:
        """Release backend resources. Called once on shutdown."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the backend is reachable."""

    @abstractmethod
    async def _append(self, entry: WebhookLogEntry) -> None:
        """Store a fully built entry at the end of the collection."""

    @abstractmethod
    async def _list(self, offset: int, limit: int | None) -> tuple[list[WebhookLogEntry], int]:
        """Return the requested window and the total number of entries held."""

    @abstractmethod
    async def _clear(self) -> int:
        """Drop every entry atomically and return how many were dropped."""

    async def append(self, payload: Any) -> WebhookLogEntry:
        """Record one payload. The payload is stored as-is."""
        entry = WebhookLogEntry.create(payload)
        with self._instrument("append"):
            await self._append(entry)
        logger.info(
            "Webhook log added",
            entry_id=entry.id,
            log_type=payload.get("type") if isinstance(payload, dict) else None,
            backend=self.backend,
        )
        return entry

    async def list(self, *, offset: int = 0, limit: int | None = None) -> WebhookLogSnapshot:
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit is not None and limit < 0:
            raise ValueError("limit must be >= 0")
        with self._instrument("list"):
            entries, count = await self._list(offset, limit)
        return WebhookLogSnapshot(entries=entries, count=count, last_update=utc_now())

    async def clear(self) -> int:
        with self._instrument("clear"):
            cleared = await self._clear()
        logger.info("Webhook logs cleared", cleared_count=cleared, backend=self.backend)
        return cleared

    def _instrument(self, operation: str) -> "_OperationRecorder":
        return _OperationRecorder(self.backend, operation)


class _OperationRecorder:
    """Counts store operations by outcome."""

    def __init__(self, backend: str, operation: str) -> None:
        self.backend = backend
        self.operation = operation

    def __enter__(self) -> "_OperationRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            outcome = "ok"
        elif issubclass(exc_type, BackendUnavailableError):
            outcome = "unavailable"
        else:
            outcome = "error"
        get_metrics().track_log_operation(self.backend, self.operation, outcome)
        return False


class MemoryWebhookLogStore(WebhookLogStore):
    """
    Process-lifetime store backed by a deque.

    Every mutation and snapshot runs under one asyncio lock, so a clear
    and a racing append are serialized: the append lands wholly before or
    wholly after the clear.
    """

    backend = "memory"

    def __init__(self, *, max_entries: int | None = None) -> None:
        super().__init__(max_entries=max_entries)
        self._entries: deque[WebhookLogEntry] = deque(maxlen=max_entries)
        self._lock = asyncio.Lock()
        self._closed = False

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._closed = True

    async def ping(self) -> bool:
        return not self._closed

    async def _append(self, entry: WebhookLogEntry) -> None:
        async with self._lock:
            self._ensure_open()
            # deque(maxlen=...) evicts the oldest entry once the cap is reached
            self._entries.append(entry)

    async def _list(self, offset: int, limit: int | None) -> tuple[list[WebhookLogEntry], int]:
        async with self._lock:
            self._ensure_open()
            return window(self._entries, offset, limit), len(self._entries)

    async def _clear(self) -> int:
        async with self._lock:
            self._ensure_open()
            cleared = len(self._entries)
            self._entries = deque(maxlen=self.max_entries)
            return cleared

    def _ensure_open(self) -> None:
        if self._closed:
            raise BackendUnavailableError(message="Webhook log store is closed")
