"""Webhook log records and list snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from webhook_inbox.kernel.ids import is_prefixed_id, new_prefixed_id
from webhook_inbox.kernel.time import isoformat_z, parse_iso8601, utc_now

ENTRY_ID_PREFIX = "whl"


@dataclass(frozen=True)
class WebhookLogEntry:
    """One captured webhook notification. Never mutated after append."""

    id: str
    received_at: datetime
    payload: Any

    @classmethod
    def create(cls, payload: Any, *, received_at: datetime | None = None) -> "WebhookLogEntry":
        return cls(
            id=new_prefixed_id(ENTRY_ID_PREFIX),
            received_at=received_at or utc_now(),
            payload=payload,
        )

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "receivedAt": isoformat_z(self.received_at),
            "payload": self.payload,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_public_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "WebhookLogEntry":
        data = json.loads(raw)
        entry_id = str(data["id"])
        if not is_prefixed_id(entry_id, ENTRY_ID_PREFIX):
            raise ValueError(f"not a webhook log entry id: {entry_id!r}")
        return cls(
            id=entry_id,
            received_at=parse_iso8601(data["receivedAt"]),
            payload=data.get("payload"),
        )


@dataclass(frozen=True)
class WebhookLogSnapshot:
    """Result of a list call.

    `count` is the number of entries held by the store, which can exceed
    `len(entries)` when a window was requested. `last_update` is the time of
    the call, not of the last write.
    """

    entries: list[WebhookLogEntry] = field(default_factory=list)
    count: int = 0
    last_update: datetime = field(default_factory=utc_now)

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "logs": [entry.to_public_dict() for entry in self.entries],
            "count": self.count,
            "lastUpdate": isoformat_z(self.last_update),
        }
