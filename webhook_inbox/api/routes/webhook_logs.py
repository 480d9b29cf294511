"""
Webhook Log API Routes

Inspection surface for captured webhook deliveries:
- GET    returns every entry (or an offset/limit window) with count and freshness time
- POST   appends one entry from an arbitrary JSON body
- DELETE clears the store and reports how many entries were removed
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from webhook_inbox.api.body import read_json_body
from webhook_inbox.api.dependencies import get_webhook_log_store
from webhook_inbox.webhook_logs.store import WebhookLogStore

logger = structlog.get_logger()

router = APIRouter(prefix="/debug/webhook-logs", tags=["Webhook Logs"])


class WebhookLogEntryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    received_at: str = Field(..., alias="receivedAt")
    payload: Any = None


class ListWebhookLogsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logs: list[WebhookLogEntryResponse]
    count: int
    last_update: str = Field(..., alias="lastUpdate")


class AppendWebhookLogResponse(BaseModel):
    success: bool = True


class ClearWebhookLogsResponse(BaseModel):
    success: bool = True
    message: str


@router.get("", response_model=ListWebhookLogsResponse)
async def list_webhook_logs(
    offset: int = Query(0, ge=0, description="Entries to skip from the oldest"),
    limit: int | None = Query(None, ge=0, le=10_000, description="Maximum entries to return"),
    store: WebhookLogStore = Depends(get_webhook_log_store),
) -> ListWebhookLogsResponse:
    """
    Return captured webhook logs in arrival order.

    Without `offset`/`limit` every entry is returned. `count` is always the
    number of entries held, not the size of the returned window.
    """
    snapshot = await store.list(offset=offset, limit=limit)
    return ListWebhookLogsResponse.model_validate(snapshot.to_public_dict())


@router.post("", response_model=AppendWebhookLogResponse)
async def append_webhook_log(
    request: Request,
    store: WebhookLogStore = Depends(get_webhook_log_store),
) -> AppendWebhookLogResponse:
    """Append one log entry. The body is stored without interpretation."""
    payload = await read_json_body(request)
    await store.append(payload)
    return AppendWebhookLogResponse()


@router.delete("", response_model=ClearWebhookLogsResponse)
async def clear_webhook_logs(
    store: WebhookLogStore = Depends(get_webhook_log_store),
) -> ClearWebhookLogsResponse:
    cleared = await store.clear()
    return ClearWebhookLogsResponse(message=f"Cleared {cleared} logs")
