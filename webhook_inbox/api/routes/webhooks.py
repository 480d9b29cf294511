"""
Inbound webhook receiver.

Every delivery is captured into the webhook log store before anything else,
including deliveries whose body is not JSON, so the log shows exactly what
arrived. Storage failure surfaces as a 500 so the sender retries instead of
the delivery being dropped.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Path, Request
from pydantic import BaseModel

from webhook_inbox.api.body import loads_strict
from webhook_inbox.api.dependencies import get_webhook_log_store
from webhook_inbox.monitoring.metrics import get_metrics
from webhook_inbox.webhook_logs.store import WebhookLogStore

logger = structlog.get_logger()

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

FILTERED = "[Filtered]"

_SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
}
_SENSITIVE_HEADER_MARKERS = ("signature", "secret", "token", "hmac")
_SENSITIVE_QUERY_MARKERS = (*_SENSITIVE_HEADER_MARKERS, "key", "password", "auth", "userid", "user_id")


class WebhookReceivedResponse(BaseModel):
    status: str = "received"
    id: str


def filter_headers(headers: dict[str, str]) -> dict[str, str]:
    """Lowercase header names and mask credentials and signatures."""
    filtered: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        if key in _SENSITIVE_HEADERS or any(marker in key for marker in _SENSITIVE_HEADER_MARKERS):
            filtered[key] = FILTERED
        else:
            filtered[key] = value
    return filtered


def filter_url(request: Request) -> str:
    """Request URL with credential-looking query parameters masked."""
    params = request.query_params.multi_items()
    if not params:
        return str(request.url)
    masked = [
        (name, FILTERED if any(marker in name.lower() for marker in _SENSITIVE_QUERY_MARKERS) else value)
        for name, value in params
    ]
    return str(request.url.replace(query=urlencode(masked, safe="[]")))


def decode_body(raw: bytes) -> Any:
    """Parsed JSON when possible, otherwise the raw text under `raw`."""
    if not raw:
        return None
    try:
        return loads_strict(raw)
    except ValueError:
        return {"raw": raw.decode("utf-8", errors="replace")}


@router.post("/{source}", status_code=202, response_model=WebhookReceivedResponse)
async def receive_webhook(
    request: Request,
    source: str = Path(..., pattern=r"^[a-z0-9][a-z0-9_-]{0,63}$"),
    store: WebhookLogStore = Depends(get_webhook_log_store),
) -> WebhookReceivedResponse:
    """Capture an inbound webhook from `source`."""
    raw = await request.body()
    payload = {
        "type": "webhook_received",
        "source": source,
        "method": request.method,
        "url": filter_url(request),
        "headers": filter_headers(dict(request.headers)),
        "body": decode_body(raw),
    }

    entry = await store.append(payload)
    get_metrics().track_webhook_received(source)
    logger.info("Webhook received", source=source, entry_id=entry.id, body_bytes=len(raw))

    return WebhookReceivedResponse(id=entry.id)
