"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Request, Response

from webhook_inbox.api.dependencies import get_webhook_log_store
from webhook_inbox.kernel.time import isoformat_z, utc_now
from webhook_inbox.webhook_logs.store import WebhookLogStore

router = APIRouter()
logger = structlog.get_logger()


def _started_at(request: Request) -> datetime:
    return getattr(request.app.state, "started_at", None) or utc_now()


@router.get("/health")
async def health_check(request: Request):
    """
    Basic health check endpoint.
    Returns 200 if the service is running.
    """
    now = utc_now()
    return {
        "status": "healthy",
        "service": "webhook-inbox",
        "version": request.app.version,
        "timestamp": isoformat_z(now),
        "uptime_seconds": (now - _started_at(request)).total_seconds(),
    }


@router.get("/ready")
async def readiness_check(
    response: Response,
    store: WebhookLogStore = Depends(get_webhook_log_store),
):
    """
    Readiness check endpoint.
    Verifies the webhook log backend is reachable.
    """
    store_ok = await store.ping()
    if not store_ok:
        logger.warning("Webhook log store health check failed", backend=store.backend)
        response.status_code = 503

    return {
        "status": "ready" if store_ok else "degraded",
        "checks": {"webhook_log_store": store_ok},
        "backend": store.backend,
        "timestamp": isoformat_z(utc_now()),
    }


@router.get("/live")
async def liveness_check():
    """
    Liveness check for Kubernetes.
    Returns 200 if the process is alive.
    """
    return {"status": "alive"}
