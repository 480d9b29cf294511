"""Build the webhook log store selected by settings."""

from __future__ import annotations

import structlog

from webhook_inbox.config import Settings
from webhook_inbox.webhook_logs.redis_store import RedisWebhookLogStore
from webhook_inbox.webhook_logs.store import MemoryWebhookLogStore, WebhookLogStore

logger = structlog.get_logger()


def build_webhook_log_store(settings: Settings) -> WebhookLogStore:
    if settings.webhook_log_backend == "redis":
        store: WebhookLogStore = RedisWebhookLogStore(
            redis_url=str(settings.redis_url),
            key=settings.webhook_log_redis_key,
            max_entries=settings.webhook_log_max_entries,
            socket_timeout=settings.redis_socket_timeout_seconds,
        )
    else:
        store = MemoryWebhookLogStore(max_entries=settings.webhook_log_max_entries)

    logger.info(
        "Webhook log store configured",
        backend=store.backend,
        max_entries=settings.webhook_log_max_entries,
    )
    return store
