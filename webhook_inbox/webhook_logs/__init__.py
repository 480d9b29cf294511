"""Webhook log capture and retrieval."""

from .factory import build_webhook_log_store
from .models import WebhookLogEntry, WebhookLogSnapshot
from .redis_store import RedisWebhookLogStore
from .store import MemoryWebhookLogStore, WebhookLogStore

__all__ = [
    "build_webhook_log_store",
    "MemoryWebhookLogStore",
    "RedisWebhookLogStore",
    "WebhookLogEntry",
    "WebhookLogSnapshot",
    "WebhookLogStore",
]
