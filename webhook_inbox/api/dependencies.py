"""Request-scoped access to objects owned by the application.

The factory in `webhook_inbox.api.main` builds these once per app and keeps
them on `app.state`; handlers receive them through `Depends`.
"""

from __future__ import annotations

from fastapi import Request

from webhook_inbox.config import Settings
from webhook_inbox.db.postgrest import PostgrestClient
from webhook_inbox.webhook_logs.store import WebhookLogStore


def get_webhook_log_store(request: Request) -> WebhookLogStore:
    return request.app.state.webhook_log_store


def get_postgrest_client(request: Request) -> PostgrestClient:
    return request.app.state.postgrest


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
