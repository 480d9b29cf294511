"""
Diagnostic endpoints for operators.

- echo a context payload back with the comparisons the voice assistant makes
- report whether error reporting (Sentry) is configured
"""

from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, Depends, Request

from webhook_inbox.api.body import read_json_object
from webhook_inbox.api.dependencies import get_app_settings
from webhook_inbox.config import Settings

router = APIRouter(tags=["Diagnostics"])

CONVERSATION_HISTORY = "conversation_history"
_DSN_PREVIEW_CHARS = 30


def _type_name(value: Any) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


@router.post("/debug/test-context")
async def echo_test_context(request: Request) -> dict[str, Any]:
    """Echo a context request and show how its context type resolves."""
    body = await read_json_object(request, message="Failed to test context")
    context_type = body.get("contextType")
    context_type_snake = body.get("context_type")
    actual = context_type or context_type_snake

    return {
        "received": body,
        "contextType": context_type,
        "context_type": context_type_snake,
        "actualContextType": actual,
        "isConversationHistory": actual == CONVERSATION_HISTORY,
        "stringComparison": {
            "actualValue": actual,
            "expectedValue": CONVERSATION_HISTORY,
            "match": actual == CONVERSATION_HISTORY,
            "actualLength": len(actual) if isinstance(actual, str) else None,
            "expectedLength": len(CONVERSATION_HISTORY),
            "actualType": _type_name(actual),
        },
    }


@router.get("/test-sentry-config")
async def sentry_config(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """Report whether an error-reporting DSN is configured."""
    dsn = settings.sentry_dsn or ""
    return {
        "dsnConfigured": bool(dsn),
        "dsnLength": len(dsn),
        "dsnStart": dsn[:_DSN_PREVIEW_CHARS] if dsn else "NOT FOUND",
        "allEnvKeys": sorted(key for key in os.environ if "SENTRY" in key.upper()),
        "environment": settings.environment,
    }
