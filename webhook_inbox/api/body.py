"""Raw request body parsing for endpoints that accept opaque JSON."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request

from webhook_inbox.kernel.errors import InvalidPayloadError


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(raw: str | bytes) -> Any:
    """`json.loads` that also rejects `NaN`, `Infinity` and `-Infinity`."""
    return json.loads(raw, parse_constant=_reject_constant)


async def read_json_body(request: Request, *, message: str = "Invalid log data") -> Any:
    """Parse the request body as JSON or raise `InvalidPayloadError`.

    Any JSON document is accepted, including scalars and `null`; the content
    type header is not consulted.
    """
    raw = await request.body()
    if not raw.strip():
        raise InvalidPayloadError(message=message)
    try:
        return loads_strict(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError(message=message) from exc


async def read_json_object(request: Request, *, message: str = "Invalid request body") -> dict[str, Any]:
    """Like `read_json_body` but the document must be a JSON object."""
    data = await read_json_body(request, message=message)
    if not isinstance(data, dict):
        raise InvalidPayloadError(message=message)
    return data
