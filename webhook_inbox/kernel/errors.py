from __future__ import annotations

import re
from typing import Any


_ERROR_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


class InboxError(Exception):
    """Base typed error for the service.

    Goals:
    - Stable `code` for programmatic handling across clients.
    - Human-readable `message` for the admin surfaces.
    - Optional `meta` payload (safe-to-expose only).
    """

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = 500,
        meta: dict[str, Any] | None = None,
    ) -> None:
        if not _ERROR_CODE_RE.fullmatch(code):
            raise ValueError(
                "Invalid error code. Expected dot-separated lowercase tokens, "
                f"got: {code!r}"
            )
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = int(status_code)
        self.meta = dict(meta or {})

    def to_public_dict(self, *, request_id: str | None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if request_id:
            payload["request_id"] = request_id
        if self.meta:
            payload["meta"] = self.meta
        return payload


class InvalidPayloadError(InboxError):
    """Request body could not be parsed as structured data."""

    def __init__(
        self,
        *,
        message: str = "Invalid log data",
        code: str = "request.invalid_payload",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=400, meta=meta)


class BackendUnavailableError(InboxError):
    """Persistence backend could not be reached. Callers may retry."""

    def __init__(
        self,
        *,
        message: str = "Webhook log storage is unavailable",
        code: str = "storage.unavailable",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=500, meta=meta)


class UpstreamQueryError(InboxError):
    """Hosted database query failed.

    The message stays generic; the upstream detail is logged where the
    failure is observed and never returned to the caller.
    """

    def __init__(
        self,
        *,
        message: str = "Internal server error",
        code: str = "upstream.query_failed",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=500, meta=meta)
