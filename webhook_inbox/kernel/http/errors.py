from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from webhook_inbox.kernel.errors import InboxError

logger = structlog.get_logger()


def _get_request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    """Register service-wide exception handlers on a FastAPI app.

    Every failure leaves the process as `{"error", "code", "request_id"}`.
    """

    @app.exception_handler(InboxError)
    async def _inbox_error_handler(request: Request, exc: InboxError) -> Response:
        request_id = _get_request_id(request)
        if exc.status_code >= 500:
            logger.warning(
                "Request failed",
                code=exc.code,
                path=request.url.path,
                request_id=request_id,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_public_dict(request_id=request_id))

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> Response:
        request_id = _get_request_id(request)

        payload: dict[str, Any] = {
            "error": exc.detail,
            "code": f"http.{exc.status_code}",
        }
        if request_id:
            payload["request_id"] = request_id

        headers = dict(exc.headers or {})
        return JSONResponse(status_code=int(exc.status_code), content=payload, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        request_id = _get_request_id(request)
        payload: dict[str, Any] = {
            "error": "Request validation failed",
            "code": "http.validation_error",
            "detail": jsonable_errors(exc),
        }
        if request_id:
            payload["request_id"] = request_id
        return JSONResponse(status_code=422, content=payload)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        request_id = _get_request_id(request)
        logger.exception("Unhandled exception", request_id=request_id, error=str(exc))

        payload: dict[str, Any] = {
            "error": "Internal server error",
            "code": "internal.unhandled",
        }
        if request_id:
            payload["request_id"] = request_id
        # raised past RequestIDMiddleware, so the header is not added there
        headers = {"X-Request-ID": request_id} if request_id else None
        return JSONResponse(status_code=500, content=payload, headers=headers)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # pydantic may put exception instances under `ctx`; keep only plain fields
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
        for err in exc.errors()
    ]
