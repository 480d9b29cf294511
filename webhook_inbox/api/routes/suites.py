"""
Test-suite dashboard API Routes

Admin endpoints backed by the hosted database:
- list suite summaries
- list a suite's tests grouped by status
- record a new pass/fail count for a suite
"""

from __future__ import annotations

from typing import Any, Literal

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

from webhook_inbox.api.body import read_json_object
from webhook_inbox.api.dependencies import get_postgrest_client
from webhook_inbox.db.postgrest import PostgrestClient
from webhook_inbox.kernel.errors import InvalidPayloadError
from webhook_inbox.suite_dashboard import (
    SuiteStatusUpdate,
    get_suite_details,
    list_suites,
    update_suite_status,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["Test Suites"])


class SuiteListResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]


class SuiteDetailsData(BaseModel):
    passing: list[dict[str, Any]]
    failing: list[dict[str, Any]]


class SuiteDetailsResponse(BaseModel):
    success: bool = True
    data: SuiteDetailsData


class UpdateTestStatusRequest(BaseModel):
    suite_key: str | None = None
    passing_tests: int = Field(0, ge=0)
    failing_tests: int = Field(0, ge=0)
    percentage: int | None = Field(None, ge=0, le=100)
    status: Literal["done", "almost", "failing"] | None = None


class UpdateTestStatusResponse(BaseModel):
    success: bool = True
    message: str
    data: dict[str, Any] | None = None


@router.get("/test-suites", response_model=SuiteListResponse)
async def get_test_suites(
    client: PostgrestClient = Depends(get_postgrest_client),
) -> SuiteListResponse:
    """Get all test suite summaries."""
    return SuiteListResponse(data=await list_suites(client))


@router.get("/test-suites/{key}", response_model=SuiteDetailsResponse)
async def get_test_suite(
    key: str,
    client: PostgrestClient = Depends(get_postgrest_client),
) -> SuiteDetailsResponse:
    """Get the tests of one suite, failing and passing."""
    grouped = await get_suite_details(client, key)
    return SuiteDetailsResponse(data=SuiteDetailsData(**grouped))


@router.post("/update-test-status", response_model=UpdateTestStatusResponse)
async def update_test_status(
    request: Request,
    client: PostgrestClient = Depends(get_postgrest_client),
) -> UpdateTestStatusResponse:
    """Record a suite's pass/fail counts and derived status."""
    data = await read_json_object(request)
    try:
        body = UpdateTestStatusRequest.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    if not body.suite_key:
        raise InvalidPayloadError(message="suite_key is required", code="request.missing_suite_key")

    updated = await update_suite_status(
        client,
        SuiteStatusUpdate(
            suite_key=body.suite_key,
            passing_tests=body.passing_tests,
            failing_tests=body.failing_tests,
            percentage=body.percentage,
            status=body.status,
        ),
    )
    return UpdateTestStatusResponse(
        message=f"Updated {body.suite_key} test suite",
        data=updated,
    )
