"""API tests for the test-suite dashboard endpoints."""

import json

import httpx
import pytest

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


async def test_list_test_suites(async_client, upstream):
    upstream.respond("GET", "test_suites", [{"suite_key": "voice", "phase": 1, "total_tests": 40}])

    res = await async_client.get("/api/admin/test-suites")

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "data": [{"suite_key": "voice", "phase": 1, "total_tests": 40}],
    }


async def test_suite_details_grouped(async_client, upstream):
    upstream.respond(
        "GET",
        "test_details",
        [
            {"test_name": "b", "status": "passing"},
            {"test_name": "a", "status": "failing"},
        ],
    )

    res = await async_client.get("/api/admin/test-suites/voice")

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "data": {
            "passing": [{"test_name": "b", "status": "passing"}],
            "failing": [{"test_name": "a", "status": "failing"}],
        },
    }


async def test_upstream_failure_hides_detail(async_client, upstream):
    upstream.respond("GET", "test_suites", {"message": "permission denied for table test_suites"}, status_code=401)

    res = await async_client.get("/api/admin/test-suites", headers={"X-Request-ID": "req_up"})

    assert res.status_code == 500
    assert res.json() == {
        "error": "Internal server error",
        "code": "upstream.query_failed",
        "request_id": "req_up",
    }
    assert "permission" not in res.text


async def test_upstream_unreachable(async_client, upstream):
    upstream.raise_error = httpx.ConnectTimeout("timed out")

    res = await async_client.get("/api/admin/test-suites/voice")

    assert res.status_code == 500
    assert res.json()["code"] == "upstream.query_failed"


async def test_update_requires_suite_key(async_client, upstream):
    res = await async_client.post("/api/admin/update-test-status", json={"passing_tests": 1})

    assert res.status_code == 400
    assert res.json()["error"] == "suite_key is required"
    assert upstream.requests == []


@pytest.mark.parametrize("body", [b"{oops", b"", b'["voice"]', b'{"suite_key": "voice", "passing_tests": NaN}'])
async def test_update_unparseable_body_is_400(async_client, upstream, body):
    res = await async_client.post(
        "/api/admin/update-test-status",
        content=body,
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request body"
    assert res.json()["code"] == "request.invalid_payload"
    assert upstream.requests == []


async def test_update_derives_percentage_and_status(async_client, upstream):
    upstream.respond("PATCH", "test_suites", [{"suite_key": "voice", "status": "almost"}])

    res = await async_client.post(
        "/api/admin/update-test-status",
        json={"suite_key": "voice", "passing_tests": 8, "failing_tests": 2},
    )

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "message": "Updated voice test suite",
        "data": {"suite_key": "voice", "status": "almost"},
    }
    sent = json.loads(upstream.requests_for("PATCH", "test_suites")[0].content)
    assert sent["percentage"] == 80
    assert sent["status"] == "almost"
    assert sent["passing_tests"] == 8
    assert sent["failing_tests"] == 2
    assert sent["updated_at"].endswith("Z")
    assert upstream.requests_for("PATCH", "test_details") == []


async def test_update_rejects_negative_counts(async_client):
    res = await async_client.post(
        "/api/admin/update-test-status",
        json={"suite_key": "voice", "passing_tests": -1, "failing_tests": 0},
    )
    assert res.status_code == 422
    assert res.json()["code"] == "http.validation_error"
    assert res.json()["detail"][0]["loc"] == ["passing_tests"]
