"""API tests for POST /api/webhooks/{source}."""

import pytest

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


async def test_delivery_captured_with_filtered_headers(async_client, store):
    res = await async_client.post(
        "/api/webhooks/vapi?call=1",
        json={"message": {"type": "status-update"}},
        headers={
            "Authorization": "Bearer live-token",
            "X-Vapi-Signature": "abc123",
            "X-Custom": "kept",
        },
    )

    assert res.status_code == 202
    body = res.json()
    assert body["status"] == "received"

    snapshot = await store.list()
    assert snapshot.count == 1
    entry = snapshot.entries[0]
    assert entry.id == body["id"]
    payload = entry.payload
    assert payload["type"] == "webhook_received"
    assert payload["source"] == "vapi"
    assert payload["method"] == "POST"
    assert payload["url"].endswith("/api/webhooks/vapi?call=1")
    assert payload["body"] == {"message": {"type": "status-update"}}
    assert payload["headers"]["authorization"] == "[Filtered]"
    assert payload["headers"]["x-vapi-signature"] == "[Filtered]"
    assert payload["headers"]["x-custom"] == "kept"


async def test_non_json_delivery_still_captured(async_client, store):
    res = await async_client.post("/api/webhooks/github", content=b"payload=%7B%7D")

    assert res.status_code == 202
    entry = (await store.list()).entries[0]
    assert entry.payload["body"] == {"raw": "payload=%7B%7D"}


async def test_empty_delivery_captured(async_client, store):
    res = await async_client.post("/api/webhooks/stripe")

    assert res.status_code == 202
    assert (await store.list()).entries[0].payload["body"] is None


async def test_deliveries_visible_through_log_endpoint(async_client):
    await async_client.post("/api/webhooks/vapi", json={"n": 1})
    await async_client.post("/api/webhooks/vapi", json={"n": 2})

    data = (await async_client.get("/api/debug/webhook-logs")).json()
    assert [log["payload"]["body"]["n"] for log in data["logs"]] == [1, 2]


async def test_invalid_source_rejected(async_client, store):
    res = await async_client.post("/api/webhooks/Not%20Valid", json={})

    assert res.status_code == 422
    assert (await store.list()).count == 0


async def test_storage_failure_is_500(async_client, store):
    await store.close()

    res = await async_client.post("/api/webhooks/vapi", json={"n": 1})

    assert res.status_code == 500
    assert res.json()["code"] == "storage.unavailable"


async def test_credentials_in_query_string_are_masked(async_client, store):
    res = await async_client.post("/api/webhooks/vapi?token=live-secret&userId=u_42&call=7", json={})

    assert res.status_code == 202
    url = (await store.list()).entries[0].payload["url"]
    assert url.endswith("/api/webhooks/vapi?token=[Filtered]&userId=[Filtered]&call=7")
    assert "live-secret" not in url
    assert "u_42" not in url


async def test_non_standard_json_constants_kept_as_raw_text(async_client, store):
    res = await async_client.post("/api/webhooks/stripe", content=b'{"amount": Infinity}')

    assert res.status_code == 202
    body = (await store.list()).entries[0].payload["body"]
    assert body == {"raw": '{"amount": Infinity}'}
