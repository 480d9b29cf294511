"""
Hosted database client (PostgREST / Supabase REST interface).

Small async wrapper over httpx used by the admin test-suite endpoints:
- select rows with `eq` filters and multi-column ordering
- update rows matching `eq` filters and return the updated representation

Failures never leak upstream detail to callers: they are logged here and
re-raised as `UpstreamQueryError`. Nothing is retried.
"""

from __future__ import annotations

from typing import Any, Sequence

import httpx
import structlog

from webhook_inbox.kernel.errors import UpstreamQueryError
from webhook_inbox.monitoring.metrics import get_metrics

logger = structlog.get_logger()

Ordering = Sequence[tuple[str, bool]]


def _order_param(order: Ordering) -> str:
    # PostgREST: order=col1.asc,col2.desc
    return ",".join(f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in order)


def _eq_params(filters: dict[str, Any] | None) -> dict[str, str]:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


class PostgrestClient:
    def __init__(
        self,
        *,
        base_url: str,
        service_role_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.service_role_key)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                timeout=self.timeout_seconds,
                transport=self._transport,
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {self.service_role_key}",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        finally:
            self._client = None

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order: Ordering = (),
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        params = {"select": columns, **_eq_params(filters)}
        if order:
            params["order"] = _order_param(order)
        return await self._request("GET", table, params=params)

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        if not filters:
            # PostgREST would otherwise update every row of the table
            raise ValueError("update requires at least one filter")
        return await self._request(
            "PATCH",
            table,
            params=_eq_params(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str],
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        metrics = get_metrics()
        if not self.configured:
            logger.error("Hosted database is not configured", table=table, method=method)
            metrics.track_upstream_query(table, "not_configured")
            raise UpstreamQueryError()

        try:
            response = await self._http().request(method, f"/{table}", params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Hosted database request failed", table=table, method=method, error=str(exc))
            metrics.track_upstream_query(table, "error")
            raise UpstreamQueryError() from exc

        if response.status_code >= 400:
            logger.error(
                "Hosted database returned an error",
                table=table,
                method=method,
                status_code=response.status_code,
                body=response.text[:500],
            )
            metrics.track_upstream_query(table, "error")
            raise UpstreamQueryError()

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Hosted database returned invalid JSON", table=table, method=method)
            metrics.track_upstream_query(table, "error")
            raise UpstreamQueryError() from exc

        metrics.track_upstream_query(table, "ok")
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return list(data)
