"""
Test-suite dashboard queries.

Reads and updates the `test_suites` / `test_details` tables of the hosted
database. Suites are listed by phase, biggest suites first within a phase;
details list failing tests before passing ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import structlog

from webhook_inbox.db.postgrest import PostgrestClient
from webhook_inbox.kernel.errors import UpstreamQueryError
from webhook_inbox.kernel.time import isoformat_z, utc_now

logger = structlog.get_logger()

SUITES_TABLE = "test_suites"
DETAILS_TABLE = "test_details"

SuiteStatus = Literal["done", "almost", "failing"]


@dataclass(frozen=True)
class SuiteStatusUpdate:
    suite_key: str
    passing_tests: int
    failing_tests: int
    percentage: int | None = None
    status: SuiteStatus | None = None

    @property
    def total_tests(self) -> int:
        return self.passing_tests + self.failing_tests

    def resolved_percentage(self) -> int:
        if self.percentage is not None:
            return self.percentage
        if self.total_tests == 0:
            return 0
        # Round half up, matching the dashboard's own arithmetic
        return int(self.passing_tests * 100 / self.total_tests + 0.5)

    def resolved_status(self) -> SuiteStatus:
        if self.status is not None:
            return self.status
        if self.failing_tests == 0:
            return "done"
        if self.failing_tests <= 2:
            return "almost"
        return "failing"


async def list_suites(client: PostgrestClient) -> list[dict[str, Any]]:
    return await client.select(
        SUITES_TABLE,
        order=[("phase", True), ("total_tests", False)],
    )


async def get_suite_details(client: PostgrestClient, suite_key: str) -> dict[str, list[dict[str, Any]]]:
    """Return the suite's tests grouped into `passing` and `failing`."""
    rows = await client.select(
        DETAILS_TABLE,
        filters={"suite_key": suite_key},
        order=[("status", False), ("test_name", True)],
    )
    return {
        "passing": [row for row in rows if row.get("status") == "passing"],
        "failing": [row for row in rows if row.get("status") == "failing"],
    }


async def update_suite_status(client: PostgrestClient, update: SuiteStatusUpdate) -> dict[str, Any] | None:
    """Write new counts for a suite and return the stored row.

    When nothing fails any test still marked failing is flipped to passing.
    That follow-up write is best effort: its failure is logged and the suite
    update still counts as done.
    """
    updated = await client.update(
        SUITES_TABLE,
        {
            "passing_tests": update.passing_tests,
            "failing_tests": update.failing_tests,
            "percentage": update.resolved_percentage(),
            "status": update.resolved_status(),
            "updated_at": isoformat_z(utc_now()),
        },
        filters={"suite_key": update.suite_key},
    )

    if update.failing_tests == 0:
        try:
            await client.update(
                DETAILS_TABLE,
                {"status": "passing", "issue": None},
                filters={"suite_key": update.suite_key, "status": "failing"},
            )
        except UpstreamQueryError:
            logger.warning("Failed to mark suite tests as passing", suite_key=update.suite_key)

    logger.info(
        "Test suite status updated",
        suite_key=update.suite_key,
        passing_tests=update.passing_tests,
        failing_tests=update.failing_tests,
    )
    return updated[0] if updated else None
