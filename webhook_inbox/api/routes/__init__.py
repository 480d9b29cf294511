"""API route modules."""

from . import (
    beta,
    diagnostics,
    health,
    suites,
    webhook_logs,
    webhooks,
)

__all__ = [
    "beta",
    "diagnostics",
    "health",
    "suites",
    "webhook_logs",
    "webhooks",
]
