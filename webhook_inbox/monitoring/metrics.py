"""
Prometheus Metrics

Defines and exports metrics for the webhook inbox service.
"""

import structlog
from prometheus_client import Counter

logger = structlog.get_logger()

# Singleton metrics instance
_metrics: "Metrics | None" = None


class Metrics:
    """
    Prometheus metrics for the webhook inbox.

    Tracks:
    - Webhook log store operations by backend and outcome
    - Webhook deliveries captured per source
    - Hosted database queries by table and outcome
    """

    def __init__(self):
        self.log_operations_total = Counter(
            "webhook_inbox_log_operations_total",
            "Webhook log store operations",
            ["backend", "operation", "outcome"],
        )

        self.webhooks_received_total = Counter(
            "webhook_inbox_webhooks_received_total",
            "Inbound webhook deliveries captured",
            ["source"],
        )

        self.upstream_queries_total = Counter(
            "webhook_inbox_upstream_queries_total",
            "Hosted database queries",
            ["table", "outcome"],
        )

    def track_log_operation(self, backend: str, operation: str, outcome: str) -> None:
        self.log_operations_total.labels(backend=backend, operation=operation, outcome=outcome).inc()

    def track_webhook_received(self, source: str) -> None:
        self.webhooks_received_total.labels(source=source).inc()

    def track_upstream_query(self, table: str, outcome: str) -> None:
        self.upstream_queries_total.labels(table=table, outcome=outcome).inc()


def get_metrics() -> Metrics:
    """Get the singleton metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = Metrics()
        logger.debug("Prometheus metrics initialized")
    return _metrics
