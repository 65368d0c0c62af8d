"""Prometheus metrics for payment links and webhook reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

if TYPE_CHECKING:
    from fastapi import FastAPI
    from prometheus_client.registry import CollectorRegistry

    from payment_bridge.core.config import PrometheusSettings

PAYMENT_LINKS_TOTAL = Counter(
    "payment_links_total",
    "Payment link creation attempts",
    ["status"],
)

WEBHOOK_NOTIFICATIONS_TOTAL = Counter(
    "webhook_notifications_total",
    "Provider webhook deliveries by terminal outcome",
    ["outcome"],
)

BILLING_EVENT_WRITES_TOTAL = Counter(
    "billing_event_writes_total",
    "BillingEvent create attempts against the cluster",
    ["result"],
)


class MetricsService:
    """Service for managing Prometheus metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry: CollectorRegistry | None = registry

    def create_instrumentator(self, settings: PrometheusSettings) -> Instrumentator:
        return Instrumentator(
            should_group_status_codes=False,
            should_ignore_untemplated=True,
            excluded_handlers=settings.excluded_handlers,
            registry=self.registry,
        )

    def instrument_app(self, app: FastAPI, settings: PrometheusSettings) -> None:
        if not settings.enabled:
            return
        instrumentator = self.create_instrumentator(settings)
        instrumentator.instrument(app).expose(
            app, endpoint=settings.metrics_path, include_in_schema=False
        )


metrics_service = MetricsService()
