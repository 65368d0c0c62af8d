"""Observability stack for monitoring and error tracking."""

from .metrics import (
    BILLING_EVENT_WRITES_TOTAL,
    PAYMENT_LINKS_TOTAL,
    WEBHOOK_NOTIFICATIONS_TOTAL,
    MetricsService,
    metrics_service,
)
from .sentry import configure_sentry

__all__ = [
    "BILLING_EVENT_WRITES_TOTAL",
    "PAYMENT_LINKS_TOTAL",
    "WEBHOOK_NOTIFICATIONS_TOTAL",
    "MetricsService",
    "metrics_service",
    "configure_sentry",
]
