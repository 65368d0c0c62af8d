"""Sentry error tracking integration."""

from __future__ import annotations

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from payment_bridge.core.config import SentrySettings

logger = logging.getLogger(__name__)


def configure_sentry(settings: SentrySettings, *, environment: str) -> bool:
    """Initialise the Sentry SDK; return whether it was enabled."""
    if not settings.enabled or settings.dsn is None:
        return False

    sentry_sdk.init(
        dsn=settings.dsn.get_secret_value(),
        environment=settings.environment or environment,
        release=settings.release,
        traces_sample_rate=settings.traces_sample_rate,
        send_default_pii=settings.send_default_pii,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
    )
    logger.info("Sentry initialised")
    return True
