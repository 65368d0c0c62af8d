from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from starlette.types import Lifespan

from payment_bridge.cluster.client import ClusterClient, KubernetesClusterClient
from payment_bridge.core.config import Settings
from payment_bridge.core.runtime import RuntimeConfig
from payment_bridge.payments.dependencies import build_payment_gateway
from payment_bridge.payments.gateway import PaymentGateway


async def resolve_dashboard_base_url(settings: Settings, cluster: ClusterClient) -> str:
    """Return the configured override or the cluster Setting value."""

    if settings.payments.dashboard_base_url:
        return settings.payments.dashboard_base_url
    return await cluster.get_setting_value(settings.kubernetes.base_url_setting)


def create_lifespan(
    settings: Settings,
    *,
    cluster_client: ClusterClient | None = None,
    gateway: PaymentGateway | None = None,
) -> Lifespan[FastAPI]:
    logger = structlog.get_logger(__name__).bind(environment=settings.environment)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("application_startup")
        payment_gateway = gateway or build_payment_gateway(settings.yookassa)
        cluster = cluster_client or KubernetesClusterClient.from_settings(
            settings.kubernetes
        )

        try:
            base_url = await resolve_dashboard_base_url(settings, cluster)
        except Exception:
            logger.exception(
                "dashboard_base_url_unavailable",
                setting=settings.kubernetes.base_url_setting,
            )
            cluster.close()
            raise

        runtime = RuntimeConfig.from_settings(settings.payments, base_url)
        app.state.runtime = runtime
        app.state.payment_gateway = payment_gateway
        app.state.cluster = cluster
        logger.info("runtime_configured", dashboard_base_url=runtime.dashboard_base_url)

        try:
            yield
        finally:
            app.state.runtime = None
            app.state.payment_gateway = None
            app.state.cluster = None
            cluster.close()
            logger.info("application_shutdown")

    return lifespan
