from __future__ import annotations

from fastapi import FastAPI

from payment_bridge.api.middleware import RequestContextMiddleware
from payment_bridge.api.routes import include_routers
from payment_bridge.cluster.client import ClusterClient
from payment_bridge.core.config import Settings, get_settings
from payment_bridge.core.lifespan import create_lifespan
from payment_bridge.core.logging import configure_logging
from payment_bridge.observability import configure_sentry, metrics_service
from payment_bridge.payments.gateway import PaymentGateway


def _register_middlewares(app: FastAPI, settings: Settings) -> None:
    quiet_paths = {"/"}
    if settings.prometheus.enabled:
        quiet_paths.add(settings.prometheus.metrics_path)
    app.add_middleware(RequestContextMiddleware, quiet_paths=quiet_paths)


def create_app(
    settings: Settings | None = None,
    *,
    cluster_client: ClusterClient | None = None,
    gateway: PaymentGateway | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    configure_sentry(settings.sentry, environment=settings.environment.value)

    app = FastAPI(
        title=settings.project_name,
        version=settings.project_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=create_lifespan(
            settings, cluster_client=cluster_client, gateway=gateway
        ),
    )

    app.state.settings = settings
    app.state.runtime = None
    app.state.payment_gateway = None
    app.state.cluster = None

    metrics_service.instrument_app(app, settings.prometheus)

    _register_middlewares(app, settings)
    include_routers(app)

    return app
