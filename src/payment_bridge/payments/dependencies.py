from __future__ import annotations

from typing import cast

from fastapi import Depends, HTTPException, Request, status
from pydantic import SecretStr

from payment_bridge.billing.ledger import LedgerEmitter
from payment_bridge.cluster.client import ClusterClient
from payment_bridge.core.config import YooKassaSettings
from payment_bridge.core.runtime import RuntimeConfig

from .exceptions import PaymentConfigurationError
from .gateway import PaymentGateway, YooKassaGateway
from .link import PaymentLinkService
from .reconciliation import PaymentReconciler
from .verifier import NotificationVerifier


def build_payment_gateway(settings: YooKassaSettings) -> PaymentGateway:
    """Create the YooKassa gateway or fail if credentials are absent."""

    if not settings.configured:
        raise PaymentConfigurationError(
            "YooKassa credentials are missing; set YOOKASSA_SHOP_ID and YOOKASSA_SECRET_KEY"
        )
    return YooKassaGateway(
        shop_id=cast(str, settings.shop_id),
        secret_key=cast(SecretStr, settings.secret_key).get_secret_value(),
        timeout=settings.timeout_seconds,
        max_attempts=settings.max_attempts,
    )


def _state_or_503(request: Request, name: str) -> object:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not initialised",
        )
    return value


def get_runtime_config(request: Request) -> RuntimeConfig:
    return cast(RuntimeConfig, _state_or_503(request, "runtime"))


def get_payment_gateway(request: Request) -> PaymentGateway:
    return cast(PaymentGateway, _state_or_503(request, "payment_gateway"))


def get_cluster_client(request: Request) -> ClusterClient:
    return cast(ClusterClient, _state_or_503(request, "cluster"))


def get_link_service(
    runtime: RuntimeConfig = Depends(get_runtime_config),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentLinkService:
    return PaymentLinkService(gateway=gateway, runtime=runtime)


def get_reconciler(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    cluster: ClusterClient = Depends(get_cluster_client),
) -> PaymentReconciler:
    return PaymentReconciler(
        verifier=NotificationVerifier(gateway=gateway),
        emitter=LedgerEmitter(store=cluster),
    )
