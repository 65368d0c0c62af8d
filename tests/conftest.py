"""Shared fixtures for the payment bridge test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from payment_bridge.app import create_app
from payment_bridge.core.config import get_settings

from tests.factories import FakeCluster, StubGateway


@pytest.fixture(autouse=True)
def configure_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("YOOKASSA_SHOP_ID", "123456")
    monkeypatch.setenv("YOOKASSA_SECRET_KEY", "test_secret_key")
    monkeypatch.setenv("PROMETHEUS__ENABLED", "false")
    monkeypatch.setenv("SENTRY__ENABLED", "false")
    monkeypatch.delenv("PAYMENTS__DASHBOARD_BASE_URL", raising=False)
    monkeypatch.delenv("KUBERNETES__KUBECONFIG", raising=False)

    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()


@pytest.fixture()
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture()
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest_asyncio.fixture()
async def app(gateway: StubGateway, cluster: FakeCluster) -> AsyncIterator[FastAPI]:
    application = create_app(get_settings(), cluster_client=cluster, gateway=gateway)

    try:
        async with application.router.lifespan_context(application):
            yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as http_client:
        yield http_client
