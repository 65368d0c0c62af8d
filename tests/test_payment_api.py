from __future__ import annotations

import pytest
from httpx import AsyncClient

from payment_bridge.payments.exceptions import PaymentGatewayError

from tests.factories import StubGateway


@pytest.mark.asyncio
async def test_json_request_redirects_to_checkout(
    async_client: AsyncClient, gateway: StubGateway
) -> None:
    gateway.responses.append(
        {
            "id": "pay-json",
            "status": "pending",
            "confirmation": {
                "type": "redirect",
                "confirmation_url": "https://yoomoney.test/checkout/pay-json",
            },
        }
    )

    response = await async_client.post(
        "/payment", json={"namespace": "team-a", "name": "basic", "amount": "100"}
    )

    assert response.status_code == 301
    assert response.headers["location"] == "https://yoomoney.test/checkout/pay-json"
    payload, _key = gateway.calls[0]
    assert payload["metadata"] == {"namespace": "team-a", "billing": "basic"}
    assert payload["amount"]["value"] == "100.00"


@pytest.mark.asyncio
async def test_form_request_redirects_to_checkout(
    async_client: AsyncClient, gateway: StubGateway
) -> None:
    response = await async_client.post(
        "/payment",
        data={"namespace": "team-b", "name": "pro", "amount": "12.50"},
    )

    assert response.status_code == 301
    assert response.headers["location"] == "https://yoomoney.test/checkout"
    payload, _key = gateway.calls[0]
    assert payload["description"] == "Payment for team-b/pro"


@pytest.mark.asyncio
async def test_numeric_json_amount_is_accepted(
    async_client: AsyncClient, gateway: StubGateway
) -> None:
    response = await async_client.post(
        "/payment", json={"namespace": "team-a", "name": "basic", "amount": 42}
    )

    assert response.status_code == 301
    payload, _key = gateway.calls[0]
    assert payload["amount"]["value"] == "42.00"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"name": "basic", "amount": "10"},
        {"namespace": "team-a", "amount": "10"},
        {"namespace": "team-a", "name": "basic"},
        {"namespace": "team-a", "name": "basic", "amount": "ten"},
        {"namespace": "team/a", "name": "basic", "amount": "10"},
    ],
)
async def test_invalid_request_returns_400_without_provider_call(
    async_client: AsyncClient, gateway: StubGateway, body: dict[str, str]
) -> None:
    response = await async_client.post("/payment", json=body)

    assert response.status_code == 400
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_unparseable_json_returns_400(
    async_client: AsyncClient, gateway: StubGateway
) -> None:
    response = await async_client.post(
        "/payment",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_provider_failure_returns_500(
    async_client: AsyncClient, gateway: StubGateway
) -> None:
    gateway.create_error = PaymentGatewayError("connection reset")

    response = await async_client.post(
        "/payment", json={"namespace": "team-a", "name": "basic", "amount": "10"}
    )

    assert response.status_code == 500
    assert len(gateway.calls) == 1


@pytest.mark.asyncio
async def test_response_carries_request_id(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/payment",
        json={"namespace": "team-a", "name": "basic", "amount": "10"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.headers["X-Request-ID"] == "req-123"
