from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from httpx import AsyncClient

from payment_bridge.api import middleware
from payment_bridge.api.middleware import resolve_request_id


@dataclass(slots=True)
class RecordingLogger:
    records: list[tuple[str, str, dict[str, Any]]] = field(default_factory=list)

    def debug(self, event: str, **fields: Any) -> None:
        self.records.append(("debug", event, fields))

    def info(self, event: str, **fields: Any) -> None:
        self.records.append(("info", event, fields))

    def exception(self, event: str, **fields: Any) -> None:
        self.records.append(("exception", event, fields))


@pytest.fixture()
def access_log(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    recorder = RecordingLogger()
    monkeypatch.setattr(middleware, "logger", recorder)
    return recorder


def test_safe_request_id_is_kept() -> None:
    assert resolve_request_id("req-123:abc.DEF_9") == "req-123:abc.DEF_9"


@pytest.mark.parametrize("candidate", [None, "", "a b", "x" * 129, "id;drop"])
def test_unsafe_request_id_is_replaced(candidate: str | None) -> None:
    resolved = resolve_request_id(candidate)

    assert resolved != candidate
    assert len(resolved) == 36


@pytest.mark.asyncio
async def test_untrusted_request_id_is_not_echoed(async_client: AsyncClient) -> None:
    response = await async_client.get("/", headers={"X-Request-ID": "x" * 200})

    assert response.headers["X-Request-ID"] != "x" * 200
    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.asyncio
async def test_liveness_check_is_logged_at_debug(
    async_client: AsyncClient, access_log: RecordingLogger
) -> None:
    await async_client.get("/")

    assert [(level, event) for level, event, _ in access_log.records] == [
        ("debug", "request_completed")
    ]
    assert access_log.records[0][2]["status_code"] == 200


@pytest.mark.asyncio
async def test_webhook_traffic_is_logged_at_info(
    async_client: AsyncClient, access_log: RecordingLogger
) -> None:
    await async_client.post("/yookassa/webhook", content=b"not json")

    [(level, event, fields)] = access_log.records
    assert (level, event) == ("info", "request_completed")
    assert fields["path"] == "/yookassa/webhook"
    assert fields["status_code"] == 400
