from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar, cast

import requests
from yookassa import Configuration
from yookassa import Payment as YooPayment
from yookassa.domain.exceptions.api_error import ApiError
from yookassa.domain.exceptions.not_found_error import NotFoundError

from .exceptions import PaymentGatewayError
from .types import PaymentProviderResponse, YooKassaPaymentPayload

_T = TypeVar("_T")


class PaymentGateway(Protocol):
    """Protocol describing the operations required from a payment provider."""

    async def create_payment(
        self, payload: YooKassaPaymentPayload, idempotency_key: str
    ) -> PaymentProviderResponse:
        """Create a payment with the provider and return its serialised response."""

    async def find_payment(self, payment_id: str) -> PaymentProviderResponse | None:
        """Return the provider's authoritative record, or ``None`` if unknown."""


class YooKassaGateway:
    """Thin asynchronous wrapper around the official YooKassa SDK.

    The SDK is blocking, so every call runs in a worker thread and is bounded
    by ``timeout`` seconds regardless of the SDK's own retry policy.
    """

    def __init__(
        self,
        *,
        shop_id: str,
        secret_key: str,
        timeout: float = 10.0,
        max_attempts: int = 3,
    ) -> None:
        if not shop_id:
            raise ValueError("shop_id must be provided")
        if not secret_key:
            raise ValueError("secret_key must be provided")
        self._shop_id = str(shop_id)
        self._secret_key = secret_key
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._configure()

    def _configure(self) -> None:
        Configuration.configure(
            self._shop_id, self._secret_key, max_attempts=self._max_attempts
        )

    async def create_payment(
        self, payload: YooKassaPaymentPayload, idempotency_key: str
    ) -> PaymentProviderResponse:
        def _call() -> PaymentProviderResponse:
            self._configure()
            result = YooPayment.create(dict(payload), idempotency_key)
            return self._normalise_response(result)

        try:
            return await self._run(_call)
        except (ValueError, TypeError) as exc:
            raise PaymentGatewayError(f"YooKassa rejected payment payload: {exc}") from exc

    async def find_payment(self, payment_id: str) -> PaymentProviderResponse | None:
        def _call() -> PaymentProviderResponse | None:
            self._configure()
            try:
                result = YooPayment.find_one(payment_id)
            except NotFoundError:
                return None
            if result is None:
                return None
            return self._normalise_response(result)

        if not payment_id:
            return None
        return await self._run(_call)

    async def _run(self, call: Callable[[], _T]) -> _T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(call), self._timeout)
        except TimeoutError as exc:
            raise PaymentGatewayError(
                f"YooKassa did not respond within {self._timeout:g}s"
            ) from exc
        except ApiError as exc:
            raise PaymentGatewayError(str(exc)) from exc
        except requests.RequestException as exc:
            raise PaymentGatewayError(f"YooKassa request failed: {exc}") from exc

    def _normalise_response(self, result: Any) -> PaymentProviderResponse:
        """Normalize YooKassa SDK response to PaymentProviderResponse."""
        if isinstance(result, Mapping):
            normalized: Any = dict(result)
        elif hasattr(result, "to_dict"):
            normalized = result.to_dict()
        else:
            # SDK response objects iterate as (key, value) pairs.
            try:
                normalized = dict(result)
            except (TypeError, ValueError) as exc:
                raise PaymentGatewayError(
                    f"Unexpected YooKassa response type: {type(result).__name__}"
                ) from exc
        if not isinstance(normalized, dict):
            raise PaymentGatewayError("YooKassa response is not a mapping")
        payment_id = normalized.get("id")
        if not isinstance(payment_id, str):
            raise PaymentGatewayError("YooKassa response missing 'id' field")
        return cast(PaymentProviderResponse, normalized)
