"""Build YooKassa payment links that carry the billing identity."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import structlog

from payment_bridge.core.runtime import RuntimeConfig
from payment_bridge.observability.metrics import PAYMENT_LINKS_TOTAL

from .exceptions import ClientInputError, PaymentGatewayError
from .gateway import PaymentGateway
from .types import YooKassaPaymentPayload

_CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class PaymentRequest:
    """Validated input for a single payment link."""

    namespace: str
    name: str
    amount: str

    @classmethod
    def parse(
        cls, namespace: object, name: object, amount: object
    ) -> PaymentRequest:
        fields = {"namespace": namespace, "name": name, "amount": amount}
        cleaned: dict[str, str] = {}
        for key, value in fields.items():
            text = value.strip() if isinstance(value, str) else ""
            if not text:
                raise ClientInputError(f"'{key}' is required")
            cleaned[key] = text

        if "/" in cleaned["namespace"]:
            raise ClientInputError("'namespace' must not contain '/'")

        return cls(
            namespace=cleaned["namespace"],
            name=cleaned["name"],
            amount=_normalise_amount(cleaned["amount"]),
        )


def _normalise_amount(raw: str) -> str:
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ClientInputError("'amount' must be a decimal number") from exc
    if not value.is_finite() or value <= 0:
        raise ClientInputError("'amount' must be a positive decimal number")
    try:
        quantized = value.quantize(_CENTS)
    except InvalidOperation as exc:
        raise ClientInputError("'amount' is out of range") from exc
    if quantized != value:
        raise ClientInputError("'amount' must have at most two decimal places")
    return str(quantized)


def build_description(prefix: str, namespace: str, name: str) -> str:
    return f"{prefix}{namespace}/{name}"


def build_payment_payload(
    request: PaymentRequest, runtime: RuntimeConfig
) -> YooKassaPaymentPayload:
    """Return the YooKassa creation payload for ``request``.

    Identity travels twice: in ``metadata`` for machines and in the
    description for people and for tooling that cannot see metadata. The
    return URL stays identity-free.
    """

    payload: YooKassaPaymentPayload = {
        "amount": {"value": request.amount, "currency": runtime.currency},
        "capture": runtime.capture,
        "confirmation": {"type": "redirect", "return_url": runtime.return_url},
        "description": build_description(
            runtime.description_prefix, request.namespace, request.name
        ),
        "metadata": {"namespace": request.namespace, "billing": request.name},
    }
    if runtime.payment_method:
        payload["payment_method_data"] = {"type": runtime.payment_method}
    return payload


class PaymentLinkService:
    """Creates provider payments and returns their checkout URL."""

    def __init__(self, *, gateway: PaymentGateway, runtime: RuntimeConfig) -> None:
        self._gateway = gateway
        self._runtime = runtime
        self._logger = structlog.get_logger(__name__)

    async def create_link(self, request: PaymentRequest) -> str:
        payload = build_payment_payload(request, self._runtime)
        idempotency_key = uuid.uuid4().hex

        try:
            response = await self._gateway.create_payment(payload, idempotency_key)
            confirmation = response.get("confirmation") or {}
            url = confirmation.get("confirmation_url")
            if not isinstance(url, str) or not url:
                raise PaymentGatewayError(
                    f"YooKassa payment {response['id']} has no confirmation URL"
                )
        except PaymentGatewayError as exc:
            PAYMENT_LINKS_TOTAL.labels(status="failed").inc()
            self._logger.error(
                "payment_link_failed",
                namespace=request.namespace,
                billing=request.name,
                idempotency_key=idempotency_key,
                error=str(exc),
            )
            raise

        PAYMENT_LINKS_TOTAL.labels(status="created").inc()
        self._logger.info(
            "payment_link_created",
            namespace=request.namespace,
            billing=request.name,
            amount=request.amount,
            provider_payment_id=response["id"],
        )
        return url
