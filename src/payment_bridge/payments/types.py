from __future__ import annotations

from typing import NotRequired, TypedDict

__all__ = [
    "PaymentConfirmationPayload",
    "PaymentProviderResponse",
    "YooKassaAmountPayload",
    "YooKassaMetadataPayload",
    "YooKassaConfirmationPayload",
    "YooKassaPaymentMethodPayload",
    "YooKassaPaymentPayload",
]


class PaymentConfirmationPayload(TypedDict, total=False):
    type: NotRequired[str]
    confirmation_url: NotRequired[str]
    return_url: NotRequired[str]


class YooKassaAmountPayload(TypedDict):
    value: str
    currency: str


class PaymentProviderResponse(TypedDict):
    """Serialised YooKassa payment object as returned by the gateway."""

    id: str
    status: NotRequired[str]
    amount: NotRequired[YooKassaAmountPayload]
    description: NotRequired[str]
    metadata: NotRequired[dict[str, str]]
    confirmation: NotRequired[PaymentConfirmationPayload]


class YooKassaMetadataPayload(TypedDict):
    namespace: str
    billing: str


class YooKassaConfirmationPayload(TypedDict):
    type: str
    return_url: str


class YooKassaPaymentMethodPayload(TypedDict):
    type: str


class YooKassaPaymentPayload(TypedDict):
    amount: YooKassaAmountPayload
    capture: bool
    confirmation: YooKassaConfirmationPayload
    description: str
    metadata: YooKassaMetadataPayload
    payment_method_data: NotRequired[YooKassaPaymentMethodPayload]
