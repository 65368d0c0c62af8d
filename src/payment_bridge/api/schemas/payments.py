from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from payment_bridge.payments.link import PaymentRequest


class PaymentLinkRequest(BaseModel):
    """Client payload for ``POST /payment`` (JSON or form encoded)."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    namespace: str = ""
    name: str = ""
    amount: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> PaymentRequest:
        return PaymentRequest.parse(self.namespace, self.name, self.amount)
