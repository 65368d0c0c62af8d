from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from payment_bridge.core.constants import (
    BILLING_EVENT_KIND,
    BILLING_EVENT_NAME_PREFIX,
    BILLING_EVENT_TYPE,
)

PAYMENT_ID_ANNOTATION = "payment-bridge.gorizond.io/provider-payment-id"


def format_transition_time(moment: datetime) -> str:
    """Render ``moment`` the way Kubernetes serialises ``metav1.Time``."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True, slots=True)
class BillingEvent:
    """One confirmed payment credited to a billing subject."""

    namespace: str
    billing_name: str
    amount: float
    transition_time: datetime
    provider_payment_id: str | None = None
    type: str = BILLING_EVENT_TYPE
    generate_name: str = BILLING_EVENT_NAME_PREFIX

    def to_manifest(self, api_version: str) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "generateName": self.generate_name,
            "namespace": self.namespace,
        }
        if self.provider_payment_id:
            metadata["annotations"] = {PAYMENT_ID_ANNOTATION: self.provider_payment_id}
        return {
            "apiVersion": api_version,
            "kind": BILLING_EVENT_KIND,
            "metadata": metadata,
            "status": {
                "type": self.type,
                "transitionTime": format_transition_time(self.transition_time),
                "amount": self.amount,
                "billingName": self.billing_name,
            },
        }
