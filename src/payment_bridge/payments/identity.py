"""Recover the billing subject and amount from a verified provider payment."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from payment_bridge.core.constants import (
    DESCRIPTION_PREFIX,
    METADATA_BILLING_KEY,
    METADATA_NAMESPACE_KEY,
)

from .exceptions import IdentityRecoveryError

__all__ = [
    "BillingIdentity",
    "RecoveredPayment",
    "IdentityStrategy",
    "MetadataIdentityStrategy",
    "DescriptionIdentityStrategy",
    "IdentityRecoverer",
    "parse_amount",
]


@dataclass(frozen=True, slots=True)
class BillingIdentity:
    namespace: str
    billing_name: str


@dataclass(frozen=True, slots=True)
class RecoveredPayment:
    identity: BillingIdentity
    amount: float
    source: str


class IdentityStrategy(Protocol):
    """One way of reading the billing identity off a payment record."""

    name: str

    def extract(self, payment: Mapping[str, Any]) -> BillingIdentity | None:
        """Return the identity, or ``None`` when this carrier has none."""


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


class MetadataIdentityStrategy:
    """Read ``metadata.namespace`` and ``metadata.billing``."""

    name = "metadata"

    def extract(self, payment: Mapping[str, Any]) -> BillingIdentity | None:
        metadata = payment.get("metadata")
        if not isinstance(metadata, Mapping):
            return None
        namespace = _clean(metadata.get(METADATA_NAMESPACE_KEY))
        billing_name = _clean(metadata.get(METADATA_BILLING_KEY))
        if namespace is None or billing_name is None:
            return None
        return BillingIdentity(namespace=namespace, billing_name=billing_name)


class DescriptionIdentityStrategy:
    """Parse ``"Payment for <namespace>/<name>"``, splitting at the first ``/``."""

    name = "description"

    def __init__(self, prefix: str = DESCRIPTION_PREFIX) -> None:
        self._prefix = prefix

    def extract(self, payment: Mapping[str, Any]) -> BillingIdentity | None:
        description = payment.get("description")
        if not isinstance(description, str) or not description.startswith(self._prefix):
            return None
        namespace, sep, billing_name = description[len(self._prefix) :].partition("/")
        namespace_clean = _clean(namespace)
        billing_clean = _clean(billing_name)
        if not sep or namespace_clean is None or billing_clean is None:
            return None
        return BillingIdentity(namespace=namespace_clean, billing_name=billing_clean)


def parse_amount(payment: Mapping[str, Any]) -> float:
    """Return ``amount.value`` as a float, refusing anything non-finite."""

    amount = payment.get("amount")
    raw = amount.get("value") if isinstance(amount, Mapping) else None
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise IdentityRecoveryError("payment amount is missing")
    try:
        value = float(raw)
    except (ValueError, OverflowError) as exc:
        raise IdentityRecoveryError(f"payment amount {raw!r} is not numeric") from exc
    if not math.isfinite(value):
        raise IdentityRecoveryError(f"payment amount {raw!r} is not finite")
    return value


class IdentityRecoverer:
    """Try each strategy in order; the first one that yields an identity wins."""

    def __init__(self, strategies: Sequence[IdentityStrategy] | None = None) -> None:
        self._strategies: tuple[IdentityStrategy, ...] = tuple(
            strategies
            if strategies is not None
            else (MetadataIdentityStrategy(), DescriptionIdentityStrategy())
        )

    def recover_identity(
        self, payment: Mapping[str, Any]
    ) -> tuple[BillingIdentity, str]:
        for strategy in self._strategies:
            identity = strategy.extract(payment)
            if identity is not None:
                return identity, strategy.name
        raise IdentityRecoveryError(
            f"payment {payment.get('id')!r} carries no billing identity"
        )

    def recover(self, payment: Mapping[str, Any]) -> RecoveredPayment:
        identity, source = self.recover_identity(payment)
        return RecoveredPayment(
            identity=identity, amount=parse_amount(payment), source=source
        )
