"""Immutable configuration resolved once during application startup."""

from __future__ import annotations

from dataclasses import dataclass

from payment_bridge.core.config import PaymentsSettings


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Values shared read-only by every request handler.

    ``dashboard_base_url`` comes from the cluster Setting (or the local
    override) and is never re-read after startup.
    """

    dashboard_base_url: str
    return_path: str
    currency: str
    payment_method: str | None
    capture: bool
    description_prefix: str

    @classmethod
    def from_settings(
        cls, payments: PaymentsSettings, dashboard_base_url: str
    ) -> RuntimeConfig:
        return cls(
            dashboard_base_url=dashboard_base_url.rstrip("/"),
            return_path=payments.return_path,
            currency=payments.currency,
            payment_method=payments.payment_method,
            capture=payments.capture,
            description_prefix=payments.description_prefix,
        )

    @property
    def return_url(self) -> str:
        return f"{self.dashboard_base_url}{self.return_path}"
