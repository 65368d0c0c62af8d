from __future__ import annotations

from enum import StrEnum


class PaymentStatus(StrEnum):
    """Life cycle states reported by YooKassa for a payment."""

    PENDING = "pending"
    WAITING_FOR_CAPTURE = "waiting_for_capture"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"


class WebhookOutcome(StrEnum):
    """Terminal state of a single webhook delivery."""

    REJECTED = "rejected"
    IGNORED = "ignored"
    VERIFY_FAILED = "verify_failed"
    UNRECOVERABLE = "unrecoverable"
    LEDGER_FAILED = "ledger_failed"
    RECORDED = "recorded"
