"""HTTP status returned to the provider for each webhook outcome."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from fastapi import status

from .enums import WebhookOutcome

# Only a malformed body asks the provider to redeliver.
WEBHOOK_RESPONSE_STATUS: Final[Mapping[WebhookOutcome, int]] = MappingProxyType(
    {
        WebhookOutcome.REJECTED: status.HTTP_400_BAD_REQUEST,
        WebhookOutcome.IGNORED: status.HTTP_200_OK,
        WebhookOutcome.VERIFY_FAILED: status.HTTP_202_ACCEPTED,
        WebhookOutcome.UNRECOVERABLE: status.HTTP_200_OK,
        WebhookOutcome.LEDGER_FAILED: status.HTTP_200_OK,
        WebhookOutcome.RECORDED: status.HTTP_200_OK,
    }
)


def response_status_for(outcome: WebhookOutcome) -> int:
    return WEBHOOK_RESPONSE_STATUS[outcome]
