from __future__ import annotations

import structlog

from payment_bridge.billing.ledger import LedgerEmitter
from payment_bridge.core.constants import PAYMENT_SUCCEEDED_EVENT

from .enums import WebhookOutcome
from .exceptions import IdentityRecoveryError
from .identity import IdentityRecoverer
from .notifications import PaymentNotification
from .verifier import NotificationVerifier


class PaymentReconciler:
    """Drive one notification through verify, recover and emit."""

    def __init__(
        self,
        *,
        verifier: NotificationVerifier,
        emitter: LedgerEmitter,
        recoverer: IdentityRecoverer | None = None,
    ) -> None:
        self._verifier = verifier
        self._emitter = emitter
        self._recoverer = recoverer or IdentityRecoverer()
        self._logger = structlog.get_logger(__name__)

    async def reconcile(self, notification: PaymentNotification) -> WebhookOutcome:
        payment_id = notification.payment.id
        log = self._logger.bind(
            notification_event=notification.event, provider_payment_id=payment_id
        )

        if notification.event != PAYMENT_SUCCEEDED_EVENT:
            log.info("webhook_ignored")
            return WebhookOutcome.IGNORED

        record = await self._verifier.verify(payment_id)
        if record is None:
            return WebhookOutcome.VERIFY_FAILED

        try:
            recovered = self._recoverer.recover(record)
        except IdentityRecoveryError as exc:
            log.warning("identity_unrecoverable", error=str(exc))
            return WebhookOutcome.UNRECOVERABLE
        except Exception as exc:
            log.exception("identity_unrecoverable", error=str(exc))
            return WebhookOutcome.UNRECOVERABLE

        event = await self._emitter.emit(
            namespace=recovered.identity.namespace,
            billing_name=recovered.identity.billing_name,
            amount=recovered.amount,
            provider_payment_id=record["id"],
        )
        if event is None:
            return WebhookOutcome.LEDGER_FAILED

        log.info("payment_reconciled", identity_source=recovered.source)
        return WebhookOutcome.RECORDED
