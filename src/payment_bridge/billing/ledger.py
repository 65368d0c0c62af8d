from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from payment_bridge.cluster.client import ClusterClient
from payment_bridge.cluster.exceptions import LedgerWriteError
from payment_bridge.observability.metrics import BILLING_EVENT_WRITES_TOTAL

from .events import BillingEvent


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LedgerEmitter:
    """Submit BillingEvents to the cluster, fire-and-forget.

    A failed write is logged and counted but never raised: the provider has
    already been told the payment succeeded and must not be asked to retry.
    Nothing here deduplicates by provider payment id, so repeated
    notifications for one payment produce one create attempt each
    (at-least-once).
    """

    def __init__(
        self,
        *,
        store: ClusterClient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock
        self._logger = structlog.get_logger(__name__)

    async def emit(
        self,
        *,
        namespace: str,
        billing_name: str,
        amount: float,
        provider_payment_id: str | None = None,
    ) -> BillingEvent | None:
        event = BillingEvent(
            namespace=namespace,
            billing_name=billing_name,
            amount=amount,
            transition_time=self._clock(),
            provider_payment_id=provider_payment_id,
        )
        log = self._logger.bind(
            namespace=namespace,
            billing=billing_name,
            amount=amount,
            provider_payment_id=provider_payment_id,
        )

        try:
            name = await self._store.create_billing_event(event)
        except LedgerWriteError as exc:
            BILLING_EVENT_WRITES_TOTAL.labels(result="failed").inc()
            log.error("ledger_write_failed", error=str(exc), status=exc.status)
            return None
        except Exception as exc:
            BILLING_EVENT_WRITES_TOTAL.labels(result="failed").inc()
            log.exception("ledger_write_failed", error=str(exc))
            return None

        BILLING_EVENT_WRITES_TOTAL.labels(result="created").inc()
        log.info("billing_event_created", billing_event=name)
        return event
