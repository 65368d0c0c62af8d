from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from payment_bridge.observability.metrics import WEBHOOK_NOTIFICATIONS_TOTAL
from payment_bridge.payments.dependencies import get_reconciler
from payment_bridge.payments.enums import WebhookOutcome
from payment_bridge.payments.notifications import PaymentNotification
from payment_bridge.payments.policy import response_status_for
from payment_bridge.payments.reconciliation import PaymentReconciler

router = APIRouter(prefix="/yookassa", tags=["webhooks"])

logger = structlog.get_logger(__name__)


@router.post("/webhook", summary="Handle YooKassa payment notifications")
async def handle_yookassa_webhook(
    request: Request,
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> Response:
    raw_body = await request.body()

    try:
        notification = PaymentNotification.model_validate_json(raw_body)
    except ValidationError as exc:
        logger.warning("webhook_payload_invalid", errors=exc.error_count())
        outcome = WebhookOutcome.REJECTED
    else:
        outcome = await reconciler.reconcile(notification)

    status_code = response_status_for(outcome)
    WEBHOOK_NOTIFICATIONS_TOTAL.labels(outcome=outcome.value).inc()
    logger.info("webhook_processed", outcome=outcome.value, status_code=status_code)
    return Response(status_code=status_code)
