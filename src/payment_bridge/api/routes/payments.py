from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from payment_bridge.api.schemas.payments import PaymentLinkRequest
from payment_bridge.payments.dependencies import get_link_service
from payment_bridge.payments.exceptions import ClientInputError, PaymentGatewayError
from payment_bridge.payments.link import PaymentLinkService

router = APIRouter(tags=["payments"])

logger = structlog.get_logger(__name__)


async def _read_payload(request: Request) -> Any:
    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return await request.json()
        except ValueError as exc:
            raise ClientInputError("request body is not valid JSON") from exc
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.post(
    "/payment",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    response_class=RedirectResponse,
    summary="Create a payment and redirect to the provider checkout page",
)
async def create_payment_link(
    request: Request,
    link_service: PaymentLinkService = Depends(get_link_service),
) -> RedirectResponse:
    try:
        payload = PaymentLinkRequest.model_validate(await _read_payload(request))
        payment_request = payload.to_domain()
    except (ValidationError, ClientInputError) as exc:
        logger.warning("payment_request_invalid", error=str(exc))
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, detail="invalid request"
        ) from exc

    try:
        url = await link_service.create_link(payment_request)
    except PaymentGatewayError as exc:
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="payment provider request failed",
        ) from exc

    return RedirectResponse(url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
