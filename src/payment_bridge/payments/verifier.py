from __future__ import annotations

import structlog

from .enums import PaymentStatus
from .exceptions import PaymentGatewayError
from .gateway import PaymentGateway
from .types import PaymentProviderResponse


class NotificationVerifier:
    """Re-read a payment from the provider and accept it only if it succeeded.

    The notification body is never trusted; everything downstream works on
    the record returned here.
    """

    def __init__(self, *, gateway: PaymentGateway) -> None:
        self._gateway = gateway
        self._logger = structlog.get_logger(__name__)

    async def verify(self, payment_id: str) -> PaymentProviderResponse | None:
        log = self._logger.bind(provider_payment_id=payment_id)
        try:
            record = await self._gateway.find_payment(payment_id)
        except PaymentGatewayError as exc:
            log.warning("payment_verification_failed", reason="lookup_error", error=str(exc))
            return None
        except Exception as exc:
            log.exception("payment_verification_failed", reason="lookup_error", error=str(exc))
            return None

        if record is None:
            log.warning("payment_verification_failed", reason="not_found")
            return None

        status = record.get("status")
        if status != PaymentStatus.SUCCEEDED:
            log.info("payment_verification_failed", reason="status_mismatch", status=status)
            return None

        log.info("payment_verified")
        return record
