from __future__ import annotations

import re
import time
import uuid
from collections.abc import Iterable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from payment_bridge.core.constants import REQUEST_ID_HEADER
from payment_bridge.core.logging import bind_request_context, clear_request_context

logger = structlog.get_logger("payment_bridge.request")

# Webhook callers are untrusted; only short token-like ids are echoed back.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(candidate: str | None) -> str:
    """Return ``candidate`` when it is a safe token, otherwise a fresh UUID."""

    if candidate and _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id and write one access record per request.

    Paths in ``quiet_paths`` (the liveness check, the metrics scrape) are
    recorded at debug level; payment and webhook traffic at info.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        quiet_paths: Iterable[str] = (),
        header_name: str = REQUEST_ID_HEADER,
    ) -> None:
        super().__init__(app)
        self._quiet_paths = frozenset(quiet_paths)
        self._header_name = header_name

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(self._header_name))
        path = request.url.path
        bind_request_context(request_id=request_id)
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
            raise
        else:
            record = logger.debug if path in self._quiet_paths else logger.info
            record(
                "request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
        finally:
            clear_request_context()

        response.headers[self._header_name] = request_id
        return response
