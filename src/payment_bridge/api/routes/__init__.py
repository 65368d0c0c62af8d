from __future__ import annotations

from typing import Final

from fastapi import APIRouter, FastAPI

from . import health, payments, webhooks

__all__ = ["ROUTERS", "include_routers"]

ROUTERS: Final[tuple[APIRouter, ...]] = (
    health.router,
    payments.router,
    webhooks.router,
)


def include_routers(app: FastAPI) -> None:
    for router in ROUTERS:
        app.include_router(router)
