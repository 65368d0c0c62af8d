"""Inbound YooKassa notification envelope."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NotificationObject(BaseModel):
    """Advisory payment snapshot; only ``id`` is ever used."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    status: str | None = None


class PaymentNotification(BaseModel):
    """``{"type": "notification", "event": "...", "object": {...}}``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = "notification"
    event: str = Field(..., min_length=1)
    payment: NotificationObject = Field(..., alias="object")
