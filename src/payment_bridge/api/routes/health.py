from __future__ import annotations

from fastapi import APIRouter, Response, status

router = APIRouter(tags=["health"])


@router.get("/", summary="Liveness check", include_in_schema=False)
async def liveness() -> Response:
    return Response(status_code=status.HTTP_200_OK)
