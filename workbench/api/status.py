from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import HealthResponse
from .dependencies import management_guard

router = APIRouter(tags=["status"])


@router.get("/_health/ping", response_model=HealthResponse, dependencies=[Depends(management_guard)])
async def ping() -> HealthResponse:
    return HealthResponse()
