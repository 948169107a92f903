"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- liveness plus whether the realtime store is up
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_store
from src.api.middleware import limiter
from src.api.schemas import HealthResponse
from src.infrastructure.store import RealtimeStore

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
@limiter.limit("100/minute")
async def health(
    request: Request,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    return HealthResponse(realtime=store is not None)
