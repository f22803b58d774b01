"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from graffiti.config import settings
from graffiti.dependencies import get_cache
from graffiti.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        overlap_mode=settings.overlap_mode.value,
        cached_styles=get_cache().styles(),
    )
