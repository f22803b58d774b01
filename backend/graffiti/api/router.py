"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from graffiti.api import glyphs, health, lookup, overlap

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(glyphs.router)
api_router.include_router(overlap.router)
api_router.include_router(lookup.router)
