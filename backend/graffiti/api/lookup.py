"""Lookup table endpoints — batch generation trigger and cached artifacts."""

from __future__ import annotations

import asyncio
import functools
import time

from fastapi import APIRouter, HTTPException

from graffiti.config import settings
from graffiti.dependencies import get_asset_store, get_cache, get_rule_set
from graffiti.lookup.batch import generate_style
from graffiti.lookup.glyph_data import GlyphDataTable
from graffiti.lookup.table import OverlapLookupTable
from graffiti.models.requests import GenerateRequest
from graffiti.models.responses import GenerateResponse

router = APIRouter(prefix="/lookup")


@router.post("/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest) -> GenerateResponse:
    start = time.perf_counter()
    run = functools.partial(
        generate_style,
        req.style,
        req.characters,
        rule_set=get_rule_set(),
        store=get_asset_store() if req.include_glyph_data else None,
        variants=req.variants,
        validation_level=req.validation_level,
        cache=get_cache(),
        max_workers=settings.generation_workers,
    )
    # Batch runs in a worker thread so the event loop stays responsive
    result = await asyncio.get_running_loop().run_in_executor(None, run)
    elapsed = (time.perf_counter() - start) * 1000

    return GenerateResponse(
        table=result.table,
        glyph_data=result.glyph_data,
        timings=result.timings,
        failures=result.failures,
        processing_time_ms=round(elapsed, 1),
    )


@router.get("/{style}", response_model=OverlapLookupTable)
async def get_table(style: str) -> OverlapLookupTable:
    table = get_cache().table(style)
    if table is None:
        raise HTTPException(status_code=404, detail=f"No lookup table for style {style!r}")
    return table


@router.get("/{style}/glyphs", response_model=GlyphDataTable)
async def get_glyph_data(style: str) -> GlyphDataTable:
    data = get_cache().glyph_data(style)
    if data is None:
        raise HTTPException(status_code=404, detail=f"No glyph data for style {style!r}")
    return data


@router.delete("/{style}", status_code=204)
async def invalidate(style: str) -> None:
    get_cache().invalidate(style)
