"""POST /api/glyphs/extract — footprint of a single glyph."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from graffiti.engine.errors import MalformedGlyphError
from graffiti.engine.extractor import extract_async
from graffiti.models.requests import ExtractRequest
from graffiti.models.responses import ExtractResponse, RunModel
from graffiti.utils.rasterizer import grid_fill_percentage, grid_to_text

router = APIRouter(prefix="/glyphs")


@router.post("/extract", response_model=ExtractResponse)
async def extract_glyph(req: ExtractRequest) -> ExtractResponse:
    try:
        glyph = await extract_async(req.svg, req.character)
    except MalformedGlyphError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    b = glyph.bounds
    rows, cols = glyph.grid_shape
    return ExtractResponse(
        character=glyph.character,
        bounds={"left": b.left, "right": b.right, "top": b.top, "bottom": b.bottom},
        grid_rows=rows,
        grid_cols=cols,
        frame_declared=glyph.frame_declared,
        vertical_runs=[
            [RunModel(top=r.top, bottom=r.bottom, density=r.density) for r in col] for col in glyph.vertical_runs
        ],
        ascii_grid=grid_to_text(glyph.pixel_grid),
        fill_pct=round(grid_fill_percentage(glyph.pixel_grid), 1),
    )
