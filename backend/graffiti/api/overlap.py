"""POST /api/overlap and /api/layout — pair resolution and word placement."""

from __future__ import annotations

from fastapi import APIRouter

from graffiti.dependencies import get_dispatcher, get_glyph_resolver
from graffiti.engine.layout import layout_word
from graffiti.models.requests import LayoutRequest, OverlapRequest
from graffiti.models.responses import LayoutResponse, OverlapResponse, PlacedGlyphModel

router = APIRouter()


@router.post("/overlap", response_model=OverlapResponse)
async def resolve_overlap(req: OverlapRequest) -> OverlapResponse:
    dispatcher = get_dispatcher(req.style)
    decision = dispatcher.decide_pair(req.first, req.second, req.mode)
    return OverlapResponse(
        first=req.first,
        second=req.second,
        ratio=decision.ratio,
        path=decision.path,
        source=decision.source.value if decision.source is not None else None,
        score=decision.score,
        metrics=dispatcher.metrics.as_dict(),
    )


@router.post("/layout", response_model=LayoutResponse)
async def layout(req: LayoutRequest) -> LayoutResponse:
    dispatcher = get_dispatcher(req.style)
    resolver = get_glyph_resolver()
    placed = layout_word(req.word, req.style, resolver, dispatcher, req.mode, req.use_variants)

    glyphs = [
        PlacedGlyphModel(
            character=req.word[i],
            x=round(p.x, 3),
            width=p.glyph.width * p.glyph.scale,
            overlap=p.overlap,
            rotation=p.glyph.rotation,
            path=p.path,
            placeholder=bool(p.glyph.metadata.get("placeholder", False)),
        )
        for i, p in enumerate(placed)
    ]
    total = max((g.x + g.width for g in glyphs), default=0.0)
    return LayoutResponse(
        word=req.word,
        style=req.style,
        glyphs=glyphs,
        total_width=round(total, 3),
        metrics={**dispatcher.metrics.as_dict(), **resolver.metrics.as_dict()},
    )
