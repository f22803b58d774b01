"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from graffiti.lookup.glyph_data import GlyphDataTable
from graffiti.lookup.table import OverlapLookupTable


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    overlap_mode: str = ""
    cached_styles: list[str] = Field(default_factory=list)


class RunModel(BaseModel):
    top: int
    bottom: int
    density: float


class ExtractResponse(BaseModel):
    character: str
    bounds: dict[str, float]
    grid_rows: int
    grid_cols: int
    frame_declared: bool
    vertical_runs: list[list[RunModel]] = Field(default_factory=list)
    ascii_grid: str = ""
    fill_pct: float = 0.0


class OverlapResponse(BaseModel):
    first: str
    second: str
    ratio: float
    path: str
    source: str | None = None
    score: float | None = None
    metrics: dict[str, float] = Field(default_factory=dict)


class PlacedGlyphModel(BaseModel):
    character: str
    x: float
    width: float
    overlap: float
    rotation: float = 0.0
    path: str
    placeholder: bool = False


class LayoutResponse(BaseModel):
    word: str
    style: str
    glyphs: list[PlacedGlyphModel] = Field(default_factory=list)
    total_width: float = 0.0
    metrics: dict[str, float] = Field(default_factory=dict)


class GenerateResponse(BaseModel):
    table: OverlapLookupTable
    glyph_data: GlyphDataTable | None = None
    timings: dict[str, dict[str, float]] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)
    processing_time_ms: float = 0.0
