"""Graffiti glyph engine — footprint extraction and glyph model."""

from graffiti.engine.config import DEFAULT_CONFIG, EngineConfig
from graffiti.engine.errors import MalformedGlyphError, MissingFrameWarning
from graffiti.engine.extractor import extract, extract_async
from graffiti.engine.glyph import Bounds, Frame, ProcessedGlyph, VerticalRun, create_space_glyph, placeholder_glyph

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "MalformedGlyphError",
    "MissingFrameWarning",
    "extract",
    "extract_async",
    "Bounds",
    "Frame",
    "ProcessedGlyph",
    "VerticalRun",
    "create_space_glyph",
    "placeholder_glyph",
]
