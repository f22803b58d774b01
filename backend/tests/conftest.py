"""Shared test fixtures."""

from __future__ import annotations

import pytest

from graffiti.engine.glyph import Frame, ProcessedGlyph
from graffiti.lookup.assets import GlyphAssetStore
from graffiti.utils.rasterizer import rasterize_boxes, vertical_runs


# One vertical stroke: bbox x 10..30, y 10..90 → cols 1-2, rows 1-8
BAR_GLYPH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <path d="M10 10 L30 10 L30 90 L10 90 Z" fill="#000"/>
</svg>'''

# Centered stroke: bbox x 40..60 → cols 4-5 of 10, mirror symmetric
CENTER_BAR_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <!-- centered stem -->
  <rect x="40" y="0" width="20" height="100"/>
</svg>'''

# Top-left block plus a circle in the lower right
TWO_PART_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect x="0" y="0" width="40" height="20"/>
  <circle cx="70" cy="70" r="20"/>
</svg>'''

# Two separate bars stacked in the same columns
STACKED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <path d="M0 0 H20 V10 H0 Z"/>
  <path d="M0 50 H20 V70 H0 Z"/>
</svg>'''

NO_VIEWBOX_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200">
  <path d="M0 0 L50 50"/>
</svg>'''

NON_SQUARE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 95 42">
  <polygon points="0,0 95,0 95,42"/>
</svg>'''

OFFSET_FRAME_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="-50 -50 100 100">
  <rect x="-50" y="-50" width="10" height="10"/>
</svg>'''

EMPTY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"><g></g></svg>'''

EMPTY_PATH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"><path d=""/></svg>'''


def make_glyph(character: str, boxes=((10.0, 10.0, 30.0, 90.0),), width: float = 100.0) -> ProcessedGlyph:
    """Glyph built straight from bounding boxes, skipping markup parsing."""
    frame = Frame(0.0, 0.0, width, 100.0)
    grid = rasterize_boxes(boxes, frame, 10)
    return ProcessedGlyph(
        character=character,
        markup="<svg/>",
        frame=frame,
        pixel_grid=grid,
        vertical_runs=vertical_runs(grid),
    )


@pytest.fixture
def bar_svg() -> str:
    return BAR_GLYPH_SVG


@pytest.fixture
def two_part_svg() -> str:
    return TWO_PART_SVG


@pytest.fixture
def asset_store(tmp_path) -> GlyphAssetStore:
    """Style 'straight': a, b, o, v valid; c malformed; d missing."""
    standard = tmp_path / "straight" / "standard"
    standard.mkdir(parents=True)
    (standard / "a.svg").write_text(BAR_GLYPH_SVG, encoding="utf-8")
    (standard / "b.svg").write_text(TWO_PART_SVG, encoding="utf-8")
    (standard / "o.svg").write_text(CENTER_BAR_SVG, encoding="utf-8")
    (standard / "v.svg").write_text(STACKED_SVG, encoding="utf-8")
    (standard / "c.svg").write_text(EMPTY_SVG, encoding="utf-8")
    first = tmp_path / "straight" / "first"
    first.mkdir(parents=True)
    (first / "a.svg").write_text(CENTER_BAR_SVG, encoding="utf-8")
    return GlyphAssetStore(tmp_path)
