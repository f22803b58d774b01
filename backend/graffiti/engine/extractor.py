"""Glyph footprint extractor — markup → ProcessedGlyph.

The footprint is the union of every primitive's bounding box rasterized at a
coarse resolution, not true outline coverage. Overlap decisions only need the
vertical extent and density of ink per column.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import warnings

from graffiti.engine.config import DEFAULT_CONFIG, EngineConfig
from graffiti.engine.errors import MalformedGlyphError, MissingFrameWarning
from graffiti.engine.glyph import Frame, ProcessedGlyph
from graffiti.svg.parser import MarkupParser, parse_markup_to_element
from graffiti.svg.primitives import primitive_bbox
from graffiti.utils.rasterizer import rasterize_boxes, vertical_runs

logger = logging.getLogger(__name__)


def extract(
    markup: str,
    character: str,
    parser: MarkupParser = parse_markup_to_element,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ProcessedGlyph:
    """Build a ProcessedGlyph from raw markup.

    Raises MalformedGlyphError when the markup has no usable outline element.
    """
    try:
        root = parser(markup)
    except ValueError as e:
        raise MalformedGlyphError(character, str(e)) from e

    view_box = root.view_box
    if view_box is None:
        warnings.warn(
            f"Glyph {character!r} declares no viewBox; using default frame",
            MissingFrameWarning,
            stacklevel=2,
        )
        logger.info("No viewBox for %r, defaulting to %s", character, config.default_frame)
        frame = Frame(*config.default_frame)
    else:
        frame = Frame(*view_box)

    if not root.children:
        raise MalformedGlyphError(character)

    boxes = [bb for bb in (primitive_bbox(child) for child in root.children) if bb is not None]
    if not boxes:
        raise MalformedGlyphError(character, f"none of {len(root.children)} primitives has usable geometry")

    grid = rasterize_boxes(boxes, frame, config.sampling_resolution)
    runs = vertical_runs(grid)

    logger.debug(
        "Extracted %r: %d primitives, frame %s, grid %dx%d",
        character,
        len(boxes),
        frame.view_box,
        grid.shape[0],
        grid.shape[1],
    )
    return ProcessedGlyph(
        character=character,
        markup=markup,
        frame=frame,
        pixel_grid=grid,
        vertical_runs=runs,
        frame_declared=view_box is not None,
        metadata={"primitives": len(boxes)},
    )


async def extract_async(
    markup: str,
    character: str,
    parser: MarkupParser = parse_markup_to_element,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ProcessedGlyph:
    """Run ``extract`` in the default executor so the event loop stays free."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(extract, markup, character, parser, config))
