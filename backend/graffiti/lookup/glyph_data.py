"""Glyph-data artifact — persisted footprints the production renderer loads
instead of running extraction.

Runs are stored instead of the grid: every filled cell belongs to exactly one
run, so the grid is rebuilt from the runs without loss.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import numpy as np
from pydantic import BaseModel, Field

from graffiti.engine.config import DEFAULT_CONFIG, EngineConfig
from graffiti.engine.errors import GlyphAssetNotFoundError, MalformedGlyphError
from graffiti.engine.extractor import extract
from graffiti.engine.glyph import Frame, ProcessedGlyph, VerticalRun
from graffiti.lookup.assets import GlyphAssetStore
from graffiti.lookup.validation import (
    GlyphValidation,
    ValidationLevel,
    ValidationSummary,
    summarize_validation,
    validate_glyph,
)
from graffiti.overlap.rules import normalize_char
from graffiti.svg.parser import MarkupParser, parse_markup_to_element

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_BETWEEN_TAGS_RE = re.compile(r">\s+<")


class BoundsModel(BaseModel):
    left: float
    right: float
    top: float
    bottom: float


class FootprintModel(BaseModel):
    rows: int
    cols: int
    resolution: int
    # Per column: [top, bottom, density] triples
    vertical_runs: list[list[tuple[int, int, float]]] = Field(default_factory=list)


class GlyphRecordMetadata(BaseModel):
    has_content: bool = True
    is_symmetric: bool = False
    processing_time_ms: float = 0.0
    file_size: int = 0
    optimized: bool = False
    frame_declared: bool = True
    primitives: int = 0
    warnings: list[str] = Field(default_factory=list)


class GlyphRecord(BaseModel):
    character: str
    style: str
    variant: str = "standard"
    bounds: BoundsModel
    width: float
    height: float
    view_box: str
    markup: str
    footprint: FootprintModel
    metadata: GlyphRecordMetadata = Field(default_factory=GlyphRecordMetadata)


class GlyphFailure(BaseModel):
    character: str
    variant: str
    error: str


class GlyphDataTable(BaseModel):
    style: str
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    records: list[GlyphRecord] = Field(default_factory=list)
    failures: list[GlyphFailure] = Field(default_factory=list)
    validation_level: ValidationLevel = "normal"
    validation: ValidationSummary | None = None

    def get(self, character: str, variant: str = "standard") -> GlyphRecord | None:
        """Record for the variant, else the character's first record."""
        key = normalize_char(character)
        matches = [r for r in self.records if r.character == key]
        for record in matches:
            if record.variant == variant:
                return record
        return matches[0] if matches else None

    @property
    def failed_characters(self) -> list[str]:
        return sorted({f.character for f in self.failures})


def optimize_markup(markup: str) -> str:
    """Drop comments and collapse whitespace; geometry is untouched."""
    text = _COMMENT_RE.sub("", markup)
    text = _WHITESPACE_RE.sub(" ", text)
    return _BETWEEN_TAGS_RE.sub("><", text).strip()


def detect_symmetry(glyph: ProcessedGlyph) -> bool:
    """Footprint is identical to its left-right mirror."""
    grid = glyph.pixel_grid
    return bool(grid.any()) and bool(np.array_equal(grid, grid[:, ::-1]))


def glyph_to_record(
    glyph: ProcessedGlyph,
    style: str,
    variant: str = "standard",
    processing_time_ms: float = 0.0,
    optimize: bool = True,
    resolution: int = DEFAULT_CONFIG.sampling_resolution,
    warnings: Sequence[str] = (),
) -> GlyphRecord:
    markup = optimize_markup(glyph.markup) if optimize else glyph.markup
    rows, cols = glyph.grid_shape
    b = glyph.bounds
    return GlyphRecord(
        character=normalize_char(glyph.character),
        style=style,
        variant=variant,
        bounds=BoundsModel(left=b.left, right=b.right, top=b.top, bottom=b.bottom),
        width=glyph.width,
        height=glyph.height,
        view_box=glyph.frame.view_box,
        markup=markup,
        footprint=FootprintModel(
            rows=rows,
            cols=cols,
            resolution=resolution,
            vertical_runs=[[(r.top, r.bottom, r.density) for r in col] for col in glyph.vertical_runs],
        ),
        metadata=GlyphRecordMetadata(
            has_content=glyph.has_content,
            is_symmetric=detect_symmetry(glyph),
            processing_time_ms=round(processing_time_ms, 3),
            file_size=len(markup.encode("utf-8")),
            optimized=optimize,
            frame_declared=glyph.frame_declared,
            primitives=int(glyph.metadata.get("primitives", 0)),
            warnings=list(warnings),
        ),
    )


def record_to_glyph(record: GlyphRecord) -> ProcessedGlyph:
    """Rebuild a ProcessedGlyph from its record. No markup parsing happens."""
    fp = record.footprint
    grid = np.zeros((fp.rows, fp.cols), dtype=bool)
    columns: list[tuple[VerticalRun, ...]] = []
    for c, col in enumerate(fp.vertical_runs):
        runs = tuple(VerticalRun(top=t, bottom=b, density=d) for t, b, d in col)
        for run in runs:
            grid[run.top : run.bottom + 1, c] = True
        columns.append(runs)

    b = record.bounds
    return ProcessedGlyph(
        character=record.character,
        markup=record.markup,
        frame=Frame(b.left, b.top, b.right - b.left, b.bottom - b.top),
        pixel_grid=grid,
        vertical_runs=tuple(columns),
        frame_declared=record.metadata.frame_declared,
        metadata={"style": record.style, "variant": record.variant, "from_lookup": True},
    )


def _extract_one(
    store: GlyphAssetStore,
    style: str,
    character: str,
    variant: str,
    optimize: bool,
    parser: MarkupParser,
    config: EngineConfig,
) -> tuple[GlyphRecord, GlyphValidation]:
    t0 = time.perf_counter()
    markup = store.read(style, character, variant)
    glyph = extract(markup, character, parser, config)
    validation = validate_glyph(glyph, character)
    elapsed = (time.perf_counter() - t0) * 1000
    record = glyph_to_record(
        glyph, style, variant, elapsed, optimize, config.sampling_resolution, warnings=validation.warnings
    )
    return record, validation


def build_glyph_data(
    style: str,
    store: GlyphAssetStore,
    characters: Iterable[str],
    variants: Iterable[str] = ("standard",),
    *,
    optimize: bool = True,
    validation_level: ValidationLevel = "normal",
    parser: MarkupParser = parse_markup_to_element,
    config: EngineConfig = DEFAULT_CONFIG,
    max_workers: int | None = None,
) -> GlyphDataTable:
    """Extract and validate every (character, variant) of a style.

    Characters are normalized, so "A" and "a" produce one record. A missing
    or malformed glyph is recorded in ``failures`` and the batch carries on
    with the remaining glyphs. With ``validation_level="strict"`` a glyph
    that fails validation is a failure too; ``"normal"`` keeps it and only
    reports the problems in ``validation``.
    """
    variants = tuple(variants)
    keys = list(dict.fromkeys((normalize_char(c), v) for c in characters for v in variants))
    table = GlyphDataTable(style=style, validation_level=validation_level)
    validations: list[GlyphValidation] = []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            key: pool.submit(_extract_one, store, style, key[0], key[1], optimize, parser, config) for key in keys
        }
        for (character, variant), future in futures.items():
            try:
                record, validation = future.result()
            except (MalformedGlyphError, GlyphAssetNotFoundError) as e:
                logger.warning("Glyph %r (%s) failed: %s", character, variant, e)
                table.failures.append(GlyphFailure(character=character, variant=variant, error=str(e)))
                continue

            validations.append(validation)
            if not validation.is_valid and validation_level == "strict":
                error = "; ".join(validation.errors)
                logger.warning("Glyph %r (%s) rejected: %s", character, variant, error)
                table.failures.append(GlyphFailure(character=character, variant=variant, error=error))
                continue
            table.records.append(record)

    table.validation = summarize_validation(validations)
    logger.info(
        "Glyph data for %r: %d records, %d failures, %d invalid",
        style,
        len(table.records),
        len(table.failures),
        len(table.validation.invalid_characters),
    )
    return table
