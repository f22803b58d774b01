"""Batch generation trigger — one style's overlap table plus its glyph data."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from graffiti.lookup.assets import GlyphAssetStore
from graffiti.lookup.cache import LookupCache
from graffiti.lookup.glyph_data import GlyphDataTable, build_glyph_data
from graffiti.lookup.table import OverlapLookupTable, generate_with_timings
from graffiti.lookup.validation import ValidationLevel
from graffiti.overlap.letter_rules import DEFAULT_RULE_SET, SUPPORTED_CHARACTERS
from graffiti.overlap.rules import OverlapRuleSet

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    table: OverlapLookupTable
    glyph_data: GlyphDataTable | None = None
    # timings[first][second] = milliseconds spent resolving that entry
    timings: dict[str, dict[str, float]] = field(default_factory=dict)
    # character → error message for glyphs that could not be extracted
    failures: dict[str, str] = field(default_factory=dict)
    elapsed_ms: float = 0.0
    cancelled: bool = False


def generate_style(
    style: str,
    characters: Iterable[str] = SUPPORTED_CHARACTERS,
    *,
    rule_set: OverlapRuleSet = DEFAULT_RULE_SET,
    store: GlyphAssetStore | None = None,
    variants: Iterable[str] = ("standard",),
    validation_level: ValidationLevel = "normal",
    cache: LookupCache | None = None,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> BatchResult:
    """Build the lookup artifacts for ``style``. Local and idempotent.

    Glyph data is only built when an asset ``store`` is given, validated at
    ``validation_level``. A complete result replaces the style's entry in
    ``cache``; a cancelled one does not.
    """
    start = time.perf_counter()
    chars = list(characters)

    table, timings = generate_with_timings(chars, style, rule_set, max_workers=max_workers, cancel=cancel)

    glyph_data = None
    failures: dict[str, str] = {}
    if store is not None:
        glyph_data = build_glyph_data(
            style, store, chars, tuple(variants), validation_level=validation_level, max_workers=max_workers
        )
        for failure in glyph_data.failures:
            failures.setdefault(failure.character, failure.error)

    cancelled = cancel is not None and cancel.is_set()
    if cache is not None and not cancelled:
        cache.replace(style, table, glyph_data)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "Batch %r: %d entries, %d glyph failures, %.0fms%s",
        style,
        table.size,
        len(failures),
        elapsed,
        " (cancelled)" if cancelled else "",
    )
    return BatchResult(
        table=table,
        glyph_data=glyph_data,
        timings=timings,
        failures=failures,
        elapsed_ms=round(elapsed, 1),
        cancelled=cancelled,
    )
