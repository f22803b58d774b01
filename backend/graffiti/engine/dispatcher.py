"""Mode dispatcher — serve overlaps and glyphs from lookup tables or compute them.

The mode is a runtime configuration value, so the table-backed production
path and the on-demand path run in the same build and are testable side by
side.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable

from graffiti.engine.config import DEFAULT_CONFIG, EngineConfig
from graffiti.engine.errors import GlyphAssetNotFoundError, MalformedGlyphError
from graffiti.engine.extractor import extract
from graffiti.engine.glyph import ProcessedGlyph, create_space_glyph, placeholder_glyph
from graffiti.lookup.assets import GlyphAssetStore
from graffiti.lookup.cache import LookupCache
from graffiti.lookup.glyph_data import record_to_glyph
from graffiti.lookup.table import OverlapLookupTable
from graffiti.overlap.letter_rules import DEFAULT_RULE_SET
from graffiti.overlap.rules import (
    OverlapRuleSet,
    OverlapSource,
    explain_overlap,
    explain_pair,
    normalize_char,
    resolve_rotation,
)
from graffiti.overlap.scoring import refine_overlap, score
from graffiti.svg.parser import MarkupParser, parse_markup_to_element

logger = logging.getLogger(__name__)


class OverlapMode(str, enum.Enum):
    LOOKUP_ONLY = "lookup_only"
    PREFER_LOOKUP = "prefer_lookup"
    RUNTIME_ONLY = "runtime_only"


@dataclass
class DispatchMetrics:
    space_pairs: int = 0
    lookup_hits: int = 0
    lookup_misses: int = 0
    fallback_defaults: int = 0
    runtime_computations: int = 0
    refinements: int = 0
    total_ms: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class OverlapDecision:
    ratio: float
    # "space", "lookup", "fallback" or "runtime"
    path: str
    source: OverlapSource | None = None
    score: float | None = None


class OverlapDispatcher:
    """Resolves pair overlaps according to an ``OverlapMode``."""

    def __init__(
        self,
        rule_set: OverlapRuleSet = DEFAULT_RULE_SET,
        table: OverlapLookupTable | None = None,
        mode: OverlapMode = OverlapMode.PREFER_LOOKUP,
        fallback: float = DEFAULT_CONFIG.lookup_fallback,
        refine: bool = False,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.rule_set = rule_set
        self.table = table
        self.mode = OverlapMode(mode)
        self.fallback = fallback
        self.refine = refine
        self.config = config
        self.metrics = DispatchMetrics()

    def resolve(self, first: ProcessedGlyph, second: ProcessedGlyph, mode: OverlapMode | None = None) -> float:
        return self.decide(first, second, mode).ratio

    def decide(
        self,
        first: ProcessedGlyph,
        second: ProcessedGlyph,
        mode: OverlapMode | None = None,
    ) -> OverlapDecision:
        """Resolve a glyph pair; the runtime path may refine against the footprints."""
        mode = self.mode if mode is None else OverlapMode(mode)
        return self._timed(
            first.character,
            second.character,
            first.is_space or second.is_space,
            mode,
            lambda: self._runtime(first, second),
        )

    def decide_pair(self, first: str, second: str, mode: OverlapMode | None = None) -> OverlapDecision:
        """Resolve by characters alone. Without footprints there is no refinement."""
        mode = self.mode if mode is None else OverlapMode(mode)
        return self._timed(
            first,
            second,
            first.isspace() or second.isspace(),
            mode,
            lambda: self._runtime_pair(first, second),
        )

    def rotation(
        self,
        previous: ProcessedGlyph | None,
        glyph: ProcessedGlyph,
        mode: OverlapMode | None = None,
    ) -> float:
        """Degrees to turn ``glyph`` placed after ``previous``.

        Table rotations are used when the table covers both characters. On a
        miss lookup-only mode returns 0, the other modes apply the rules.
        """
        mode = self.mode if mode is None else OverlapMode(mode)
        if previous is None or previous.is_space or glyph.is_space:
            return 0.0
        if mode is not OverlapMode.RUNTIME_ONLY:
            table = self.table
            pair = {normalize_char(previous.character), normalize_char(glyph.character)}
            if table is not None and pair <= set(table.characters):
                return table.rotation(glyph.character, previous.character)
            if mode is OverlapMode.LOOKUP_ONLY:
                return 0.0
        return resolve_rotation(glyph.character, previous.character, self.rule_set)

    def _timed(
        self,
        first: str,
        second: str,
        spaces: bool,
        mode: OverlapMode,
        runtime: Callable[[], OverlapDecision],
    ) -> OverlapDecision:
        t0 = time.perf_counter()
        try:
            if spaces:
                self.metrics.space_pairs += 1
                decision = OverlapDecision(0.0, "space", OverlapSource.SPACE)
            else:
                decision = self._from_table(first, second, mode) or runtime()
        finally:
            self.metrics.total_ms += (time.perf_counter() - t0) * 1000
        logger.debug("Overlap %r→%r [%s]: %.3f via %s", first, second, mode.value, decision.ratio, decision.path)
        return decision

    def _from_table(self, first: str, second: str, mode: OverlapMode) -> OverlapDecision | None:
        """Table hit, or the caller default in lookup-only mode; None means compute."""
        if mode is OverlapMode.RUNTIME_ONLY:
            return None
        value = self.table.get(first, second) if self.table is not None else None
        if value is not None:
            self.metrics.lookup_hits += 1
            return OverlapDecision(value, "lookup")
        self.metrics.lookup_misses += 1
        if mode is OverlapMode.LOOKUP_ONLY:
            self.metrics.fallback_defaults += 1
            return OverlapDecision(self.fallback, "fallback")
        return None

    def _runtime_pair(self, first: str, second: str) -> OverlapDecision:
        self.metrics.runtime_computations += 1
        resolution = explain_pair(first, second, self.rule_set, self.config.exception_dampening)
        return OverlapDecision(resolution.ratio, "runtime", resolution.source)

    def _runtime(self, first: ProcessedGlyph, second: ProcessedGlyph) -> OverlapDecision:
        self.metrics.runtime_computations += 1
        resolution = explain_overlap(
            first,
            second,
            self.rule_set.rules,
            self.rule_set.default_rule,
            self.rule_set.exceptions,
            self.config.exception_dampening,
        )
        if not self.refine:
            return OverlapDecision(resolution.ratio, "runtime", resolution.source)

        if resolution.source is OverlapSource.SPECIAL_CASE:
            # Exact overrides are only scored, never moved
            s = score(first.vertical_runs, second.vertical_runs, resolution.ratio)
            return OverlapDecision(resolution.ratio, "runtime", resolution.source, s)

        self.metrics.refinements += 1
        ratio, s = refine_overlap(
            first.vertical_runs,
            second.vertical_runs,
            resolution.ratio,
            resolution.min_overlap,
            resolution.max_overlap,
            self.config.refine_step,
        )
        return OverlapDecision(ratio, "runtime", resolution.source, s)


@dataclass
class GlyphMetrics:
    cache_hits: int = 0
    lookup_hits: int = 0
    extractions: int = 0
    placeholders: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class GlyphResolver:
    """Per-glyph dispatch: cache → glyph-data table → extraction → placeholder."""

    def __init__(
        self,
        cache: LookupCache,
        store: GlyphAssetStore | None = None,
        mode: OverlapMode = OverlapMode.PREFER_LOOKUP,
        parser: MarkupParser = parse_markup_to_element,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.cache = cache
        self.store = store
        self.mode = OverlapMode(mode)
        self.parser = parser
        self.config = config
        self.metrics = GlyphMetrics()

    def get_glyph(
        self,
        style: str,
        character: str,
        variant: str = "standard",
        mode: OverlapMode | None = None,
    ) -> ProcessedGlyph:
        """Never raises for a bad glyph: failures yield a space-equivalent placeholder.

        Alphabetic characters are looked up lowercased, so "A" and "a" share
        one asset and one cache entry.
        """
        if character.isspace():
            return create_space_glyph(self.config.space_width)

        character = normalize_char(character)
        mode = self.mode if mode is None else OverlapMode(mode)
        key = (style, character, variant)
        cached = self.cache.get_glyph(key)
        if cached is not None:
            self.metrics.cache_hits += 1
            return cached

        glyph = None
        if mode is not OverlapMode.RUNTIME_ONLY:
            glyph = self._from_lookup(style, character, variant)
        if glyph is None and mode is not OverlapMode.LOOKUP_ONLY:
            glyph = self._extract(style, character, variant)
        if glyph is None:
            self.metrics.placeholders += 1
            logger.warning("Using placeholder for %r in style %r", character, style)
            return placeholder_glyph(character, self.config.space_width)

        self.cache.put_glyph(key, glyph)
        return glyph

    def _from_lookup(self, style: str, character: str, variant: str) -> ProcessedGlyph | None:
        data = self.cache.glyph_data(style)
        record = data.get(character, variant) if data is not None else None
        if record is None:
            return None
        self.metrics.lookup_hits += 1
        return record_to_glyph(record)

    def _extract(self, style: str, character: str, variant: str) -> ProcessedGlyph | None:
        if self.store is None:
            return None
        try:
            markup = self.store.read(style, character, variant)
            glyph = extract(markup, character, self.parser, self.config)
        except (MalformedGlyphError, GlyphAssetNotFoundError) as e:
            logger.warning("Extraction failed for %r: %s", character, e)
            return None
        self.metrics.extractions += 1
        return glyph
