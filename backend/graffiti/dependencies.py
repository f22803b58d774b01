"""FastAPI dependency injection."""

from __future__ import annotations

import logging
from functools import lru_cache

from graffiti.config import Settings, settings
from graffiti.engine.dispatcher import GlyphResolver, OverlapDispatcher
from graffiti.lookup.assets import GlyphAssetStore
from graffiti.lookup.cache import LookupCache
from graffiti.lookup.glyph_data import GlyphDataTable
from graffiti.lookup.table import deserialize
from graffiti.overlap.letter_rules import DEFAULT_RULE_SET
from graffiti.overlap.rules import OverlapRuleSet

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_cache() -> LookupCache:
    """Process-wide cache, preloaded with any artifacts found in ``lookup_dir``."""
    cache = LookupCache(max_glyphs=settings.glyph_cache_size)
    load_artifacts(cache, settings)
    return cache


@lru_cache(maxsize=1)
def get_rule_set() -> OverlapRuleSet:
    if settings.rules_file is not None:
        return OverlapRuleSet.from_json_file(settings.rules_file)
    return DEFAULT_RULE_SET


def get_asset_store() -> GlyphAssetStore:
    return GlyphAssetStore(settings.assets_dir)


def get_dispatcher(style: str) -> OverlapDispatcher:
    return OverlapDispatcher(
        rule_set=get_rule_set(),
        table=get_cache().table(style),
        mode=settings.overlap_mode,
        fallback=settings.overlap_fallback,
        refine=settings.score_refinement,
    )


def get_glyph_resolver() -> GlyphResolver:
    return GlyphResolver(get_cache(), get_asset_store(), mode=settings.overlap_mode)


def load_artifacts(cache: LookupCache, cfg: Settings) -> int:
    """Install every persisted lookup table (and matching glyph data) into ``cache``."""
    if not cfg.lookup_dir.is_dir():
        return 0
    loaded = 0
    for path in sorted(cfg.lookup_dir.glob("overlap-lookup-*.json")):
        try:
            table = deserialize(path.read_text(encoding="utf-8"))
            glyph_path = cfg.lookup_dir / f"glyph-data-{table.style}.json"
            glyph_data = None
            if glyph_path.is_file():
                glyph_data = GlyphDataTable.model_validate_json(glyph_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Skipping lookup artifact %s: %s", path.name, e)
            continue
        cache.replace(table.style, table, glyph_data)
        loaded += 1
    logger.info("Loaded %d lookup artifacts from %s", loaded, cfg.lookup_dir)
    return loaded
