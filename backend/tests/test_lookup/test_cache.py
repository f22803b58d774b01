"""Tests for the lookup cache and the batch generation trigger."""

from __future__ import annotations

import threading

import pytest

from graffiti.lookup.batch import generate_style
from graffiti.lookup.cache import LookupCache
from graffiti.lookup.table import generate
from graffiti.overlap.letter_rules import DEFAULT_RULE_SET
from tests.conftest import make_glyph


class TestLookupCache:
    def test_replace_and_get(self):
        cache = LookupCache()
        table = generate("ab", "straight", DEFAULT_RULE_SET)
        cache.replace("straight", table)
        assert cache.table("straight") is table
        assert cache.glyph_data("straight") is None
        assert cache.styles() == ["straight"]

    def test_replace_drops_style_glyphs(self):
        cache = LookupCache()
        cache.put_glyph(("straight", "a", "standard"), make_glyph("a"))
        cache.put_glyph(("wild", "a", "standard"), make_glyph("a"))
        cache.replace("straight", generate("a", "straight", DEFAULT_RULE_SET))
        assert cache.get_glyph(("straight", "a", "standard")) is None
        assert cache.get_glyph(("wild", "a", "standard")) is not None

    def test_invalidate(self):
        cache = LookupCache()
        cache.replace("straight", generate("a", "straight", DEFAULT_RULE_SET))
        cache.invalidate("straight")
        assert cache.table("straight") is None
        assert cache.styles() == []

    def test_invalidate_unknown_style(self):
        LookupCache().invalidate("nothing")

    def test_glyph_lru_eviction(self):
        cache = LookupCache(max_glyphs=2)
        cache.put_glyph(("s", "a", "standard"), make_glyph("a"))
        cache.put_glyph(("s", "b", "standard"), make_glyph("b"))
        # Touch "a" so "b" is the oldest
        assert cache.get_glyph(("s", "a", "standard")) is not None
        cache.put_glyph(("s", "c", "standard"), make_glyph("c"))
        assert cache.get_glyph(("s", "b", "standard")) is None
        assert cache.get_glyph(("s", "a", "standard")) is not None
        assert cache.stats()["glyphs"] == 2

    def test_clear(self):
        cache = LookupCache()
        cache.replace("straight", generate("a", "straight", DEFAULT_RULE_SET))
        cache.put_glyph(("straight", "a", "standard"), make_glyph("a"))
        cache.clear()
        assert cache.stats() == {"tables": 0, "glyph_tables": 0, "glyphs": 0}


class TestGenerateStyle:
    def test_table_only(self):
        cache = LookupCache()
        result = generate_style("straight", "abc", cache=cache)
        assert result.table.size == 9
        assert result.glyph_data is None
        assert result.failures == {}
        assert not result.cancelled
        assert cache.table("straight") is result.table

    def test_with_glyph_data(self, asset_store):
        cache = LookupCache()
        result = generate_style("straight", "abcd", store=asset_store, cache=cache, max_workers=2)
        assert result.table.complete
        assert set(result.failures) == {"c", "d"}
        assert [r.character for r in result.glyph_data.records] == ["a", "b"]
        assert cache.glyph_data("straight") is result.glyph_data
        assert set(result.timings) == {"a", "b", "c", "d"}

    def test_idempotent(self):
        first = generate_style("straight", "av")
        second = generate_style("straight", "av")
        assert first.table.entries == second.table.entries
        assert first.table.checksum == second.table.checksum

    def test_cancelled_run_leaves_cache_alone(self):
        cache = LookupCache()
        previous = generate_style("straight", "ab", cache=cache).table
        cancel = threading.Event()
        cancel.set()
        result = generate_style("straight", "abc", cache=cache, cancel=cancel)
        assert result.cancelled
        assert not result.table.complete
        assert cache.table("straight") is previous

    def test_default_characters(self):
        result = generate_style("straight")
        assert result.table.size == 1296
        assert result.elapsed_ms >= 0
        assert result.table.get("a", "v") == pytest.approx(0.155)
