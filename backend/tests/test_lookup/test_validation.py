"""Tests for glyph validation and strict/normal glyph data batches."""

from __future__ import annotations

import pytest

from graffiti.engine.extractor import extract
from graffiti.engine.glyph import create_space_glyph
from graffiti.lookup.assets import GlyphAssetStore
from graffiti.lookup.glyph_data import build_glyph_data
from graffiti.lookup.validation import GlyphValidation, summarize_validation, validate_glyph
from tests.conftest import BAR_GLYPH_SVG, CENTER_BAR_SVG, NO_VIEWBOX_SVG

# Parses, but every primitive lies outside the frame
OUTSIDE_FRAME_SVG = '<svg viewBox="0 0 100 100"><rect x="200" y="200" width="10" height="10"/></svg>'

UNCLOSED_SVG = '<svg viewBox="0 0 100 100"><rect width="10" height="10"/>'

HEAVY_SVG = '''<svg id="glyph-a" class="letter" viewBox="0 0 100 100">
  <defs><linearGradient id="g"/></defs>
  <g></g>
  <rect x="10" y="10" width="20" height="80"/>
</svg>'''

WIDE_FRAME_SVG = '<svg viewBox="0 0 300 300"><rect x="10" y="10" width="280" height="280"/></svg>'


@pytest.fixture
def mixed_store(asset_store) -> GlyphAssetStore:
    """asset_store plus 'e' drawn outside its frame and 'f' with no closing tag."""
    standard = asset_store.root / "straight" / "standard"
    (standard / "e.svg").write_text(OUTSIDE_FRAME_SVG, encoding="utf-8")
    (standard / "f.svg").write_text(UNCLOSED_SVG, encoding="utf-8")
    return asset_store


class TestValidateGlyph:
    def test_clean_glyph(self):
        result = validate_glyph(extract(BAR_GLYPH_SVG, "a"), "a")
        assert result.is_valid
        assert result.warnings == []
        assert not result.optimizable
        assert result.file_size == len(BAR_GLYPH_SVG.encode())

    def test_no_ink_inside_frame(self):
        result = validate_glyph(extract(OUTSIDE_FRAME_SVG, "e"), "e")
        assert not result.is_valid
        assert any("No ink" in e for e in result.errors)

    def test_unclosed_markup(self):
        result = validate_glyph(extract(UNCLOSED_SVG, "f"), "f")
        assert not result.is_valid
        assert any("missing <svg> tags" in e for e in result.errors)

    def test_character_mismatch(self):
        result = validate_glyph(extract(BAR_GLYPH_SVG, "a"), "b")
        assert not result.is_valid
        assert "Character mismatch" in result.errors[0]

    def test_uppercase_expected_character(self):
        assert validate_glyph(extract(BAR_GLYPH_SVG, "a"), "A").is_valid

    def test_missing_viewbox_warns(self):
        result = validate_glyph(extract(NO_VIEWBOX_SVG, "l"), "l")
        assert result.is_valid
        assert any("viewBox" in w for w in result.warnings)

    def test_large_frame_warns(self):
        result = validate_glyph(extract(WIDE_FRAME_SVG, "w"), "w")
        assert result.is_valid
        assert any("outside the standard" in w for w in result.warnings)
        assert any("Very large content" in w for w in result.warnings)

    def test_optimization_hints(self):
        result = validate_glyph(extract(HEAVY_SVG, "a"), "a")
        assert result.is_valid
        assert result.optimizable
        hints = " ".join(result.warnings)
        assert "'id'" in hints
        assert "'class'" in hints
        assert "empty group" in hints
        assert "defs" in hints

    def test_comment_is_optimizable(self):
        assert validate_glyph(extract(CENTER_BAR_SVG, "o"), "o").optimizable

    def test_space_glyph_is_valid(self):
        result = validate_glyph(create_space_glyph(), " ")
        assert result.is_valid
        assert result.warnings == []


def test_summarize_validation():
    summary = summarize_validation(
        [
            GlyphValidation(character="a", file_size=100),
            GlyphValidation(character="b", errors=["broken"], file_size=300),
            GlyphValidation(character="b", errors=["broken"], file_size=200, warnings=["w"], optimizable=True),
        ]
    )
    assert summary.total_processed == 3
    assert summary.valid_characters == 1
    assert summary.invalid_characters == ["b"]
    assert [(w.character, w.warning) for w in summary.warnings] == [("b", "w")]
    assert summary.optimization_suggestions == ["Glyph 'b' can be optimized"]
    assert summary.total_file_size == 600
    assert summary.average_file_size == 200.0


def test_empty_summary():
    summary = summarize_validation([])
    assert summary.total_processed == 0
    assert summary.average_file_size == 0.0


class TestValidationLevels:
    def test_normal_keeps_invalid_glyphs(self, mixed_store):
        data = build_glyph_data("straight", mixed_store, "aef")
        assert data.validation_level == "normal"
        assert [r.character for r in data.records] == ["a", "e", "f"]
        assert data.failures == []
        assert data.validation.total_processed == 3
        assert data.validation.valid_characters == 1
        assert data.validation.invalid_characters == ["e", "f"]

    def test_strict_turns_invalid_glyphs_into_failures(self, mixed_store):
        data = build_glyph_data("straight", mixed_store, "aef", validation_level="strict")
        assert [r.character for r in data.records] == ["a"]
        assert data.failed_characters == ["e", "f"]
        errors = {f.character: f.error for f in data.failures}
        assert "No ink" in errors["e"]
        assert "missing <svg> tags" in errors["f"]

    def test_extraction_failures_are_not_validated(self, mixed_store):
        data = build_glyph_data("straight", mixed_store, "acd", validation_level="strict")
        assert data.failed_characters == ["c", "d"]
        assert data.validation.total_processed == 1

    def test_record_carries_warnings(self, mixed_store):
        data = build_glyph_data("straight", mixed_store, "o")
        record = data.get("o")
        assert any("comments" in w for w in record.metadata.warnings)
        assert data.validation.optimization_suggestions == ["Glyph 'o' can be optimized"]
        assert data.validation.warnings[0].character == "o"
