"""Tests for glyph-data artifacts and the asset store."""

from __future__ import annotations

import numpy as np
import pytest

from graffiti.engine.errors import GlyphAssetNotFoundError
from graffiti.engine.extractor import extract
from graffiti.lookup.assets import GlyphAssetStore, asset_name
from graffiti.lookup.glyph_data import (
    GlyphDataTable,
    build_glyph_data,
    detect_symmetry,
    glyph_to_record,
    optimize_markup,
    record_to_glyph,
)
from tests.conftest import BAR_GLYPH_SVG, CENTER_BAR_SVG, NO_VIEWBOX_SVG, STACKED_SVG, TWO_PART_SVG


class TestAssetStore:
    def test_path_layout(self, tmp_path):
        store = GlyphAssetStore(tmp_path)
        assert store.path_for("wild", "a") == tmp_path / "wild" / "standard" / "a.svg"
        assert store.path_for("wild", "a", "last") == tmp_path / "wild" / "last" / "a.svg"

    def test_non_alphanumeric_names(self):
        assert asset_name("7") == "7.svg"
        assert asset_name("!") == "u0021.svg"
        assert asset_name("é") == "u00e9.svg"

    def test_unknown_variant(self, tmp_path):
        with pytest.raises(ValueError):
            GlyphAssetStore(tmp_path).path_for("wild", "a", "italic")

    def test_missing_asset(self, asset_store):
        with pytest.raises(GlyphAssetNotFoundError):
            asset_store.read("straight", "d")

    def test_styles(self, asset_store, tmp_path):
        assert asset_store.styles() == ["straight"]
        assert asset_store.has_style("straight")
        assert not asset_store.has_style("wild")
        assert GlyphAssetStore(tmp_path / "nowhere").styles() == []


class TestRecords:
    def test_record_fields(self):
        glyph = extract(TWO_PART_SVG, "B")
        record = glyph_to_record(glyph, "straight", processing_time_ms=1.23456)
        assert record.character == "b"
        assert record.view_box == "0 0 100 100"
        assert record.width == 100.0
        assert record.footprint.rows == 10
        assert record.footprint.cols == 10
        assert record.footprint.resolution == 10
        assert record.metadata.primitives == 2
        assert record.metadata.processing_time_ms == pytest.approx(1.235)
        assert record.metadata.has_content
        assert record.metadata.optimized

    @pytest.mark.parametrize("svg", [BAR_GLYPH_SVG, TWO_PART_SVG, STACKED_SVG])
    def test_record_rebuilds_footprint(self, svg):
        glyph = extract(svg, "x")
        restored = record_to_glyph(glyph_to_record(glyph, "straight"))
        assert np.array_equal(restored.pixel_grid, glyph.pixel_grid)
        assert restored.vertical_runs == glyph.vertical_runs
        assert restored.frame == glyph.frame
        assert restored.metadata["from_lookup"] is True

    def test_record_survives_json(self):
        glyph = extract(STACKED_SVG, "v")
        table = GlyphDataTable(style="straight", records=[glyph_to_record(glyph, "straight")])
        restored = GlyphDataTable.model_validate_json(table.model_dump_json())
        rebuilt = record_to_glyph(restored.records[0])
        assert rebuilt.vertical_runs == glyph.vertical_runs

    def test_undeclared_frame_flag_kept(self):
        with pytest.warns(UserWarning):
            glyph = extract(NO_VIEWBOX_SVG, "l")
        record = glyph_to_record(glyph, "straight")
        assert record.metadata.frame_declared is False
        assert record_to_glyph(record).frame_declared is False

    def test_unoptimized_markup_kept_verbatim(self):
        glyph = extract(CENTER_BAR_SVG, "o")
        record = glyph_to_record(glyph, "straight", optimize=False)
        assert record.markup == CENTER_BAR_SVG
        assert record.metadata.file_size == len(CENTER_BAR_SVG.encode("utf-8"))


def test_optimize_markup():
    optimized = optimize_markup(CENTER_BAR_SVG)
    assert "<!--" not in optimized
    assert "\n" not in optimized
    assert "><rect" in optimized
    assert optimized.startswith("<svg")


def test_detect_symmetry():
    assert detect_symmetry(extract(CENTER_BAR_SVG, "o"))
    assert not detect_symmetry(extract(BAR_GLYPH_SVG, "a"))


class TestBuildGlyphData:
    def test_failures_do_not_stop_the_batch(self, asset_store):
        data = build_glyph_data("straight", asset_store, "abcdo", max_workers=2)
        assert [r.character for r in data.records] == ["a", "b", "o"]
        assert data.failed_characters == ["c", "d"]
        errors = {f.character: f.error for f in data.failures}
        assert "Malformed glyph 'c'" in errors["c"]

    def test_variants(self, asset_store):
        data = build_glyph_data("straight", asset_store, "a", ("standard", "first"))
        assert {r.variant for r in data.records} == {"standard", "first"}
        assert data.get("a", "first").metadata.is_symmetric
        assert not data.get("a", "standard").metadata.is_symmetric

    def test_missing_variant_falls_back_to_first_record(self, asset_store):
        data = build_glyph_data("straight", asset_store, "b")
        assert data.get("b", "last").variant == "standard"
        assert data.get("B").character == "b"
        assert data.get("z") is None
