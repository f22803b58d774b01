"""Tests for the markup parser and primitive bounding boxes."""

from __future__ import annotations

import pytest

from graffiti.svg.parser import MarkupElement, extract_attrs, parse_markup_to_element
from graffiti.svg.primitives import drop_degenerate_arcs, primitive_bbox
from tests.conftest import BAR_GLYPH_SVG, CENTER_BAR_SVG, NO_VIEWBOX_SVG, TWO_PART_SVG


class TestParseMarkup:
    def test_root_attributes(self):
        root = parse_markup_to_element(BAR_GLYPH_SVG)
        assert root.tag == "svg"
        assert root.get("viewBox") == "0 0 100 100"
        assert root.view_box == (0.0, 0.0, 100.0, 100.0)

    def test_primitives_become_children(self):
        root = parse_markup_to_element(TWO_PART_SVG)
        assert [c.tag for c in root.children] == ["rect", "circle"]
        assert root.children[1].get("r") == "20"

    def test_comments_are_ignored(self):
        root = parse_markup_to_element(CENTER_BAR_SVG)
        assert [c.tag for c in root.children] == ["rect"]

    def test_commented_out_primitive_is_skipped(self):
        svg = '<svg viewBox="0 0 10 10"><!-- <rect width="1" height="1"/> --><circle r="2"/></svg>'
        root = parse_markup_to_element(svg)
        assert [c.tag for c in root.children] == ["circle"]

    def test_missing_viewbox(self):
        root = parse_markup_to_element(NO_VIEWBOX_SVG)
        assert root.view_box is None

    def test_no_svg_root_raises(self):
        with pytest.raises(ValueError):
            parse_markup_to_element("<not-svg>")

    def test_source_kept(self):
        root = parse_markup_to_element(BAR_GLYPH_SVG)
        assert root.source == BAR_GLYPH_SVG
        assert root.children[0].source.startswith("<path")


class TestViewBox:
    @pytest.mark.parametrize("raw", ["0 0 100", "a b c d", "0 0 0 100", "0 0 100 -5"])
    def test_unusable_viewbox_is_none(self, raw):
        element = MarkupElement(tag="svg", attributes={"viewBox": raw})
        assert element.view_box is None

    def test_comma_separated(self):
        element = MarkupElement(tag="svg", attributes={"viewBox": "-50,-50, 100,100"})
        assert element.view_box == (-50.0, -50.0, 100.0, 100.0)


def test_extract_attrs_both_quote_styles():
    attrs = extract_attrs("""<rect x="1" y='2' stroke-width="3"/>""")
    assert attrs == {"x": "1", "y": "2", "stroke-width": "3"}


class TestPrimitiveBBox:
    def _child(self, svg: str) -> MarkupElement:
        return parse_markup_to_element(svg).children[0]

    def test_path(self):
        bbox = primitive_bbox(self._child(BAR_GLYPH_SVG))
        assert bbox == pytest.approx((10.0, 10.0, 30.0, 90.0))

    def test_rect_defaults_origin(self):
        bbox = primitive_bbox(self._child('<svg><rect width="40" height="20"/></svg>'))
        assert bbox == (0.0, 0.0, 40.0, 20.0)

    def test_circle(self):
        bbox = primitive_bbox(self._child('<svg><circle cx="70" cy="70" r="20"/></svg>'))
        assert bbox == (50.0, 50.0, 90.0, 90.0)

    def test_ellipse(self):
        bbox = primitive_bbox(self._child('<svg><ellipse cx="50" cy="50" rx="30" ry="10"/></svg>'))
        assert bbox == (20.0, 40.0, 80.0, 60.0)

    def test_line_is_ordered(self):
        bbox = primitive_bbox(self._child('<svg><line x1="30" y1="80" x2="10" y2="20"/></svg>'))
        assert bbox == (10.0, 20.0, 30.0, 80.0)

    def test_polygon(self):
        bbox = primitive_bbox(self._child('<svg><polygon points="0,0 95,0 95,42"/></svg>'))
        assert bbox == (0.0, 0.0, 95.0, 42.0)

    def test_missing_required_attribute(self):
        assert primitive_bbox(self._child('<svg><circle cx="5" cy="5"/></svg>')) is None

    def test_empty_path(self):
        assert primitive_bbox(self._child('<svg><path d=""/></svg>')) is None

    def test_unparseable_path(self):
        assert primitive_bbox(self._child('<svg><path d="M 10 Q"/></svg>')) is None

    def test_zero_length_arc_keeps_rest_of_path(self):
        bbox = primitive_bbox(self._child('<svg><path d="M10 10 A5 5 0 0 1 10 10 L 20 20"/></svg>'))
        assert bbox == pytest.approx((10.0, 10.0, 20.0, 20.0))

    def test_relative_zero_length_arc(self):
        bbox = primitive_bbox(self._child('<svg><path d="M10 10 a5 5 0 0 1 0 0 l 30 40"/></svg>'))
        assert bbox == pytest.approx((10.0, 10.0, 40.0, 50.0))


class TestDropDegenerateArcs:
    def test_absolute_arc(self):
        assert drop_degenerate_arcs("M10 10 A5 5 0 0 1 10 10 L 20 20") == "M 10 10 L 20 20"

    def test_real_arc_kept(self):
        assert drop_degenerate_arcs("M0 0 A5 5 0 0 1 10 0") == "M 0 0 A 5 5 0 0 1 10 0"

    def test_compact_flags(self):
        assert drop_degenerate_arcs("M5,5a2,2 0 0110,0a2 2 0 1 1 0 0") == "M 5 5 a 2 2 0 0 1 10 0"

    def test_implicit_lineto_after_moveto(self):
        assert drop_degenerate_arcs("m10 10 5 5 A1 1 0 0 0 15 15 z") == "m 10 10 l 5 5 z"

    def test_horizontal_vertical_and_close(self):
        d = "M0 0 H20 V10 Z A3 3 0 0 0 0 0 L5 5"
        assert drop_degenerate_arcs(d) == "M 0 0 H 20 V 10 Z L 5 5"

    def test_bad_data(self):
        with pytest.raises(ValueError):
            drop_degenerate_arcs("M 10 Q")
