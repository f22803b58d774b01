"""Glyph markup parser — regex facade that turns raw SVG text into an element handle.

The extractor depends only on the ``MarkupParser`` capability; hosts that want a
different document parser (lxml, a browser DOM bridge…) inject their own.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")
_ATTR_RE = re.compile(r"""([\w:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

OUTLINE_TAGS = ("path", "rect", "circle", "ellipse", "line", "polyline", "polygon")
_PRIMITIVE_RE = re.compile(
    r"<(" + "|".join(OUTLINE_TAGS) + r")\b[^>]*?/?\s*>",
    re.IGNORECASE,
)


@dataclass
class MarkupElement:
    """Element-like handle: a tag, its attributes and its outline primitives."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[MarkupElement] = field(default_factory=list)
    source: str = ""

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    @property
    def view_box(self) -> tuple[float, float, float, float] | None:
        """Parsed viewBox, or None when absent or unusable."""
        raw = self.attributes.get("viewBox")
        if raw is None:
            return None
        parts = [p for p in _VIEWBOX_SPLIT_RE.split(raw.strip()) if p]
        if len(parts) != 4:
            logger.warning("Ignoring malformed viewBox %r", raw)
            return None
        try:
            x, y, w, h = (float(p) for p in parts)
        except ValueError:
            logger.warning("Ignoring non-numeric viewBox %r", raw)
            return None
        if w <= 0 or h <= 0:
            logger.warning("Ignoring empty viewBox %r", raw)
            return None
        return (x, y, w, h)


MarkupParser = Callable[[str], MarkupElement]


def parse_markup_to_element(text: str) -> MarkupElement:
    """Parse SVG markup into a root element with its outline primitives as children.

    Raises ValueError when the text has no ``<svg>`` root.
    """
    cleaned = _COMMENT_RE.sub("", text)
    root_match = _SVG_OPEN_RE.search(cleaned)
    if root_match is None:
        raise ValueError("No <svg> root element")

    root = MarkupElement(tag="svg", attributes=extract_attrs(root_match.group(0)), source=text)
    for match in _PRIMITIVE_RE.finditer(cleaned, root_match.end()):
        tag_text = match.group(0)
        root.children.append(
            MarkupElement(tag=match.group(1).lower(), attributes=extract_attrs(tag_text), source=tag_text)
        )

    logger.debug("Parsed markup: %d primitives", len(root.children))
    return root


def extract_attrs(tag_text: str) -> dict[str, str]:
    """Extract attributes from an SVG tag string (either quote style)."""
    attrs: dict[str, str] = {}
    for m in _ATTR_RE.finditer(tag_text):
        attrs[m.group(1)] = m.group(2) if m.group(2) is not None else m.group(3)
    return attrs
