"""LookupCache — explicitly owned store for generated tables and resolved glyphs.

Invalidation is regenerate-and-replace: a new table for a style replaces the
old snapshot wholesale and drops that style's cached glyphs.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from graffiti.engine.glyph import ProcessedGlyph
from graffiti.lookup.glyph_data import GlyphDataTable
from graffiti.lookup.table import OverlapLookupTable

logger = logging.getLogger(__name__)

# (style, character, variant)
GlyphKey = tuple[str, str, str]


class LookupCache:
    def __init__(self, max_glyphs: int = 256) -> None:
        self.max_glyphs = max_glyphs
        self._tables: dict[str, OverlapLookupTable] = {}
        self._glyph_data: dict[str, GlyphDataTable] = {}
        self._glyphs: OrderedDict[GlyphKey, ProcessedGlyph] = OrderedDict()
        self._lock = threading.Lock()

    # --- Overlap tables ---

    def table(self, style: str) -> OverlapLookupTable | None:
        return self._tables.get(style)

    def glyph_data(self, style: str) -> GlyphDataTable | None:
        return self._glyph_data.get(style)

    def replace(
        self,
        style: str,
        table: OverlapLookupTable,
        glyph_data: GlyphDataTable | None = None,
    ) -> None:
        """Install freshly generated artifacts for ``style``."""
        with self._lock:
            self._tables[style] = table
            if glyph_data is not None:
                self._glyph_data[style] = glyph_data
            self._drop_glyphs(style)
        logger.info("Replaced cached lookup for %r (%d entries)", style, table.size)

    def invalidate(self, style: str) -> None:
        with self._lock:
            self._tables.pop(style, None)
            self._glyph_data.pop(style, None)
            self._drop_glyphs(style)
        logger.info("Invalidated cached lookup for %r", style)

    def styles(self) -> list[str]:
        return sorted(self._tables)

    # --- Glyphs (LRU) ---

    def get_glyph(self, key: GlyphKey) -> ProcessedGlyph | None:
        with self._lock:
            glyph = self._glyphs.get(key)
            if glyph is not None:
                self._glyphs.move_to_end(key)
            return glyph

    def put_glyph(self, key: GlyphKey, glyph: ProcessedGlyph) -> None:
        with self._lock:
            self._glyphs[key] = glyph
            self._glyphs.move_to_end(key)
            while len(self._glyphs) > self.max_glyphs:
                self._glyphs.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
            self._glyph_data.clear()
            self._glyphs.clear()

    def stats(self) -> dict[str, int]:
        return {
            "tables": len(self._tables),
            "glyph_tables": len(self._glyph_data),
            "glyphs": len(self._glyphs),
        }

    def _drop_glyphs(self, style: str) -> None:
        for key in [k for k in self._glyphs if k[0] == style]:
            del self._glyphs[key]
