"""Word layout — place glyphs left to right, pulling each one back by its overlap."""

from __future__ import annotations

from dataclasses import dataclass

from graffiti.engine.dispatcher import GlyphResolver, OverlapDispatcher, OverlapMode
from graffiti.engine.glyph import ProcessedGlyph
from graffiti.overlap.rules import normalize_char


@dataclass(frozen=True)
class PlacedGlyph:
    glyph: ProcessedGlyph
    x: float
    overlap: float
    path: str


def variant_for(index: int, length: int) -> str:
    if length > 1 and index == 0:
        return "first"
    if length > 1 and index == length - 1:
        return "last"
    return "standard"


def place_glyphs(
    glyphs: list[ProcessedGlyph],
    dispatcher: OverlapDispatcher,
    mode: OverlapMode | None = None,
) -> list[PlacedGlyph]:
    """x of each glyph = previous x + previous width × (1 − overlap), scale applied.

    Each glyph after the first also gets the rotation for its pair.
    """
    placed: list[PlacedGlyph] = []
    x = 0.0
    for i, glyph in enumerate(glyphs):
        if i == 0:
            placed.append(PlacedGlyph(glyph, 0.0, 0.0, "start"))
            continue
        prev = glyphs[i - 1]
        decision = dispatcher.decide(prev, glyph, mode)
        prev_width = prev.width * prev.scale
        x += prev_width - prev_width * decision.ratio
        rotation = dispatcher.rotation(prev, glyph, mode)
        if rotation:
            glyph = glyph.placed(scale=glyph.scale, rotation=rotation)
        placed.append(PlacedGlyph(glyph, x, decision.ratio, decision.path))
    return placed


def layout_word(
    word: str,
    style: str,
    resolver: GlyphResolver,
    dispatcher: OverlapDispatcher,
    mode: OverlapMode | None = None,
    use_variants: bool = False,
) -> list[PlacedGlyph]:
    """Resolve each character's glyph and place the word.

    With ``use_variants`` the first and last letters use their positional
    variants; a style without them falls back to the standard glyph. Letters
    are matched case-insensitively.
    """
    glyphs = []
    for i, character in enumerate(word):
        character = normalize_char(character)
        variant = variant_for(i, len(word)) if use_variants else "standard"
        glyph = resolver.get_glyph(style, character, variant, mode)
        if glyph.metadata.get("placeholder") and variant != "standard":
            glyph = resolver.get_glyph(style, character, "standard", mode)
        glyphs.append(glyph)
    return place_glyphs(glyphs, dispatcher, mode)
