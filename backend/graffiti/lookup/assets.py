"""Glyph asset store — one markup document per (style, variant, character).

Layout on disk: ``<root>/<style>/<variant>/<character>.svg``. Characters that
are not safe as file names are stored as ``u<codepoint>.svg``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, get_args

from graffiti.engine.errors import GlyphAssetNotFoundError

logger = logging.getLogger(__name__)

Variant = Literal["standard", "alternate", "first", "last"]
VARIANTS: tuple[str, ...] = get_args(Variant)


def asset_name(character: str) -> str:
    if character.isascii() and character.isalnum():
        return f"{character}.svg"
    return f"u{ord(character):04x}.svg"


class GlyphAssetStore:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, style: str, character: str, variant: str = "standard") -> Path:
        if variant not in VARIANTS:
            raise ValueError(f"Unknown variant {variant!r}; expected one of {VARIANTS}")
        return self.root / style / variant / asset_name(character)

    def has_style(self, style: str) -> bool:
        return (self.root / style).is_dir()

    def styles(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def read(self, style: str, character: str, variant: str = "standard") -> str:
        path = self.path_for(style, character, variant)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise GlyphAssetNotFoundError(f"No {variant} asset for {character!r} in style {style!r}") from e
