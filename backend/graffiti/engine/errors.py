"""Engine error taxonomy."""

from __future__ import annotations


class MalformedGlyphError(ValueError):
    """Markup contains no recognizable outline element. Fatal to one glyph only."""

    def __init__(self, character: str, reason: str = "no outline element found") -> None:
        self.character = character
        self.reason = reason
        super().__init__(f"Malformed glyph {character!r}: {reason}")


class GlyphAssetNotFoundError(FileNotFoundError):
    """No markup document exists for a (style, variant, character) key."""


class LookupIntegrityError(ValueError):
    """A persisted lookup table whose checksum does not match its entries."""


class MissingFrameWarning(UserWarning):
    """Glyph declares no viewBox; the default frame was used instead."""
