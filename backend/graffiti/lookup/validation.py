"""Glyph validation — structural and quality checks before a glyph is persisted.

Errors make a glyph invalid. Warnings are advisory: odd bounds, very small or
very large content, heavy markup and markup that ``optimize_markup`` or a
cleanup pass could shrink. A ``strict`` batch drops invalid glyphs, a
``normal`` batch keeps them and only reports.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field

from graffiti.engine.glyph import ProcessedGlyph
from graffiti.overlap.rules import normalize_char
from graffiti.svg.parser import extract_attrs

ValidationLevel = Literal["strict", "normal"]

# Thresholds in frame units, except the file size (bytes)
STANDARD_AREA = 200.0
MIN_CONTENT_SIZE = 5.0
MAX_CONTENT_SIZE = 190.0
LARGE_FILE_BYTES = 50_000

_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_SVG_CLOSE_RE = re.compile(r"</svg\s*>", re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_EMPTY_GROUP_RE = re.compile(r"<g\b[^>]*?(?:/>|>\s*</g\s*>)", re.IGNORECASE)
_DEFS_RE = re.compile(r"<defs\b", re.IGNORECASE)
_REMOVABLE_ROOT_ATTRS = ("id", "class", "style")


class GlyphValidation(BaseModel):
    character: str
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    optimizable: bool = False
    file_size: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors


class ValidationWarning(BaseModel):
    character: str
    warning: str


class ValidationSummary(BaseModel):
    total_processed: int = 0
    valid_characters: int = 0
    invalid_characters: list[str] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
    optimization_suggestions: list[str] = Field(default_factory=list)
    average_file_size: float = 0.0
    total_file_size: int = 0


def validate_glyph(glyph: ProcessedGlyph, expected_character: str | None = None) -> GlyphValidation:
    """Check one extracted glyph."""
    character = glyph.character if expected_character is None else normalize_char(expected_character)
    context = f"glyph {character!r}"
    errors: list[str] = []
    warnings: list[str] = []

    if normalize_char(glyph.character) != character:
        errors.append(f"Character mismatch for {context}: got {glyph.character!r}")

    markup = glyph.markup
    open_tag = _SVG_OPEN_RE.search(markup)
    if open_tag is None or _SVG_CLOSE_RE.search(markup) is None:
        errors.append(f"Invalid markup for {context}: missing <svg> tags")

    if not glyph.is_space:
        if not glyph.has_content:
            errors.append(f"No ink inside the frame for {context}")
        _check_bounds(glyph, context, warnings)

    if not glyph.frame_declared:
        warnings.append(f"Markup for {context} declares no viewBox")

    file_size = len(markup.encode("utf-8"))
    if file_size > LARGE_FILE_BYTES:
        warnings.append(f"Large file size for {context}: {file_size / 1024:.1f}KB")

    root_attrs = extract_attrs(open_tag.group(0)) if open_tag is not None else {}
    optimizable = _check_optimizations(markup, root_attrs, context, warnings)

    return GlyphValidation(
        character=character,
        errors=errors,
        warnings=warnings,
        optimizable=optimizable,
        file_size=file_size,
    )


def _check_bounds(glyph: ProcessedGlyph, context: str, warnings: list[str]) -> None:
    b = glyph.bounds
    if b.left < 0 or b.top < 0 or b.right > STANDARD_AREA or b.bottom > STANDARD_AREA:
        warnings.append(
            f"Bounds for {context} extend outside the standard {STANDARD_AREA:g}x{STANDARD_AREA:g} area: "
            f"{b.left:g},{b.top:g} to {b.right:g},{b.bottom:g}"
        )
    if b.width < MIN_CONTENT_SIZE or b.height < MIN_CONTENT_SIZE:
        warnings.append(f"Very small content for {context}: {b.width:g}x{b.height:g}")
    if b.width > MAX_CONTENT_SIZE or b.height > MAX_CONTENT_SIZE:
        warnings.append(f"Very large content for {context}: {b.width:g}x{b.height:g}")


def _check_optimizations(markup: str, root_attrs: dict[str, str], context: str, warnings: list[str]) -> bool:
    hints: list[str] = []
    for attr in _REMOVABLE_ROOT_ATTRS:
        if attr in root_attrs:
            hints.append(f"Markup for {context} has an unnecessary {attr!r} attribute")
    if _COMMENT_RE.search(markup):
        hints.append(f"Markup for {context} contains comments that could be removed")
    empty_groups = len(_EMPTY_GROUP_RE.findall(markup))
    if empty_groups:
        hints.append(f"Markup for {context} contains {empty_groups} empty group(s)")
    if _DEFS_RE.search(markup):
        hints.append(f"Markup for {context} contains defs that may not be needed")
    warnings.extend(hints)
    return bool(hints)


def summarize_validation(results: Iterable[GlyphValidation]) -> ValidationSummary:
    summary = ValidationSummary()
    for result in results:
        summary.total_processed += 1
        if result.is_valid:
            summary.valid_characters += 1
        elif result.character not in summary.invalid_characters:
            summary.invalid_characters.append(result.character)
        summary.warnings.extend(ValidationWarning(character=result.character, warning=w) for w in result.warnings)
        if result.optimizable:
            summary.optimization_suggestions.append(f"Glyph {result.character!r} can be optimized")
        summary.total_file_size += result.file_size

    if summary.total_processed:
        summary.average_file_size = round(summary.total_file_size / summary.total_processed, 1)
    return summary
