"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from graffiti.engine.dispatcher import OverlapMode
from graffiti.lookup.assets import VARIANTS
from graffiti.overlap.letter_rules import SUPPORTED_CHARACTERS


class ExtractRequest(BaseModel):
    svg: str = Field(..., description="Raw glyph SVG markup")
    character: str = Field(..., min_length=1, max_length=1, description="Character the glyph draws")


class OverlapRequest(BaseModel):
    first: str = Field(..., min_length=1, max_length=1)
    second: str = Field(..., min_length=1, max_length=1)
    style: str = Field(default="straight", pattern=r"^[\w-]+$")
    mode: OverlapMode | None = Field(default=None, description="Overrides the configured overlap mode")


class LayoutRequest(BaseModel):
    word: str = Field(..., min_length=1, max_length=64)
    style: str = Field(default="straight", pattern=r"^[\w-]+$")
    mode: OverlapMode | None = None
    use_variants: bool = False


class GenerateRequest(BaseModel):
    style: str = Field(default="straight", pattern=r"^[\w-]+$")
    characters: list[str] = Field(default_factory=lambda: list(SUPPORTED_CHARACTERS))
    variants: list[str] = Field(default_factory=lambda: ["standard"])
    include_glyph_data: bool = True
    validation_level: Literal["strict", "normal"] = "normal"

    @field_validator("characters")
    @classmethod
    def _single_characters(cls, v: list[str]) -> list[str]:
        bad = [c for c in v if len(c) != 1]
        if bad:
            raise ValueError(f"Characters must be single symbols, got {bad}")
        return v

    @field_validator("variants")
    @classmethod
    def _known_variants(cls, v: list[str]) -> list[str]:
        unknown = [x for x in v if x not in VARIANTS]
        if unknown:
            raise ValueError(f"Unknown variants {unknown}; expected {list(VARIANTS)}")
        return v
