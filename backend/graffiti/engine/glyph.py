"""ProcessedGlyph — one resolved character with its derived footprint.

Glyphs are built once (by the extractor, from a persisted record, or
synthesized for spaces) and are read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from graffiti.engine.config import DEFAULT_CONFIG

_BLANK_MARKUP = '<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}"></svg>'


@dataclass(frozen=True)
class Frame:
    """Logical coordinate box of a glyph (its viewBox)."""

    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame must have positive size, got {self.width}x{self.height}")

    @property
    def bounds(self) -> Bounds:
        return Bounds(
            left=self.x,
            right=self.x + self.width,
            top=self.y,
            bottom=self.y + self.height,
        )

    @property
    def view_box(self) -> str:
        return f"{self.x:g} {self.y:g} {self.width:g} {self.height:g}"


@dataclass(frozen=True)
class Bounds:
    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class VerticalRun:
    """Contiguous ink run in one grid column, in grid-row units (inclusive)."""

    top: int
    bottom: int
    density: float

    @property
    def length(self) -> int:
        return self.bottom - self.top + 1


@dataclass(frozen=True, eq=False)
class ProcessedGlyph:
    character: str
    markup: str
    frame: Frame
    pixel_grid: NDArray[np.bool_]
    vertical_runs: tuple[tuple[VerticalRun, ...], ...]
    scale: float = 1.0
    rotation: float = 0.0
    is_space: bool = False
    frame_declared: bool = True
    # Extra diagnostics (primitive count, style, variant…), read-only
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        grid = np.array(self.pixel_grid, dtype=bool)
        grid.flags.writeable = False
        object.__setattr__(self, "pixel_grid", grid)
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def bounds(self) -> Bounds:
        return self.frame.bounds

    @property
    def width(self) -> float:
        return self.frame.width

    @property
    def height(self) -> float:
        return self.frame.height

    @property
    def grid_shape(self) -> tuple[int, int]:
        rows, cols = self.pixel_grid.shape
        return (int(rows), int(cols))

    @property
    def has_content(self) -> bool:
        return bool(self.pixel_grid.any())

    def placed(self, scale: float = 1.0, rotation: float = 0.0) -> ProcessedGlyph:
        """Copy with caller-chosen placement modifiers; geometry is unchanged."""
        return replace(self, scale=scale, rotation=rotation)


def create_space_glyph(
    width: float | None = None,
    character: str = " ",
    metadata: Mapping[str, object] | None = None,
) -> ProcessedGlyph:
    """Synthesize the blank glyph: single-cell grid, no runs, never overlaps."""
    w = DEFAULT_CONFIG.space_width if width is None else width
    return ProcessedGlyph(
        character=character,
        markup=_BLANK_MARKUP.format(w=f"{w:g}", h=1),
        frame=Frame(0.0, 0.0, w, 1.0),
        pixel_grid=np.zeros((1, 1), dtype=bool),
        vertical_runs=(),
        is_space=True,
        metadata=metadata or {},
    )


def placeholder_glyph(character: str, width: float | None = None) -> ProcessedGlyph:
    """Neutral stand-in for a glyph that failed extraction."""
    return create_space_glyph(width, character=character, metadata={"placeholder": True})
