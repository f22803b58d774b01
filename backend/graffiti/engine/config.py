"""Engine configuration — tunables for extraction, overlap and refinement."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Controls footprint sampling and overlap decisions."""

    # Grid cell size in logical (viewBox) units
    sampling_resolution: int = 10

    # Frame used when the markup declares no viewBox: (x, y, width, height)
    default_frame: tuple[float, float, float, float] = (0.0, 0.0, 100.0, 100.0)

    # Exception pairs keep this fraction of maxOverlap
    exception_dampening: float = 0.7

    # Candidate spacing for density-scored refinement
    refine_step: float = 0.005

    # Synthetic blank glyph width
    space_width: float = 70.0

    # Default overlap when a table has no entry for a pair
    lookup_fallback: float = 0.12


DEFAULT_CONFIG = EngineConfig()
