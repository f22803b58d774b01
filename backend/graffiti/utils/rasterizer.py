"""Rasterization utilities — bounding boxes to cell grid, grid to column runs, grid to text."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray

from graffiti.engine.glyph import Frame, VerticalRun


def grid_shape(frame: Frame, resolution: int) -> tuple[int, int]:
    """(rows, cols) = (ceil(height/R), ceil(width/R))."""
    return (math.ceil(frame.height / resolution), math.ceil(frame.width / resolution))


def rasterize_boxes(
    boxes: Iterable[tuple[float, float, float, float]],
    frame: Frame,
    resolution: int = 10,
) -> NDArray[np.bool_]:
    """Mark every cell whose square intersects any (xmin, ymin, xmax, ymax) box.

    Boxes are in the frame's coordinate system. Zero-width or zero-height boxes
    (straight strokes) still cover the cell they lie in.
    """
    rows, cols = grid_shape(frame, resolution)
    grid = np.zeros((rows, cols), dtype=bool)

    for x0, y0, x1, y1 in boxes:
        c0, c1 = _cell_span(min(x0, x1) - frame.x, max(x0, x1) - frame.x, resolution, cols)
        r0, r1 = _cell_span(min(y0, y1) - frame.y, max(y0, y1) - frame.y, resolution, rows)
        if c0 < c1 and r0 < r1:
            grid[r0:r1, c0:c1] = True

    return grid


def _cell_span(lo: float, hi: float, resolution: int, limit: int) -> tuple[int, int]:
    start = math.floor(lo / resolution)
    end = math.ceil(hi / resolution)
    if end <= start:
        end = start + 1
    return (min(max(start, 0), limit), min(max(end, 0), limit))


def vertical_runs(grid: NDArray[np.bool_]) -> tuple[tuple[VerticalRun, ...], ...]:
    """Per column, contiguous filled runs in top-to-bottom order.

    A run closes at a filled→empty transition or at the grid's bottom edge.
    """
    columns: list[tuple[VerticalRun, ...]] = []
    for col in np.asarray(grid, dtype=bool).T:
        padded = np.concatenate(([0], col.astype(np.int8), [0]))
        edges = np.diff(padded)
        starts = np.flatnonzero(edges == 1)
        ends = np.flatnonzero(edges == -1) - 1
        runs = []
        for top, bottom in zip(starts, ends):
            length = bottom - top + 1
            filled = int(np.count_nonzero(col[top : bottom + 1]))
            runs.append(VerticalRun(top=int(top), bottom=int(bottom), density=filled / length))
        columns.append(tuple(runs))
    return tuple(columns)


def grid_to_text(
    grid: NDArray[np.bool_],
    filled: str = "X",
    empty: str = ".",
) -> str:
    """Convert a grid to a text representation."""
    rows = []
    for row in grid:
        rows.append(" ".join(filled if cell else empty for cell in row))
    return "\n".join(rows)


def grid_fill_percentage(grid: NDArray[np.bool_]) -> float:
    """Percentage of filled cells."""
    total = grid.size
    if total == 0:
        return 0.0
    return float(np.count_nonzero(grid) / total * 100)
