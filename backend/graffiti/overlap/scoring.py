"""Overlap density scorer — how badly two footprints collide at a candidate overlap.

The candidate ratio decides how many trailing columns of the previous glyph
sit on top of the leading columns of the current one. Each aligned column
pair earns +1 when no ink runs meet vertically; otherwise it loses
extent × density_prev × density_curr for every meeting pair of runs.
Higher is better.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from graffiti.engine.glyph import VerticalRun

ColumnRuns = Sequence[Sequence[VerticalRun]]


def overlap_columns(prev_runs: ColumnRuns, curr_runs: ColumnRuns, candidate_overlap: float) -> int:
    """Number of aligned columns, bounded by the shorter run sequence."""
    if candidate_overlap <= 0:
        return 0
    shared = min(len(prev_runs), len(curr_runs))
    return min(shared, round(candidate_overlap * len(prev_runs)))


def column_penalty(prev_col: Sequence[VerticalRun], curr_col: Sequence[VerticalRun]) -> float:
    penalty = 0.0
    for p in prev_col:
        for c in curr_col:
            extent = min(p.bottom, c.bottom) - max(p.top, c.top) + 1
            if extent > 0:
                penalty += extent * p.density * c.density
    return penalty


def score(prev_runs: ColumnRuns, curr_runs: ColumnRuns, candidate_overlap: float) -> float:
    """Collision score for placing ``curr`` after ``prev`` at ``candidate_overlap``."""
    k = overlap_columns(prev_runs, curr_runs, candidate_overlap)
    offset = len(prev_runs) - k
    total = 0.0
    for i in range(k):
        penalty = column_penalty(prev_runs[offset + i], curr_runs[i])
        total += 1.0 if penalty == 0 else -penalty
    return total


def refine_overlap(
    prev_runs: ColumnRuns,
    curr_runs: ColumnRuns,
    base: float,
    low: float,
    high: float,
    step: float = 0.005,
) -> tuple[float, float]:
    """Best-scoring candidate in [low, high] as (ratio, score).

    Candidates are scanned from ``high`` down in ``step`` increments, plus the
    endpoints and ``base``. Ties go to the candidate closest to ``base``, then
    to the smaller ratio. No acceptance threshold is applied.
    """
    if low > high:
        low, high = high, low
    steps = math.floor((high - low) / step + 1e-9) if step > 0 else 0
    candidates = {round(high - i * step, 6) for i in range(steps + 1)}
    candidates.update({low, high, min(max(base, low), high)})

    best = max(
        candidates,
        key=lambda c: (score(prev_runs, curr_runs, c), -abs(c - base), -c),
    )
    return best, score(prev_runs, curr_runs, best)
