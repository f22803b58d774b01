"""Overlap decisions between adjacent glyphs: rule model and density scorer."""

from graffiti.overlap.rules import (
    OverlapResolution,
    OverlapRule,
    OverlapRuleSet,
    OverlapSource,
    explain_overlap,
    explain_pair,
    normalize_char,
    resolve_overlap,
    resolve_pair,
    resolve_rotation,
)
from graffiti.overlap.scoring import refine_overlap, score

__all__ = [
    "OverlapResolution",
    "OverlapRule",
    "OverlapRuleSet",
    "OverlapSource",
    "explain_overlap",
    "explain_pair",
    "normalize_char",
    "refine_overlap",
    "resolve_overlap",
    "resolve_pair",
    "resolve_rotation",
    "score",
]
