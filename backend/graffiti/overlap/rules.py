"""Overlap rule model — one ratio per ordered character pair, in a single pass.

Every result traces to exactly one of: the space rule, a special case, an
exception-dampened midpoint, or a plain midpoint.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from graffiti.engine.config import DEFAULT_CONFIG
from graffiti.engine.glyph import ProcessedGlyph

logger = logging.getLogger(__name__)


class OverlapRule(BaseModel):
    """Per base-letter policy."""

    model_config = ConfigDict(frozen=True)

    min_overlap: float
    max_overlap: float
    special_cases: dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_range(self) -> OverlapRule:
        if not 0.0 <= self.min_overlap <= self.max_overlap <= 1.0:
            raise ValueError(
                f"Need 0 <= min_overlap <= max_overlap <= 1, got {self.min_overlap}..{self.max_overlap}"
            )
        for char, value in self.special_cases.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Special case {char!r}={value} outside [0, 1]")
        return self

    @field_validator("special_cases")
    @classmethod
    def _normalize_keys(cls, v: dict[str, float]) -> dict[str, float]:
        return {normalize_char(k): value for k, value in v.items()}


class OverlapRuleSet(BaseModel):
    """Rules keyed by base letter, the default rule, exception pairs and rotations."""

    model_config = ConfigDict(frozen=True)

    rules: dict[str, OverlapRule] = Field(default_factory=dict)
    default_rule: OverlapRule
    exceptions: dict[str, list[str]] = Field(default_factory=dict)
    # rotations[letter][previous] = degrees ``letter`` is turned when it follows ``previous``
    rotations: dict[str, dict[str, float]] = Field(default_factory=dict)

    @field_validator("rules")
    @classmethod
    def _normalize_rule_keys(cls, v: dict[str, OverlapRule]) -> dict[str, OverlapRule]:
        return {normalize_char(k): rule for k, rule in v.items()}

    @field_validator("exceptions")
    @classmethod
    def _normalize_exceptions(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        return {normalize_char(k): [normalize_char(c) for c in chars] for k, chars in v.items()}

    @field_validator("rotations")
    @classmethod
    def _normalize_rotations(cls, v: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        return {normalize_char(k): {normalize_char(p): deg for p, deg in row.items()} for k, row in v.items()}

    @classmethod
    def from_json_file(cls, path: Path) -> OverlapRuleSet:
        rule_set = cls.model_validate_json(path.read_text(encoding="utf-8"))
        logger.info("Loaded %d overlap rules from %s", len(rule_set.rules), path)
        return rule_set


class OverlapSource(str, enum.Enum):
    SPACE = "space"
    SPECIAL_CASE = "special_case"
    EXCEPTION = "exception"
    MIDPOINT = "midpoint"


@dataclass(frozen=True)
class OverlapResolution:
    """A resolved ratio plus the (effective) range it was drawn from."""

    ratio: float
    source: OverlapSource
    min_overlap: float
    max_overlap: float


def normalize_char(character: str) -> str:
    """Alphabetic characters are lowercased; digits and punctuation are kept as-is."""
    return character.lower() if character.isalpha() else character


def _resolve(
    first: str,
    second: str,
    rules: Mapping[str, OverlapRule],
    default_rule: OverlapRule,
    exceptions: Mapping[str, Sequence[str]],
    dampening: float,
) -> OverlapResolution:
    prev_char = normalize_char(first)
    curr_char = normalize_char(second)

    rule = rules.get(prev_char, default_rule)

    if curr_char in rule.special_cases:
        value = rule.special_cases[curr_char]
        return OverlapResolution(value, OverlapSource.SPECIAL_CASE, value, value)

    min_overlap = rule.min_overlap
    max_overlap = rule.max_overlap
    source = OverlapSource.MIDPOINT
    if curr_char in exceptions.get(prev_char, ()):
        max_overlap = max(min_overlap, max_overlap * dampening)
        source = OverlapSource.EXCEPTION

    return OverlapResolution((min_overlap + max_overlap) / 2, source, min_overlap, max_overlap)


_SPACE_RESOLUTION = OverlapResolution(0.0, OverlapSource.SPACE, 0.0, 0.0)


def explain_overlap(
    prev: ProcessedGlyph,
    curr: ProcessedGlyph,
    rules: Mapping[str, OverlapRule],
    default_rule: OverlapRule,
    exceptions: Mapping[str, Sequence[str]],
    dampening: float = DEFAULT_CONFIG.exception_dampening,
) -> OverlapResolution:
    """Resolve a glyph pair and report which rule produced the ratio."""
    if prev.is_space or curr.is_space:
        return _SPACE_RESOLUTION
    return _resolve(prev.character, curr.character, rules, default_rule, exceptions, dampening)


def resolve_overlap(
    prev: ProcessedGlyph,
    curr: ProcessedGlyph,
    rules: Mapping[str, OverlapRule],
    default_rule: OverlapRule,
    exceptions: Mapping[str, Sequence[str]],
) -> float:
    """Overlap ratio in [0, 1] for ``curr`` placed after ``prev``. Never fails."""
    return explain_overlap(prev, curr, rules, default_rule, exceptions).ratio


def explain_pair(
    first: str,
    second: str,
    rule_set: OverlapRuleSet,
    dampening: float = DEFAULT_CONFIG.exception_dampening,
) -> OverlapResolution:
    """Character-level form of ``explain_overlap``; whitespace acts as a space glyph."""
    if first.isspace() or second.isspace():
        return _SPACE_RESOLUTION
    return _resolve(first, second, rule_set.rules, rule_set.default_rule, rule_set.exceptions, dampening)


def resolve_pair(first: str, second: str, rule_set: OverlapRuleSet) -> float:
    return explain_pair(first, second, rule_set).ratio


def resolve_rotation(
    letter: str,
    previous: str | None,
    rule_set: OverlapRuleSet,
    fallback: float = 0.0,
) -> float:
    """Degrees to turn ``letter`` placed after ``previous``. Never fails.

    The first letter of a word and any pair touching whitespace get 0;
    pairs without a rule get ``fallback``.
    """
    if previous is None or letter.isspace() or previous.isspace():
        return 0.0
    return rule_set.rotations.get(normalize_char(letter), {}).get(normalize_char(previous), fallback)
