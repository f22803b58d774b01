"""Built-in overlap rules for the alphanumeric glyph set."""

from __future__ import annotations

import string

from graffiti.overlap.rules import OverlapRule, OverlapRuleSet

# Lookup-table character set: a–z then 0–9 (36 symbols, 1,296 ordered pairs)
SUPPORTED_CHARACTERS: tuple[str, ...] = tuple(string.ascii_lowercase + string.digits)

DEFAULT_OVERLAP = OverlapRule(min_overlap=0.1, max_overlap=0.3)

LETTER_OVERLAP_RULES: dict[str, OverlapRule] = {
    letter: OverlapRule(min_overlap=0.1, max_overlap=0.3) for letter in string.ascii_lowercase
}

# Diagonal-stroke pairs: the open side of one letter meets the slant of the next
OVERLAP_EXCEPTIONS: dict[str, list[str]] = {
    "a": ["v", "w", "y"],
    "v": ["a", "e", "o"],
    "w": ["a", "e", "o"],
    "y": ["a", "e", "o"],
}

# Same diagonal pairs, tilted so the slants line up.
# LETTER_ROTATION_RULES[letter][previous] = degrees
LETTER_ROTATION_RULES: dict[str, dict[str, float]] = {
    "a": {"v": 5.0, "w": 5.0, "y": 5.0},
    "v": {"a": -5.0, "e": -5.0, "o": -5.0},
    "w": {"a": -5.0, "e": -5.0, "o": -5.0},
    "y": {"a": -5.0, "e": -5.0, "o": -5.0},
}

DEFAULT_RULE_SET = OverlapRuleSet(
    rules=LETTER_OVERLAP_RULES,
    default_rule=DEFAULT_OVERLAP,
    exceptions=OVERLAP_EXCEPTIONS,
    rotations=LETTER_ROTATION_RULES,
)
