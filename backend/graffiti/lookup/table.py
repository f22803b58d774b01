"""Overlap lookup table — precomputed ratio for every ordered character pair.

A generated table is a static snapshot: regeneration builds a new table, it
never patches an old one.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from graffiti.engine.config import DEFAULT_CONFIG
from graffiti.engine.errors import LookupIntegrityError
from graffiti.overlap.rules import OverlapRuleSet, normalize_char, resolve_pair

logger = logging.getLogger(__name__)


class OverlapLookupTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: str
    characters: list[str]
    # entries[first][second] = ratio
    entries: dict[str, dict[str, float]]
    # rotations[letter][previous] = degrees, only pairs with a rule
    rotations: dict[str, dict[str, float]] = Field(default_factory=dict)
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    checksum: str = ""

    @property
    def size(self) -> int:
        return sum(len(row) for row in self.entries.values())

    @property
    def complete(self) -> bool:
        """True when every ordered pair of ``characters`` has an entry."""
        return all(
            second in self.entries.get(first, {}) for first in self.characters for second in self.characters
        )

    def get(self, first: str, second: str) -> float | None:
        return self.entries.get(normalize_char(first), {}).get(normalize_char(second))

    def rotation(self, letter: str, previous: str, fallback: float = 0.0) -> float:
        return self.rotations.get(normalize_char(letter), {}).get(normalize_char(previous), fallback)


def compute_checksum(
    entries: dict[str, dict[str, float]],
    rotations: dict[str, dict[str, float]] | None = None,
) -> str:
    content: object = {"entries": entries, "rotations": rotations} if rotations else entries
    payload = json.dumps(content, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


def _unique_keys(characters: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for c in characters:
        seen.setdefault(normalize_char(c), None)
    return list(seen)


def _rotation_rows(keys: list[str], rule_set: OverlapRuleSet) -> dict[str, dict[str, float]]:
    known = set(keys)
    rows = {
        letter: {prev: deg for prev, deg in row.items() if prev in known}
        for letter, row in rule_set.rotations.items()
        if letter in known
    }
    return {letter: row for letter, row in rows.items() if row}


def _compute_row(
    first: str,
    characters: list[str],
    rule_set: OverlapRuleSet,
    cancel: threading.Event | None,
) -> tuple[str, dict[str, float], dict[str, float]]:
    row: dict[str, float] = {}
    timings: dict[str, float] = {}
    for second in characters:
        if cancel is not None and cancel.is_set():
            break
        t0 = time.perf_counter()
        row[second] = resolve_pair(first, second, rule_set)
        timings[second] = (time.perf_counter() - t0) * 1000
    return first, row, timings


def generate_with_timings(
    characters: Iterable[str],
    style: str,
    rule_set: OverlapRuleSet,
    *,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> tuple[OverlapLookupTable, dict[str, dict[str, float]]]:
    """Resolve every ordered pair of ``characters``; returns (table, per-entry ms).

    Rows are computed in a thread pool and merged in completion order. Setting
    ``cancel`` stops at entry granularity; entries already computed are kept
    and the returned table reports ``complete == False``.
    """
    keys = _unique_keys(characters)
    start = time.perf_counter()

    entries: dict[str, dict[str, float]] = {}
    timings: dict[str, dict[str, float]] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(_compute_row, first, keys, rule_set, cancel) for first in keys]
        for future in futures:
            first, row, row_timings = future.result()
            if row:
                entries[first] = row
                timings[first] = row_timings

    # Canonical row order regardless of completion order
    entries = {k: entries[k] for k in keys if k in entries}
    rotations = _rotation_rows(keys, rule_set)
    table = OverlapLookupTable(
        style=style,
        characters=keys,
        entries=entries,
        rotations=rotations,
        checksum=compute_checksum(entries, rotations),
    )

    elapsed = (time.perf_counter() - start) * 1000
    if cancel is not None and cancel.is_set():
        logger.warning("Generation for %r cancelled: %d/%d entries kept", style, table.size, len(keys) ** 2)
    else:
        logger.info("Generated %r lookup: %d entries in %.0fms", style, table.size, elapsed)
    return table, timings


def generate(
    characters: Iterable[str],
    style: str,
    rule_set: OverlapRuleSet,
    *,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> OverlapLookupTable:
    table, _ = generate_with_timings(characters, style, rule_set, max_workers=max_workers, cancel=cancel)
    return table


def lookup(
    table: OverlapLookupTable | None,
    first: str,
    second: str,
    fallback: float = DEFAULT_CONFIG.lookup_fallback,
) -> float:
    """Table ratio for the pair, or ``fallback`` when absent. Never raises."""
    if table is None:
        return fallback
    value = table.get(first, second)
    return fallback if value is None else value


def serialize(table: OverlapLookupTable) -> str:
    return table.model_dump_json(indent=2)


def deserialize(persisted: str | bytes, verify: bool = True) -> OverlapLookupTable:
    """Load a table; with ``verify`` the checksum must match the entries."""
    table = OverlapLookupTable.model_validate_json(persisted)
    if verify and table.checksum != compute_checksum(table.entries, table.rotations):
        raise LookupIntegrityError(f"Checksum mismatch for {table.style!r} lookup table")
    return table
