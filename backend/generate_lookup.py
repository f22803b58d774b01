"""Generate the overlap lookup table and glyph data for one style.

Usage:
  python generate_lookup.py --style straight
  python generate_lookup.py --style straight --assets ./assets/glyphs --out ./generated --variants standard first last

Writes overlap-lookup-<style>.json and glyph-data-<style>.json into --out.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from graffiti.config import settings
from graffiti.lookup.assets import VARIANTS, GlyphAssetStore
from graffiti.lookup.batch import generate_style
from graffiti.lookup.table import serialize
from graffiti.overlap.letter_rules import DEFAULT_RULE_SET, SUPPORTED_CHARACTERS
from graffiti.overlap.rules import OverlapRuleSet

logger = logging.getLogger("generate_lookup")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Precompute graffiti overlap lookup artifacts")
    parser.add_argument("--style", required=True, help="Style name (asset sub-directory)")
    parser.add_argument("--assets", type=Path, default=settings.assets_dir, help="Glyph asset root")
    parser.add_argument("--out", type=Path, default=settings.lookup_dir, help="Output directory")
    parser.add_argument("--rules", type=Path, default=settings.rules_file, help="Optional rule set JSON")
    parser.add_argument("--variants", nargs="+", choices=VARIANTS, default=["standard"])
    parser.add_argument("--characters", default="".join(SUPPORTED_CHARACTERS))
    parser.add_argument("--workers", type=int, default=settings.generation_workers)
    parser.add_argument("--no-glyphs", action="store_true", help="Skip glyph data extraction")
    parser.add_argument(
        "--validation",
        choices=("strict", "normal"),
        default="normal",
        help="strict: glyphs failing validation are reported as failures",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    rule_set = OverlapRuleSet.from_json_file(args.rules) if args.rules else DEFAULT_RULE_SET
    store = None if args.no_glyphs else GlyphAssetStore(args.assets)

    result = generate_style(
        args.style,
        args.characters,
        rule_set=rule_set,
        store=store,
        variants=args.variants,
        validation_level=args.validation,
        max_workers=args.workers,
    )

    args.out.mkdir(parents=True, exist_ok=True)
    table_path = args.out / f"overlap-lookup-{args.style}.json"
    table_path.write_text(serialize(result.table), encoding="utf-8")
    logger.info("Wrote %s (%d entries)", table_path, result.table.size)

    if result.glyph_data is not None:
        glyph_path = args.out / f"glyph-data-{args.style}.json"
        glyph_path.write_text(result.glyph_data.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Wrote %s (%d records)", glyph_path, len(result.glyph_data.records))
        summary = result.glyph_data.validation
        if summary is not None:
            logger.info(
                "Validation: %d/%d valid, %d warnings, avg %.0f bytes",
                summary.valid_characters,
                summary.total_processed,
                len(summary.warnings),
                summary.average_file_size,
            )

    for character, error in sorted(result.failures.items()):
        logger.warning("  %s: %s", character, error)

    return 1 if result.failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
