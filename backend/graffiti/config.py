"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

from graffiti.engine.dispatcher import OverlapMode

_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    graffiti_env: str = "development"
    graffiti_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Glyph assets: <assets_dir>/<style>/<variant>/<char>.svg
    assets_dir: Path = _BACKEND_DIR / "assets" / "glyphs"
    # Generated artifacts: overlap-lookup-<style>.json, glyph-data-<style>.json
    lookup_dir: Path = _BACKEND_DIR / "generated"
    # Optional JSON OverlapRuleSet replacing the built-in rules
    rules_file: Path | None = None

    # Overlap dispatch
    overlap_mode: OverlapMode = OverlapMode.PREFER_LOOKUP
    overlap_fallback: float = 0.12
    score_refinement: bool = False

    # Batch generation
    generation_workers: int = 4
    glyph_cache_size: int = 256

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
