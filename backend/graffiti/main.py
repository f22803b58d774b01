"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graffiti.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.graffiti_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Graffiti Overlap Engine",
        description="Glyph footprints, pairwise overlap resolution and precomputed lookup tables",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from graffiti.api.router import api_router

    app.include_router(api_router)

    _preload_artifacts()

    return app


def _preload_artifacts() -> None:
    """Load persisted lookup artifacts now rather than on the first request."""
    from graffiti.dependencies import get_cache, get_rule_set

    rule_set = get_rule_set()
    styles = get_cache().styles()
    logger.info(
        "Overlap mode %s, %d rules, lookup styles: %s",
        settings.overlap_mode.value,
        len(rule_set.rules),
        ", ".join(styles) or "none",
    )


app = create_app()
