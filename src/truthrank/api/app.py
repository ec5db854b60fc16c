"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truthrank import __version__
from truthrank.api.v1.router import router as v1_router
from truthrank.config.settings import Settings
from truthrank.core.engine import TruthRankEngine
from truthrank.observability.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "truthrank-config.yaml"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from
            ``truthrank-config.yaml`` when present, else from the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path(DEFAULT_CONFIG_FILE)
        if yaml_path.exists():
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.observability)
        logger.info("Starting truthrank v%s", __version__)

        app.state.settings = settings
        # The keyword dictionary is loaded here, so a broken dictionary file fails startup
        app.state.engine = TruthRankEngine(settings)

        logger.info("truthrank is ready to serve requests on port %d", settings.server.port)
        yield

        app.state.engine = None
        logger.info("truthrank shutdown complete")

    app = FastAPI(
        title="truthrank",
        description=(
            "Truth-ranking and content-safety classification for archival search results — "
            "scores, classifies, filters and orders raw records from an upstream search index."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
