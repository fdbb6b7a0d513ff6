"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from epic_progression.api.dependencies import set_progression_service
from epic_progression.api.routes import api_router
from epic_progression.api.service import ProgressionService
from epic_progression.config import ProgressionConfig
from epic_progression.core.errors import (
    CapacityExceeded, MaxRankReached, NotFound, ProgressionError,
)
from epic_progression.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def error_status(exc: ProgressionError) -> int:
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, (MaxRankReached, CapacityExceeded)):
        return 409
    return 422


def create_app(config: ProgressionConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = ProgressionConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        set_progression_service(ProgressionService(_config))
        logger.info("API server started.")
        yield
        set_progression_service(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Epic Progression Engine",
        description=(
            "Epic-level character progression: levels 21-100, epic capabilities, "
            "epic spells, divine ranks and milestones.\n\n"
            "## API Groups\n\n"
            "- **Characters** — Create characters, advance levels, resolve decisions, divine ranks\n"
            "- **Spells** — Develop, cast and recover epic spells\n"
            "- **Monitor** — Operation timings, alerts and health\n"
            "- **Config** — Read-only progression configuration\n"
            "- **Metadata** — Rule content: capabilities, classes, seeds, ranks, milestones\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Characters", "description": "Character registry, level advancement, pending decisions and divine rank changes."},
            {"name": "Spells", "description": "Epic spell development, casting and slot recovery for a character."},
            {"name": "Monitor", "description": "Per-operation duration metrics, threshold alerts and a health score."},
            {"name": "Config", "description": "Read-only progression configuration parameters."},
            {"name": "Metadata", "description": "Immutable rule content served straight from the core definitions."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProgressionError)
    async def _progression_error(request: Request, exc: ProgressionError) -> JSONResponse:
        return JSONResponse(status_code=error_status(exc), content=exc.to_dict())

    app.include_router(api_router)

    return app
