"""LearnAloud FastAPI application entry point.

Creates the FastAPI app, configures middleware, includes routers, and
manages the lifecycle of the in-memory store and voice sessions.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from config.settings import settings
from src.api.router import api_router
from src.data.seed import seed_sample_data
from src.models.user import AccessibilitySettings
from src.services.storage import MemStorage

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[settings.log_level.upper()],
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown of LearnAloud services.

    On startup:
      1. Create the in-memory store
      2. Seed it with the sample user and course
      3. Create the open voice session registry

    On shutdown:
      - Close any voice sessions still open.
    """
    _configure_logging()
    logger.info("app.startup", env=settings.env)

    app.state.start_time = time.time()

    # -- 1. Store -----------------------------------------------------------
    storage = MemStorage(
        default_settings=AccessibilitySettings(voice_sensitivity=settings.default_voice_sensitivity),
    )
    app.state.storage = storage
    logger.info("app.storage_initialised")

    # -- 2. Sample data -----------------------------------------------------
    try:
        await seed_sample_data(storage)
    except Exception:
        logger.warning("app.sample_data_load_failed", exc_info=True)

    # -- 3. Voice sessions --------------------------------------------------
    app.state.voice_sessions = {}

    logger.info("app.startup_complete")

    yield

    # -- Shutdown -----------------------------------------------------------
    logger.info("app.shutdown_start", open_sessions=len(app.state.voice_sessions))

    for session in list(app.state.voice_sessions.values()):
        session.close()
    app.state.voice_sessions.clear()

    logger.info("app.shutdown_complete")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="LearnAloud API",
    description=(
        "LearnAloud -- accessible e-learning with hands-free voice commands, "
        "read-aloud, screen-reader announcements and keyboard shortcuts."
    ),
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- CORS middleware --------------------------------------------------------
# allow_credentials=True must NOT be combined with allow_origins=["*"].
if settings.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["GET", "PATCH", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

# -- Include routers -------------------------------------------------------
app.include_router(api_router)


@app.get("/api", response_class=ORJSONResponse)
async def api_info() -> dict:
    """API information endpoint."""
    return {
        "name": "LearnAloud API",
        "version": app.version,
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "users": "/api/users",
            "courses": "/api/courses",
            "lessons": "/api/lessons",
            "quizzes": "/api/quizzes",
            "voice_session": "/api/voice/session/{user_id}",
            "voice_commands": "/api/voice/commands",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.api_host, port=settings.api_port)
