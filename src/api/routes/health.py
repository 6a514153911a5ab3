"""Health check endpoints for the LearnAloud API.

Liveness reports uptime; readiness checks that the store is seeded and
reports how many voice sessions are open.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str
    uptime_seconds: float


class ReadinessResponse(BaseModel):
    """Readiness check response with individual component statuses."""

    status: str
    checks: dict[str, str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe.

    Returns 200 if the application process is running and able to
    handle requests.  Does *not* check the store.
    """
    start_time: float = getattr(request.app.state, "start_time", time.time())
    uptime = time.time() - start_time

    return HealthResponse(
        status="healthy",
        version=request.app.version,
        uptime_seconds=round(uptime, 2),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness probe.

    Ready once the store exists and holds at least one course, so the
    load balancer only routes traffic to fully-seeded instances.
    """
    checks: dict[str, str] = {}
    all_ok = True

    # -- Check store -------------------------------------------------------
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        checks["storage"] = "not_initialised"
        all_ok = False
    else:
        courses = await storage.get_courses()
        if courses:
            checks["storage"] = f"ok ({len(courses)} courses loaded)"
        else:
            checks["storage"] = "no_data"
            all_ok = False

    # -- Voice sessions ----------------------------------------------------
    sessions = getattr(request.app.state, "voice_sessions", None)
    checks["voice_sessions"] = str(len(sessions)) if sessions is not None else "not_initialised"

    status = "ready" if all_ok else "degraded"

    logger.info("health.readiness_check", status=status, checks=checks)

    return ReadinessResponse(status=status, checks=checks)
