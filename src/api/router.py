"""Main API router combining all route modules.

Aggregates all routers under the ``/api`` prefix so the FastAPI
application only needs to include a single router.

Includes:
    * Users: profile and accessibility settings
    * Courses: courses, lessons, sections, quizzes, assignments
    * Voice: voice session WebSocket and command catalogue
    * Health: liveness and readiness probes
"""

from __future__ import annotations

from fastapi import APIRouter

from src.api.routes import courses, health, lessons, users, voice

api_router = APIRouter(prefix="/api")

# -- Content sub-routers ---------------------------------------------------
api_router.include_router(users.router)
api_router.include_router(courses.router)
api_router.include_router(lessons.router)

# -- Accessibility sub-routers ---------------------------------------------
api_router.include_router(voice.router)
api_router.include_router(health.router)
