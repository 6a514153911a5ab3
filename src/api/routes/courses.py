"""Course endpoints: listing, detail, progress, lessons and assignments."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from src.api.deps import get_storage, parse_id, validation_error_response
from src.models.course import Assignment, Course, Lesson, ProgressUpdate

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=list[Course])
async def list_courses(request: Request) -> list[Course]:
    return await get_storage(request).get_courses()


@router.get("/{course_id}", response_model=Course)
async def get_course(course_id: str, request: Request) -> Course:
    course = await get_storage(request).get_course(parse_id(course_id, "course"))
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.patch(
    "/{course_id}/progress",
    response_model=Course,
    responses={400: {"description": "Invalid progress data"}},
)
async def update_progress(course_id: str, request: Request):
    """Set course completion, a percentage in 0..100."""
    storage = get_storage(request)
    cid = parse_id(course_id, "course")

    try:
        update = ProgressUpdate.model_validate_json(await request.body())
    except ValidationError as exc:
        return validation_error_response("Invalid progress data", exc)

    course = await storage.update_course_progress(cid, update.progress)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")

    logger.info("api.courses.progress_updated", course_id=cid, progress=update.progress)
    return course


@router.get("/{course_id}/lessons", response_model=list[Lesson])
async def list_lessons(course_id: str, request: Request) -> list[Lesson]:
    """Lessons of a course in display order."""
    return await get_storage(request).get_lessons(parse_id(course_id, "course"))


@router.get("/{course_id}/assignments", response_model=list[Assignment])
async def list_assignments(course_id: str, request: Request) -> list[Assignment]:
    return await get_storage(request).get_assignments(parse_id(course_id, "course"))
