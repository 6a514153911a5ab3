"""Lesson, section, quiz and question endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from src.api.deps import get_storage, parse_id
from src.models.course import Lesson, Question, Quiz, Section

router = APIRouter(tags=["lessons"])


@router.get("/lessons/{lesson_id}", response_model=Lesson)
async def get_lesson(lesson_id: str, request: Request) -> Lesson:
    lesson = await get_storage(request).get_lesson(parse_id(lesson_id, "lesson"))
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson


@router.get("/lessons/{lesson_id}/sections", response_model=list[Section])
async def list_sections(lesson_id: str, request: Request) -> list[Section]:
    """Sections of a lesson in reading order."""
    return await get_storage(request).get_sections(parse_id(lesson_id, "lesson"))


@router.get("/lessons/{lesson_id}/quiz", response_model=Quiz)
async def get_quiz(lesson_id: str, request: Request) -> Quiz:
    quiz = await get_storage(request).get_quiz(parse_id(lesson_id, "lesson"))
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.get("/quizzes/{quiz_id}/questions", response_model=list[Question])
async def list_questions(quiz_id: str, request: Request) -> list[Question]:
    """Questions of a quiz in order; ``correctAnswer`` is a zero-based option index."""
    return await get_storage(request).get_questions(parse_id(quiz_id, "quiz"))
