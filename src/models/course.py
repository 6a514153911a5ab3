"""Course content models: courses, lessons, sections, quizzes, assignments."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.user import CamelModel


class Course(CamelModel):
    id: int
    title: str
    description: str = ""
    progress: float = 0


class Lesson(CamelModel):
    id: int
    course_id: int
    title: str
    order: int


class Section(CamelModel):
    id: int
    lesson_id: int
    title: str
    content: str
    order: int


class Quiz(CamelModel):
    id: int
    lesson_id: int
    title: str


class Question(CamelModel):
    id: int
    quiz_id: int
    question: str
    options: list[str] = Field(default_factory=list)
    correct_answer: int
    order: int


class Assignment(CamelModel):
    id: int
    course_id: int
    title: str
    description: str = ""
    due_date: datetime


class ProgressUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    progress: Annotated[float, Field(strict=True, ge=0, le=100)]
