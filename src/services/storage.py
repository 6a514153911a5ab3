"""In-memory store for users, courses and their content.

Async methods mirror what a database-backed store would expose so the
API layer does not change if persistence is added later.  Single event
loop, no locking.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from datetime import datetime

import structlog

from src.models.course import Assignment, Course, Lesson, Question, Quiz, Section
from src.models.user import AccessibilitySettings, SettingsUpdate, User

logger = structlog.get_logger(__name__)


class MemStorage:
    """Dictionary-backed store with per-entity auto-increment ids."""

    def __init__(self, default_settings: AccessibilitySettings | None = None) -> None:
        self._default_settings = default_settings or AccessibilitySettings()
        self._users: dict[int, User] = {}
        self._courses: dict[int, Course] = {}
        self._lessons: dict[int, Lesson] = {}
        self._sections: dict[int, Section] = {}
        self._quizzes: dict[int, Quiz] = {}
        self._questions: dict[int, Question] = {}
        self._assignments: dict[int, Assignment] = {}
        self._ids: dict[str, Iterator[int]] = {}

    def _next_id(self, kind: str) -> int:
        return next(self._ids.setdefault(kind, itertools.count(1)))

    # -- users --------------------------------------------------------------

    async def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, username: str, password: str) -> User:
        user = User(
            id=self._next_id("user"),
            username=username,
            password=password,
            settings=self._default_settings.model_copy(),
        )
        self._users[user.id] = user
        return user

    async def update_user_settings(self, user_id: int, update: SettingsUpdate) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        settings = user.settings.model_copy(update=update.changes())
        updated = user.model_copy(update={"settings": settings})
        self._users[user_id] = updated
        logger.info("storage.user_settings_updated", user_id=user_id, fields=sorted(update.changes()))
        return updated

    # -- courses ------------------------------------------------------------

    async def get_courses(self) -> list[Course]:
        return list(self._courses.values())

    async def get_course(self, course_id: int) -> Course | None:
        return self._courses.get(course_id)

    async def create_course(self, title: str, description: str = "") -> Course:
        course = Course(id=self._next_id("course"), title=title, description=description)
        self._courses[course.id] = course
        return course

    async def update_course_progress(self, course_id: int, progress: float) -> Course | None:
        course = self._courses.get(course_id)
        if course is None:
            return None
        updated = course.model_copy(update={"progress": progress})
        self._courses[course_id] = updated
        return updated

    # -- lessons and sections ------------------------------------------------

    async def get_lessons(self, course_id: int) -> list[Lesson]:
        return sorted(
            (lesson for lesson in self._lessons.values() if lesson.course_id == course_id),
            key=lambda lesson: lesson.order,
        )

    async def get_lesson(self, lesson_id: int) -> Lesson | None:
        return self._lessons.get(lesson_id)

    async def create_lesson(self, course_id: int, title: str, order: int) -> Lesson:
        lesson = Lesson(id=self._next_id("lesson"), course_id=course_id, title=title, order=order)
        self._lessons[lesson.id] = lesson
        return lesson

    async def get_sections(self, lesson_id: int) -> list[Section]:
        return sorted(
            (s for s in self._sections.values() if s.lesson_id == lesson_id),
            key=lambda s: s.order,
        )

    async def get_section(self, section_id: int) -> Section | None:
        return self._sections.get(section_id)

    async def create_section(self, lesson_id: int, title: str, content: str, order: int) -> Section:
        section = Section(
            id=self._next_id("section"),
            lesson_id=lesson_id,
            title=title,
            content=content,
            order=order,
        )
        self._sections[section.id] = section
        return section

    # -- quizzes ------------------------------------------------------------

    async def get_quiz(self, lesson_id: int) -> Quiz | None:
        return next((q for q in self._quizzes.values() if q.lesson_id == lesson_id), None)

    async def create_quiz(self, lesson_id: int, title: str) -> Quiz:
        quiz = Quiz(id=self._next_id("quiz"), lesson_id=lesson_id, title=title)
        self._quizzes[quiz.id] = quiz
        return quiz

    async def get_questions(self, quiz_id: int) -> list[Question]:
        return sorted(
            (q for q in self._questions.values() if q.quiz_id == quiz_id),
            key=lambda q: q.order,
        )

    async def get_question(self, question_id: int) -> Question | None:
        return self._questions.get(question_id)

    async def create_question(
        self,
        quiz_id: int,
        question: str,
        options: list[str],
        correct_answer: int,
        order: int,
    ) -> Question:
        item = Question(
            id=self._next_id("question"),
            quiz_id=quiz_id,
            question=question,
            options=options,
            correct_answer=correct_answer,
            order=order,
        )
        self._questions[item.id] = item
        return item

    # -- assignments ----------------------------------------------------------

    async def get_assignments(self, course_id: int) -> list[Assignment]:
        return [a for a in self._assignments.values() if a.course_id == course_id]

    async def get_assignment(self, assignment_id: int) -> Assignment | None:
        return self._assignments.get(assignment_id)

    async def create_assignment(
        self,
        course_id: int,
        title: str,
        description: str,
        due_date: datetime,
    ) -> Assignment:
        assignment = Assignment(
            id=self._next_id("assignment"),
            course_id=course_id,
            title=title,
            description=description,
            due_date=due_date,
        )
        self._assignments[assignment.id] = assignment
        return assignment
