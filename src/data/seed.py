"""Sample data seeding for the in-memory store.

Loads the demo user and the "Introduction to Programming" course from
the bundled ``sample_course.json`` and inserts them into a
:class:`~src.services.storage.MemStorage`.  Designed to run once at
application startup.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from src.services.storage import MemStorage

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_DATA_DIR: Path = Path(__file__).resolve().parent
_SAMPLE_COURSE_PATH: Path = _DATA_DIR / "sample_course.json"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_sample_data(path: Path | None = None) -> dict[str, Any]:
    """Read the raw sample data document.

    Parameters
    ----------
    path:
        Path to the JSON file.  Defaults to the bundled
        ``sample_course.json``.

    Raises
    ------
    FileNotFoundError
        If the JSON file does not exist.
    json.JSONDecodeError
        If the JSON is malformed.
    """
    file_path = path or _SAMPLE_COURSE_PATH

    if not file_path.exists():
        raise FileNotFoundError(f"Sample data file not found: {file_path}")

    with file_path.open("r", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------


async def seed_sample_data(
    storage: MemStorage,
    *,
    path: Path | None = None,
    now: datetime | None = None,
) -> None:
    """Populate *storage* with the demo user and course content.

    Parameters
    ----------
    storage:
        The store to fill.  Ids are assigned by the store, so seeding an
        empty store yields user 1, course 1, lessons 1-5 and quiz 1.
    path:
        Optional path to the sample JSON file.
    now:
        Reference time for assignment due dates.  Defaults to the
        current UTC time.
    """
    raw = load_sample_data(path)
    now = now or datetime.now(UTC)

    for raw_user in raw.get("users", []):
        await storage.create_user(raw_user["username"], raw_user["password"])

    lessons = sections = questions = 0
    for raw_course in raw.get("courses", []):
        course = await storage.create_course(raw_course["title"], raw_course.get("description", ""))

        for raw_lesson in raw_course.get("lessons", []):
            lesson = await storage.create_lesson(course.id, raw_lesson["title"], raw_lesson["order"])
            lessons += 1

            for raw_section in raw_lesson.get("sections", []):
                await storage.create_section(
                    lesson.id,
                    raw_section["title"],
                    raw_section["content"],
                    raw_section["order"],
                )
                sections += 1

            raw_quiz = raw_lesson.get("quiz")
            if raw_quiz is None:
                continue
            quiz = await storage.create_quiz(lesson.id, raw_quiz["title"])
            for raw_question in raw_quiz.get("questions", []):
                await storage.create_question(
                    quiz.id,
                    raw_question["question"],
                    raw_question["options"],
                    raw_question["correct_answer"],
                    raw_question["order"],
                )
                questions += 1

        for raw_assignment in raw_course.get("assignments", []):
            await storage.create_assignment(
                course.id,
                raw_assignment["title"],
                raw_assignment.get("description", ""),
                now + timedelta(hours=raw_assignment.get("due_in_hours", 24)),
            )

    logger.info(
        "seed.complete",
        users=len(raw.get("users", [])),
        courses=len(raw.get("courses", [])),
        lessons=lessons,
        sections=sections,
        questions=questions,
    )
