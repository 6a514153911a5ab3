"""Tests for the in-memory store and sample data seeding."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from src.data.seed import load_sample_data, seed_sample_data
from src.models.user import AccessibilitySettings, SettingsUpdate
from src.services.storage import MemStorage


@pytest.fixture
async def seeded() -> MemStorage:
    storage = MemStorage()
    await seed_sample_data(storage, now=datetime(2025, 1, 1, tzinfo=UTC))
    return storage


class TestSeeding:
    async def test_seeded_user(self, seeded) -> None:
        user = await seeded.get_user(1)
        assert user is not None
        assert user.username == "student"
        assert user.settings == AccessibilitySettings()

    async def test_lookup_by_username(self, seeded) -> None:
        user = await seeded.get_user_by_username("student")
        assert user is not None and user.id == 1
        assert await seeded.get_user_by_username("nobody") is None

    async def test_course_tree(self, seeded) -> None:
        courses = await seeded.get_courses()
        assert len(courses) == 1
        lessons = await seeded.get_lessons(courses[0].id)
        assert len(lessons) == 5
        quiz = await seeded.get_quiz(lessons[-1].id)
        assert quiz is not None
        assert len(await seeded.get_questions(quiz.id)) == 5

    async def test_assignment_due_a_day_later(self, seeded) -> None:
        (assignment,) = await seeded.get_assignments(1)
        assert assignment.due_date == datetime(2025, 1, 2, tzinfo=UTC)
        assert assignment.due_date - datetime(2025, 1, 1, tzinfo=UTC) == timedelta(hours=24)

    async def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_sample_data(tmp_path / "missing.json")

    async def test_custom_file(self, tmp_path) -> None:
        path = tmp_path / "data.json"
        path.write_text(
            json.dumps({"users": [{"username": "u", "password": "p"}], "courses": []}),
            encoding="utf-8",
        )
        storage = MemStorage()
        await seed_sample_data(storage, path=path)
        assert (await storage.get_user(1)).username == "u"
        assert await storage.get_courses() == []


class TestMemStorage:
    async def test_ids_are_per_entity(self) -> None:
        storage = MemStorage()
        user = await storage.create_user("a", "b")
        course = await storage.create_course("c")
        assert (user.id, course.id) == (1, 1)

    async def test_new_users_get_configured_defaults(self) -> None:
        storage = MemStorage(default_settings=AccessibilitySettings(voice_sensitivity=5))
        user = await storage.create_user("a", "b")
        assert user.settings.voice_sensitivity == 5

    async def test_update_settings_merges(self, seeded) -> None:
        updated = await seeded.update_user_settings(1, SettingsUpdate(text_size=5))
        assert updated is not None
        assert updated.settings.text_size == 5
        assert updated.settings.reading_speed == 3
        assert (await seeded.get_user(1)).settings.text_size == 5

    async def test_update_settings_unknown_user(self, seeded) -> None:
        assert await seeded.update_user_settings(42, SettingsUpdate(text_size=5)) is None

    async def test_update_progress(self, seeded) -> None:
        course = await seeded.update_course_progress(1, 40)
        assert course is not None and course.progress == 40
        assert await seeded.update_course_progress(9, 40) is None

    async def test_sections_sorted_by_order(self) -> None:
        storage = MemStorage()
        await storage.create_section(1, "second", "", 2)
        await storage.create_section(1, "first", "", 1)
        assert [s.title for s in await storage.get_sections(1)] == ["first", "second"]
