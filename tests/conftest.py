import sys
import os

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest

from app.DB import supabase as supabase_module
from app.common import cache
from fakesupabase import FakeSupabase

COURSE_ID = "course-1"
USER_ID = "user-1"
ADMIN_ID = "admin-1"

CAT_LESSON_ID = "lesson-cat"
EXAM_LESSON_ID = "lesson-exam"
PROJECT_LESSON_ID = "lesson-project"
READING_LESSON_ID = "lesson-reading"


def mc(correct, max_marks=None):
    question = {"question_type": "multiple_choice", "options": ["a", "b", "c"], "correct_answer": correct}
    if max_marks is not None:
        question["max_marks"] = max_marks
    return question


def free_text(max_marks=None):
    question = {"question_type": "free_text", "prompt": "Explain"}
    if max_marks is not None:
        question["max_marks"] = max_marks
    return question


def quiz_lesson(lesson_id, questions, assessment_type=None, course_id=COURSE_ID, is_published=True, title=None):
    quiz_data = {"questions": questions}
    if assessment_type:
        quiz_data["assessment_type"] = assessment_type
    return {
        "id": lesson_id,
        "course_id": course_id,
        "title": title or lesson_id,
        "lesson_type": "quiz",
        "is_published": is_published,
        "content": {"quiz_data": quiz_data},
    }


def plain_lesson(lesson_id, lesson_type="content", course_id=COURSE_ID, is_published=True):
    return {
        "id": lesson_id,
        "course_id": course_id,
        "title": lesson_id,
        "lesson_type": lesson_type,
        "is_published": is_published,
        "content": {"body": "..."},
    }


def course_tables():
    """A published course with a CAT quiz, a final exam, a project and a reading."""
    return {
        "lessons": [
            quiz_lesson(CAT_LESSON_ID, [mc(0), mc(1)], "cat"),
            quiz_lesson(EXAM_LESSON_ID, [mc(2, max_marks=2), free_text(max_marks=3)], "final_exam"),
            plain_lesson(PROJECT_LESSON_ID, "project"),
            plain_lesson(READING_LESSON_ID),
        ],
        "courses": [{"id": COURSE_ID, "title": "Intro to Python", "slug": "intro-python"}],
        "user_course_enrollments": [
            {
                "id": "enrollment-1",
                "user_id": USER_ID,
                "course_id": COURSE_ID,
                "enrolled_at": "2026-01-01T00:00:00+00:00",
                "is_completed": False,
                "completed_at": None,
                "final_score_100": None,
                "is_passed": None,
                "courses": {"id": COURSE_ID, "title": "Intro to Python", "slug": "intro-python"},
            }
        ],
        "user_profiles": [
            {"id": USER_ID, "email": "learner@example.com", "full_name": "Learner", "is_admin": False},
            {"id": ADMIN_ID, "email": "admin@example.com", "full_name": "Admin", "is_admin": True},
        ],
        "system_settings": [
            {
                "id": "1",
                "course_notifications_enabled": True,
                "course_update_notifications_enabled": True,
                "newsletter_enabled": True,
            }
        ],
    }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    """Install an in-memory Supabase client seeded with one course."""
    db = FakeSupabase(course_tables())
    monkeypatch.setattr(supabase_module, "_client", db)
    cache.clear()
    yield db
    cache.clear()
