import pytest

from app.common.errors import NotFoundError, ValidationError
from app.features.dashboard.service import dashboard_service
from app.features.enrollments.service import enrollment_service
from app.features.grading.service import grading_service
from conftest import (
    CAT_LESSON_ID,
    COURSE_ID,
    EXAM_LESSON_ID,
    PROJECT_LESSON_ID,
    READING_LESSON_ID,
    USER_ID,
    plain_lesson,
    quiz_lesson,
)

pytestmark = pytest.mark.anyio


def _submission(fake_db, lesson_id, status, score=None, total=None):
    return fake_db.new_row(
        "lesson_quiz_submissions",
        {
            "user_id": USER_ID,
            "course_id": COURSE_ID,
            "lesson_id": lesson_id,
            "status": status,
            "score": score,
            "total": total,
        },
    )


def _complete(fake_db, *lesson_ids):
    for lesson_id in lesson_ids:
        fake_db.new_row(
            "user_lesson_completion", {"user_id": USER_ID, "course_id": COURSE_ID, "lesson_id": lesson_id}
        )


def _finish_course(fake_db, exam_score=4, exam_total=5):
    _submission(fake_db, CAT_LESSON_ID, "graded", 2, 2)
    _submission(fake_db, EXAM_LESSON_ID, "graded", exam_score, exam_total)
    _complete(fake_db, CAT_LESSON_ID, EXAM_LESSON_ID, PROJECT_LESSON_ID, READING_LESSON_ID)


async def test_grade_summary_is_zero_without_submissions():
    summary = await grading_service.compute_course_grade_summary(USER_ID, COURSE_ID)
    assert summary.final_score_100 == 0
    assert summary.has_final_exam is True
    assert summary.final_exam_graded is False


async def test_grade_summary_ignores_unpublished_lessons(fake_db):
    fake_db.tables["lessons"].append(quiz_lesson("lesson-draft", [{"question_type": "multiple_choice"}], is_published=False))
    _submission(fake_db, "lesson-draft", "graded", 0, 10)
    _submission(fake_db, CAT_LESSON_ID, "graded", 1, 2)

    summary = await grading_service.compute_course_grade_summary(USER_ID, COURSE_ID)

    assert (summary.cat_raw, summary.cat_total_raw) == (1, 2)
    assert summary.cat_scaled_30 == pytest.approx(15)


async def test_grade_summary_twice_gives_same_answer(fake_db):
    _finish_course(fake_db)
    first = await grading_service.compute_course_grade_summary(USER_ID, COURSE_ID)
    second = await grading_service.compute_course_grade_summary(USER_ID, COURSE_ID)
    assert first == second


async def test_complete_course_records_score_and_verdict(fake_db):
    _finish_course(fake_db)

    enrollment = await enrollment_service.complete_course(USER_ID, COURSE_ID)

    # CAT 2/2 -> 30, exam 4/5 -> 56
    assert enrollment["is_completed"] is True
    assert enrollment["completed_at"]
    assert enrollment["final_score_100"] == pytest.approx(86)
    assert enrollment["is_passed"] is True


async def test_complete_course_with_failing_exam_records_failure(fake_db):
    _finish_course(fake_db, exam_score=1, exam_total=5)
    enrollment = await enrollment_service.complete_course(USER_ID, COURSE_ID)
    assert enrollment["is_passed"] is False


async def test_complete_course_refuses_while_exam_pending(fake_db):
    _submission(fake_db, CAT_LESSON_ID, "graded", 2, 2)
    _submission(fake_db, EXAM_LESSON_ID, "pending_review")
    _complete(fake_db, CAT_LESSON_ID, PROJECT_LESSON_ID, READING_LESSON_ID)

    grades, progress = await enrollment_service.course_progress(USER_ID, COURSE_ID)
    assert progress.progress == 100
    assert progress.eligible_to_complete is False
    assert grades.final_exam_pending_review is True

    with pytest.raises(ValidationError, match="course_not_eligible_for_completion"):
        await enrollment_service.complete_course(USER_ID, COURSE_ID)
    assert fake_db.rows("user_course_enrollments")[0]["is_completed"] is False


async def test_complete_course_requires_enrollment(fake_db):
    fake_db.tables["user_course_enrollments"] = []
    with pytest.raises(NotFoundError, match="enrollment_not_found"):
        await enrollment_service.complete_course(USER_ID, COURSE_ID)


async def test_retake_clears_exam_attempt_only(fake_db):
    _finish_course(fake_db)
    await enrollment_service.complete_course(USER_ID, COURSE_ID)

    result = await enrollment_service.retake_final_exam(USER_ID, COURSE_ID)

    assert result == {"ok": True, "final_exam_lessons": 1}
    assert not fake_db.rows("lesson_quiz_submissions", lesson_id=EXAM_LESSON_ID)
    assert not fake_db.rows("user_lesson_completion", lesson_id=EXAM_LESSON_ID)
    assert fake_db.rows("lesson_quiz_submissions", lesson_id=CAT_LESSON_ID)
    assert fake_db.rows("user_lesson_completion", lesson_id=CAT_LESSON_ID)
    enrollment = fake_db.rows("user_course_enrollments", user_id=USER_ID)[0]
    assert enrollment["is_completed"] is False
    assert enrollment["completed_at"] is None
    assert enrollment["final_score_100"] is None
    assert enrollment["is_passed"] is None


async def test_retake_is_repeatable(fake_db):
    _finish_course(fake_db)
    await enrollment_service.retake_final_exam(USER_ID, COURSE_ID)
    result = await enrollment_service.retake_final_exam(USER_ID, COURSE_ID)
    assert result["ok"] is True


async def test_retake_finds_unpublished_exam_lessons(fake_db):
    fake_db.tables["lessons"] = [
        plain_lesson(READING_LESSON_ID),
        quiz_lesson("lesson-old-exam", [], "final_exam", is_published=False),
    ]
    result = await enrollment_service.retake_final_exam(USER_ID, COURSE_ID)
    assert result["final_exam_lessons"] == 1


async def test_retake_without_final_exam_writes_nothing(fake_db):
    fake_db.tables["lessons"] = [quiz_lesson(CAT_LESSON_ID, [{"question_type": "multiple_choice"}], "cat")]
    with pytest.raises(ValidationError, match="Final exam not found for this course"):
        await enrollment_service.retake_final_exam(USER_ID, COURSE_ID)
    assert fake_db.writes == []


async def test_dashboard_reports_progress_per_enrollment(fake_db):
    _submission(fake_db, CAT_LESSON_ID, "graded", 1, 2)
    _complete(fake_db, CAT_LESSON_ID)
    fake_db.new_row(
        "lesson_project_submissions",
        {"user_id": USER_ID, "course_id": COURSE_ID, "lesson_id": PROJECT_LESSON_ID, "status": "pending_review"},
    )

    courses = await dashboard_service.get_student_dashboard(USER_ID)

    assert len(courses) == 1
    entry = courses[0]
    assert entry["enrollment"]["course_id"] == COURSE_ID
    assert entry["progress"] == 50
    assert entry["grades"]["cat_scaled_30"] == pytest.approx(15)
    assert entry["eligibleToComplete"] is False
    assert entry["passed"] is False


async def test_dashboard_without_enrollments_is_empty(fake_db):
    fake_db.tables["user_course_enrollments"] = []
    assert await dashboard_service.get_student_dashboard(USER_ID) == []
