from __future__ import annotations

from app.features.grading.scoring import GradeSummary, summarize_submissions
from app.features.lessons.assessment import partition_quiz_lessons
from app.features.lessons.repository import lesson_repository
from app.features.submissions.repository import quiz_submission_repository


class GradingService:
    """Recomputes a learner's course grade from current rows on every call.

    Read-only: safe to call repeatedly and concurrently with writes.
    """

    async def compute_course_grade_summary(self, user_id: str, course_id: str) -> GradeSummary:
        lessons = await lesson_repository.list_course_lessons(course_id, published_only=True)
        cat_ids, exam_ids = partition_quiz_lessons(lessons)
        submissions = await quiz_submission_repository.list_for_lessons(
            user_id, course_id, list(dict.fromkeys(cat_ids + exam_ids))
        )
        return summarize_submissions(submissions, cat_ids, exam_ids)


grading_service = GradingService()

__all__ = ["grading_service", "GradingService"]
