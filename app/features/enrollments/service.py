from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from app.common.errors import NotFoundError, ValidationError
from app.common.utils import now_iso
from app.features.completion.repository import completion_repository
from app.features.enrollments.eligibility import CourseProgress, evaluate_progress
from app.features.enrollments.repository import enrollment_repository
from app.features.grading.scoring import GradeSummary
from app.features.grading.service import grading_service
from app.features.lessons.assessment import final_exam_lesson_ids
from app.features.lessons.repository import lesson_repository
from app.features.submissions.repository import (
    project_submission_repository,
    quiz_submission_repository,
)

logger = logging.getLogger("enrollments")


class EnrollmentService:

    async def course_progress(self, user_id: str, course_id: str) -> Tuple[GradeSummary, CourseProgress]:
        enrollment = await enrollment_repository.get(user_id, course_id)
        lessons = await lesson_repository.list_published_for_courses([course_id])
        completions = await completion_repository.list_for_courses(user_id, [course_id])
        pending = await quiz_submission_repository.list_pending_for_courses(user_id, [course_id])
        pending += await project_submission_repository.list_pending_for_courses(user_id, [course_id])
        grades = await grading_service.compute_course_grade_summary(user_id, course_id)
        progress = evaluate_progress(
            [l["id"] for l in lessons],
            [c["lesson_id"] for c in completions],
            [p["lesson_id"] for p in pending],
            grades,
            (enrollment or {}).get("is_passed"),
        )
        return grades, progress

    async def complete_course(self, user_id: str, course_id: str) -> Dict[str, Any]:
        """Record completion, final score and pass verdict once the gate opens.

        Not eligible means nothing is written; an in-progress learner never
        gets a premature failing verdict.
        """
        enrollment = await enrollment_repository.get(user_id, course_id)
        if not enrollment:
            raise NotFoundError("enrollment_not_found")
        grades, progress = await self.course_progress(user_id, course_id)
        if not progress.eligible_to_complete:
            raise ValidationError("course_not_eligible_for_completion")

        fields = {
            "is_completed": True,
            "completed_at": now_iso(),
            "final_score_100": grades.final_score_100,
            "is_passed": grades.passed,
        }
        rows = await enrollment_repository.update(user_id, course_id, fields)
        logger.info(
            "course_completed user_id=%s course_id=%s final_score_100=%.2f is_passed=%s",
            user_id,
            course_id,
            grades.final_score_100,
            grades.passed,
        )
        return rows[0] if rows else {**enrollment, **fields}

    async def retake_final_exam(self, user_id: str, course_id: str) -> Dict[str, Any]:
        """Wipe the user's final exam attempt so it can be taken again.

        Touches only final-exam lessons of this course plus the enrollment's
        completion fields. Repeating it is harmless.
        """
        lessons = await lesson_repository.list_course_lessons(course_id, published_only=False)
        exam_ids = final_exam_lesson_ids(lessons)
        if not exam_ids:
            raise ValidationError("Final exam not found for this course")

        await quiz_submission_repository.delete_for_lessons(user_id, course_id, exam_ids)
        await completion_repository.delete_for_lessons(user_id, course_id, exam_ids)
        await enrollment_repository.update(
            user_id,
            course_id,
            {
                "is_completed": False,
                "completed_at": None,
                "final_score_100": None,
                "is_passed": None,
            },
        )
        logger.info("final_exam_reset user_id=%s course_id=%s lessons=%d", user_id, course_id, len(exam_ids))
        return {"ok": True, "final_exam_lessons": len(exam_ids)}


enrollment_service = EnrollmentService()

__all__ = ["enrollment_service", "EnrollmentService"]
