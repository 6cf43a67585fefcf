from __future__ import annotations

import logging
from typing import Any, Dict, List

from app.features.completion.repository import completion_repository
from app.features.enrollments.eligibility import evaluate_progress
from app.features.enrollments.repository import enrollment_repository
from app.features.grading.scoring import summarize
from app.features.grading.service import grading_service
from app.features.lessons.repository import lesson_repository
from app.features.submissions.repository import (
    project_submission_repository,
    quiz_submission_repository,
)

logger = logging.getLogger("dashboard")


def _group(rows: List[Dict[str, Any]], key: str = "course_id") -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for row in rows:
        grouped.setdefault(str(row.get(key)), []).append(str(row.get("lesson_id", row.get("id"))))
    return grouped


class DashboardService:
    async def get_student_dashboard(self, user_id: str) -> List[Dict[str, Any]]:
        """One entry per enrollment, newest first, with progress and grades."""
        enrollments = await enrollment_repository.list_for_user(user_id)
        course_ids = [str(e["course_id"]) for e in enrollments if e.get("course_id")]
        if not course_ids:
            return []

        lessons = await lesson_repository.list_published_for_courses(course_ids)
        completions = await completion_repository.list_for_courses(user_id, course_ids)
        pending = await quiz_submission_repository.list_pending_for_courses(user_id, course_ids)
        pending += await project_submission_repository.list_pending_for_courses(user_id, course_ids)

        lessons_by_course: Dict[str, List[str]] = {}
        for lesson in lessons:
            lessons_by_course.setdefault(str(lesson.get("course_id")), []).append(str(lesson.get("id")))
        completed_by_course = _group(completions)
        pending_by_course = _group(pending)

        courses: List[Dict[str, Any]] = []
        for enrollment in enrollments:
            course_id = str(enrollment.get("course_id"))
            grades = await grading_service.compute_course_grade_summary(user_id, course_id)
            progress = evaluate_progress(
                lessons_by_course.get(course_id, []),
                completed_by_course.get(course_id, []),
                pending_by_course.get(course_id, []),
                grades,
                enrollment.get("is_passed"),
            )
            courses.append(
                {
                    "enrollment": enrollment,
                    "progress": progress.progress,
                    "grades": summarize(grades),
                    "eligibleToComplete": progress.eligible_to_complete,
                    "passed": progress.passed,
                }
            )
        logger.debug("dashboard user_id=%s courses=%d", user_id, len(courses))
        return courses


dashboard_service = DashboardService()
