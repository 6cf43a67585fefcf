"""Admin review workflow.

Project submissions move ``pending_review -> approved | rejected``; quiz
submissions with free text move ``pending_review -> graded`` once a reviewer
enters marks. Both transitions are terminal: a decided submission can only
re-enter review through a learner resubmission or a final exam retake.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from app.common.errors import NotFoundError, ValidationError
from app.common.utils import now_iso
from app.features.completion.repository import completion_repository
from app.features.lessons.assessment import assessment_type, quiz_questions
from app.features.lessons.models import AssessmentType
from app.features.lessons.repository import lesson_repository
from app.features.notifications.service import notification_service
from app.features.reviews.repository import review_repository
from app.features.submissions import grading
from app.features.submissions.models import ProjectSubmissionStatus, QuizSubmissionStatus
from app.features.submissions.repository import (
    project_submission_repository,
    quiz_submission_repository,
)

logger = logging.getLogger("reviews")

REVIEW_DECISIONS = {ProjectSubmissionStatus.approved.value, ProjectSubmissionStatus.rejected.value}


def _format_marks(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


class ReviewService:

    async def review_project_submission(
        self,
        submission_id: str,
        decision: Optional[str],
        feedback: Any,
        reviewer_id: str,
    ) -> Dict[str, Any]:
        if decision not in REVIEW_DECISIONS:
            raise ValidationError("status must be approved or rejected")

        existing = await project_submission_repository.get_by_id(submission_id)
        if not existing:
            raise NotFoundError("submission_not_found")
        if existing.get("status") != ProjectSubmissionStatus.pending_review.value:
            raise ValidationError("submission_already_reviewed")

        next_feedback = feedback if isinstance(feedback, str) else None
        reviewed_at = now_iso()
        row = await project_submission_repository.transition(
            submission_id,
            ProjectSubmissionStatus.pending_review.value,
            {
                "status": decision,
                "feedback": next_feedback,
                "reviewer_id": reviewer_id,
                "reviewed_at": reviewed_at,
                "updated_at": reviewed_at,
            },
        )
        if row is None:
            raise ValidationError("submission_already_reviewed")
        logger.info(
            "project_reviewed submission_id=%s decision=%s reviewer_id=%s",
            submission_id,
            decision,
            reviewer_id,
        )

        # a rejection leaves the ledger alone
        if decision == ProjectSubmissionStatus.approved.value:
            await completion_repository.mark_completed(
                str(existing["user_id"]), str(existing["lesson_id"]), str(existing["course_id"])
            )

        notification_service.schedule_review_decision(
            existing, "project", decision=decision, feedback=next_feedback
        )
        return row

    async def grade_quiz_submission(
        self,
        submission_id: str,
        free_text_grades: Any,
        reviewer_id: str,
    ) -> Dict[str, Any]:
        grades = grading.parse_free_text_grades(free_text_grades)

        submission = await quiz_submission_repository.get_by_id(submission_id)
        if not submission:
            raise NotFoundError("submission_not_found")
        if submission.get("status") != QuizSubmissionStatus.pending_review.value:
            raise ValidationError("submission_already_reviewed")

        lesson = await lesson_repository.get_lesson(str(submission["lesson_id"]))
        if not lesson:
            raise NotFoundError("lesson_not_found")

        reviewed_at = now_iso()
        answers = submission.get("answers") if isinstance(submission.get("answers"), list) else []
        next_answers, earned, possible = grading.apply_review_marks(
            quiz_questions(lesson), answers, grades, reviewer_id, reviewed_at
        )

        row = await quiz_submission_repository.transition(
            submission_id,
            QuizSubmissionStatus.pending_review.value,
            {
                "status": QuizSubmissionStatus.graded.value,
                "score": earned,
                "total": possible,
                "answers": next_answers,
                # reviewed quizzes gate completion only; no pass verdict of their own
                "is_passed": None,
                "reviewer_id": reviewer_id,
                "reviewed_at": reviewed_at,
                "updated_at": reviewed_at,
            },
        )
        if row is None:
            raise ValidationError("submission_already_reviewed")
        logger.info(
            "quiz_graded submission_id=%s score=%s total=%s reviewer_id=%s",
            submission_id,
            earned,
            possible,
            reviewer_id,
        )

        await completion_repository.mark_completed(
            str(submission["user_id"]), str(submission["lesson_id"]), str(submission["course_id"])
        )

        notification_service.schedule_review_decision(
            submission, "quiz", score_line=f"Score: {_format_marks(earned)} / {_format_marks(possible)}"
        )
        return row

    async def _decorate(self, submissions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        user_ids = sorted({str(s["user_id"]) for s in submissions if s.get("user_id")})
        lesson_ids = sorted({str(s["lesson_id"]) for s in submissions if s.get("lesson_id")})
        profiles = await review_repository.list_profiles(user_ids)
        lessons = await lesson_repository.list_by_ids(lesson_ids, columns="id,title")
        profile_by_id = {str(p.get("id")): p for p in profiles}
        lesson_by_id = {str(l.get("id")): l for l in lessons}
        return [
            {
                **s,
                "student": profile_by_id.get(str(s.get("user_id"))),
                "lesson": lesson_by_id.get(str(s.get("lesson_id"))),
            }
            for s in submissions
        ]

    async def list_project_submissions(self, status: str = "all", limit: int = 200) -> List[Dict[str, Any]]:
        status = (status or "all").strip()
        rows = await project_submission_repository.list_recent(
            status=None if status == "all" else status, limit=limit
        )
        return await self._decorate(rows)

    async def list_quiz_submissions(self, status: str = "pending_review", limit: int = 200) -> List[Dict[str, Any]]:
        rows = await quiz_submission_repository.list_recent(status=(status or "").strip() or None, limit=limit)
        return await self._decorate(rows)

    async def list_final_exam_submissions(
        self, status: str = "pending_review", limit: int = 200
    ) -> List[Dict[str, Any]]:
        rows = await quiz_submission_repository.list_recent(status=(status or "").strip() or None, limit=limit)
        lesson_ids = sorted({str(r["lesson_id"]) for r in rows if r.get("lesson_id")})
        if not lesson_ids:
            return []
        lessons = await lesson_repository.list_by_ids(lesson_ids, columns="id,content")
        exam_ids = {
            str(l.get("id")) for l in lessons if assessment_type(l) is AssessmentType.final_exam
        }
        return await self._decorate([r for r in rows if str(r.get("lesson_id")) in exam_ids])

    async def get_project_submission_detail(self, submission_id: str) -> Dict[str, Any]:
        submission = await project_submission_repository.get_by_id(submission_id)
        if not submission:
            raise NotFoundError("submission_not_found")
        decorated = (await self._decorate([submission]))[0]
        return {
            "submission": submission,
            "lesson": decorated.get("lesson"),
            "student": decorated.get("student"),
        }

    async def get_quiz_submission_detail(self, submission_id: str) -> Dict[str, Any]:
        submission = await quiz_submission_repository.get_by_id(submission_id)
        if not submission:
            raise NotFoundError("submission_not_found")
        lesson = await lesson_repository.get_lesson(str(submission["lesson_id"]))
        if not lesson:
            raise NotFoundError("lesson_not_found")
        profiles = await review_repository.list_profiles([str(submission["user_id"])])
        return {
            "submission": submission,
            "lesson": {"id": lesson.get("id"), "title": lesson.get("title")},
            "student": profiles[0] if profiles else None,
            "questions": quiz_questions(lesson),
        }


review_service = ReviewService()

__all__ = ["review_service", "ReviewService", "REVIEW_DECISIONS"]
