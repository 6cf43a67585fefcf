from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.common.errors import ValidationError
from app.common.utils import clean_text, is_number, normalize_urls, now_iso
from app.features.completion.repository import completion_repository
from app.features.submissions import grading
from app.features.submissions.models import ProjectSubmissionStatus
from app.features.submissions.repository import (
    project_submission_repository,
    quiz_submission_repository,
)
from app.features.submissions.schemas import ProjectSubmissionRequest, QuizSubmissionRequest

logger = logging.getLogger("submissions")


class SubmissionsService:
    """Learner-facing writes and reads for quiz and project submissions."""

    async def submit_quiz(self, user_id: str, payload: QuizSubmissionRequest) -> Dict[str, Any]:
        """Store a quiz attempt, grade it when possible and complete the lesson.

        Validation happens before any write; a resubmission replaces the
        previous row for the same (user, lesson).
        """
        if not payload.course_id or not payload.lesson_id or payload.answers is None:
            raise ValidationError("course_id, lesson_id, and answers are required")
        answers = grading.parse_answers(payload.answers)
        verdict = grading.classify(answers, payload.score, payload.total)

        row = await quiz_submission_repository.upsert(
            {
                "user_id": user_id,
                "course_id": payload.course_id,
                "lesson_id": payload.lesson_id,
                "answers": [grading.stored_answer(a) for a in answers],
                "attachment_urls": normalize_urls(payload.attachment_urls),
                "score": payload.score if is_number(payload.score) else None,
                "total": payload.total if is_number(payload.total) else None,
                "status": verdict.status.value,
                "is_passed": verdict.is_passed,
                "updated_at": now_iso(),
            }
        )
        logger.info(
            "quiz_submitted user_id=%s lesson_id=%s status=%s is_passed=%s",
            user_id,
            payload.lesson_id,
            verdict.status.value,
            verdict.is_passed,
        )

        if verdict.completes_lesson:
            await completion_repository.mark_completed(user_id, payload.lesson_id, payload.course_id)
        return row

    async def get_quiz_submission(self, user_id: str, lesson_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not lesson_id:
            raise ValidationError("lesson_id is required")
        return await quiz_submission_repository.get_for_user_lesson(user_id, lesson_id)

    async def submit_project(self, user_id: str, payload: ProjectSubmissionRequest) -> Dict[str, Any]:
        if not payload.course_id or not payload.lesson_id:
            raise ValidationError("course_id and lesson_id are required")
        text = clean_text(payload.submission_text)
        url = clean_text(payload.submission_url)
        if not text and not url:
            raise ValidationError("Provide submission_text or submission_url")

        row = await project_submission_repository.upsert(
            {
                "user_id": user_id,
                "course_id": payload.course_id,
                "lesson_id": payload.lesson_id,
                "submission_text": text or None,
                "submission_url": url or None,
                "attachment_urls": normalize_urls(payload.attachment_urls),
                # a resubmission goes back into the review queue
                "status": ProjectSubmissionStatus.pending_review.value,
                "feedback": None,
                "reviewer_id": None,
                "reviewed_at": None,
                "updated_at": now_iso(),
            }
        )
        logger.info("project_submitted user_id=%s lesson_id=%s", user_id, payload.lesson_id)
        return row

    async def get_project_submission(self, user_id: str, lesson_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not lesson_id:
            raise ValidationError("lesson_id is required")
        return await project_submission_repository.get_for_user_lesson(user_id, lesson_id)


submissions_service = SubmissionsService()

__all__ = ["submissions_service", "SubmissionsService"]
