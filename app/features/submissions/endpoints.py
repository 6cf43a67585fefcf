# app/features/submissions/endpoints.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import StorageError, ValidationError, to_http_exception
from app.features.submissions.schemas import (
    ProjectSubmissionEnvelope,
    ProjectSubmissionRequest,
    QuizSubmissionEnvelope,
    QuizSubmissionRequest,
)
from app.features.submissions.service import submissions_service

quiz_router = APIRouter(prefix="/quiz-submissions", tags=["submissions"])
project_router = APIRouter(prefix="/project-submissions", tags=["submissions"])


@quiz_router.post(
    "",
    response_model=QuizSubmissionEnvelope,
    summary="Submit answers for a quiz lesson",
    description=(
        "Multiple-choice-only submissions are graded immediately and complete the lesson. "
        "Submissions containing free text wait for review. Resubmitting replaces the previous attempt."
    ),
)
async def submit_quiz(
    payload: QuizSubmissionRequest, current_user: CurrentUser = Depends(get_current_user)
) -> QuizSubmissionEnvelope:
    try:
        row = await submissions_service.submit_quiz(current_user.id, payload)
    except (ValidationError, StorageError) as exc:
        raise to_http_exception(exc)
    return QuizSubmissionEnvelope(submission=row)


@quiz_router.get("", response_model=QuizSubmissionEnvelope, summary="Current user's submission for a quiz lesson")
async def get_quiz_submission(
    lesson_id: Optional[str] = Query(default=None),
    current_user: CurrentUser = Depends(get_current_user),
) -> QuizSubmissionEnvelope:
    try:
        row = await submissions_service.get_quiz_submission(current_user.id, lesson_id)
    except (ValidationError, StorageError) as exc:
        raise to_http_exception(exc)
    return QuizSubmissionEnvelope(submission=row)


@project_router.post("", response_model=ProjectSubmissionEnvelope, summary="Submit work for a project lesson")
async def submit_project(
    payload: ProjectSubmissionRequest, current_user: CurrentUser = Depends(get_current_user)
) -> ProjectSubmissionEnvelope:
    try:
        row = await submissions_service.submit_project(current_user.id, payload)
    except (ValidationError, StorageError) as exc:
        raise to_http_exception(exc)
    return ProjectSubmissionEnvelope(submission=row)


@project_router.get("", response_model=ProjectSubmissionEnvelope, summary="Current user's submission for a project lesson")
async def get_project_submission(
    lesson_id: Optional[str] = Query(default=None),
    current_user: CurrentUser = Depends(get_current_user),
) -> ProjectSubmissionEnvelope:
    try:
        row = await submissions_service.get_project_submission(current_user.id, lesson_id)
    except (ValidationError, StorageError) as exc:
        raise to_http_exception(exc)
    return ProjectSubmissionEnvelope(submission=row)
