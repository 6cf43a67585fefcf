"""Admin review queue and decisions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.common.deps import CurrentUser, require_admin
from app.common.errors import NotFoundError, StorageError, ValidationError, to_http_exception
from app.features.reviews.schemas import (
    ProjectReviewRequest,
    QuizGradeRequest,
    ReviewEnvelope,
    SubmissionDetailOut,
    SubmissionListOut,
)
from app.features.reviews.service import review_service

router = APIRouter(prefix="/admin", tags=["reviews"])

_REVIEW_ERRORS = (ValidationError, NotFoundError, StorageError)


@router.get("/project-submissions", response_model=SubmissionListOut)
async def list_project_submissions(
    status: str = Query(default="all"),
    limit: int = Query(default=200, ge=1, le=1000),
    admin: CurrentUser = Depends(require_admin()),
) -> SubmissionListOut:
    try:
        rows = await review_service.list_project_submissions(status, limit)
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)
    return SubmissionListOut(submissions=rows)


@router.get("/project-submissions/{submission_id}", response_model=SubmissionDetailOut)
async def get_project_submission(
    submission_id: str, admin: CurrentUser = Depends(require_admin())
) -> SubmissionDetailOut:
    try:
        return SubmissionDetailOut(**await review_service.get_project_submission_detail(submission_id))
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)


@router.patch(
    "/project-submissions/{submission_id}",
    response_model=ReviewEnvelope,
    summary="Approve or reject a pending project submission",
    description="Approval completes the lesson. The learner is emailed on a best-effort basis.",
)
async def review_project_submission(
    submission_id: str,
    payload: ProjectReviewRequest,
    admin: CurrentUser = Depends(require_admin()),
) -> ReviewEnvelope:
    try:
        row = await review_service.review_project_submission(
            submission_id, payload.status, payload.feedback, admin.id
        )
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)
    return ReviewEnvelope(submission=row)


@router.get("/quiz-submissions", response_model=SubmissionListOut)
async def list_quiz_submissions(
    status: str = Query(default="pending_review"),
    limit: int = Query(default=200, ge=1, le=1000),
    admin: CurrentUser = Depends(require_admin()),
) -> SubmissionListOut:
    try:
        rows = await review_service.list_quiz_submissions(status, limit)
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)
    return SubmissionListOut(submissions=rows)


@router.get("/quiz-submissions/{submission_id}", response_model=SubmissionDetailOut)
async def get_quiz_submission(
    submission_id: str, admin: CurrentUser = Depends(require_admin())
) -> SubmissionDetailOut:
    try:
        return SubmissionDetailOut(**await review_service.get_quiz_submission_detail(submission_id))
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)


@router.patch(
    "/quiz-submissions/{submission_id}",
    response_model=ReviewEnvelope,
    summary="Enter marks for the free-text answers of a pending quiz submission",
)
async def grade_quiz_submission(
    submission_id: str,
    payload: QuizGradeRequest,
    admin: CurrentUser = Depends(require_admin()),
) -> ReviewEnvelope:
    try:
        row = await review_service.grade_quiz_submission(submission_id, payload.free_text_grades, admin.id)
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)
    return ReviewEnvelope(submission=row)


@router.get("/final-exam-submissions", response_model=SubmissionListOut)
async def list_final_exam_submissions(
    status: str = Query(default="pending_review"),
    limit: int = Query(default=200, ge=1, le=1000),
    admin: CurrentUser = Depends(require_admin()),
) -> SubmissionListOut:
    try:
        rows = await review_service.list_final_exam_submissions(status, limit)
    except _REVIEW_ERRORS as exc:
        raise to_http_exception(exc)
    return SubmissionListOut(submissions=rows)
