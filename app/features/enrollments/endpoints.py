# app/features/enrollments/endpoints.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import NotFoundError, StorageError, ValidationError, to_http_exception
from app.features.enrollments.schemas import CompleteCourseOut, CourseGradesOut, RetakeFinalExamOut
from app.features.enrollments.service import enrollment_service
from app.features.grading.schemas import GradeSummaryOut
from app.features.grading.service import grading_service

router = APIRouter(prefix="/courses", tags=["enrollments"])

_ERRORS = (ValidationError, NotFoundError, StorageError)


@router.post(
    "/{course_id}/retake-final-exam",
    response_model=RetakeFinalExamOut,
    summary="Discard the current user's final exam attempt",
    description="Deletes final exam submissions and completions, then clears the enrollment's completion fields.",
)
async def retake_final_exam(course_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await enrollment_service.retake_final_exam(current_user.id, course_id)
    except _ERRORS as exc:
        raise to_http_exception(exc)


@router.post("/{course_id}/complete", response_model=CompleteCourseOut, summary="Mark the course completed")
async def complete_course(course_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        enrollment = await enrollment_service.complete_course(current_user.id, course_id)
        grades = await grading_service.compute_course_grade_summary(current_user.id, course_id)
    except _ERRORS as exc:
        raise to_http_exception(exc)
    return CompleteCourseOut(enrollment=enrollment, grades=GradeSummaryOut.model_validate(grades))


@router.get("/{course_id}/grades", response_model=CourseGradesOut)
async def get_course_grades(course_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        grades, progress = await enrollment_service.course_progress(current_user.id, course_id)
    except _ERRORS as exc:
        raise to_http_exception(exc)
    return CourseGradesOut.from_parts(grades, progress)
