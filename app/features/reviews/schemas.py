from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProjectReviewRequest(BaseModel):
    # validated in the service so a bad value is a 400, not a 422
    status: Optional[str] = None
    feedback: Optional[Any] = None


class QuizGradeRequest(BaseModel):
    # [{question_index, awarded_marks}, ...]
    free_text_grades: Optional[Any] = None


class ReviewedSubmissionOut(BaseModel):
    id: str
    status: str
    feedback: Optional[str] = None
    score: Optional[float] = None
    total: Optional[float] = None
    reviewed_at: Optional[str] = None


class ReviewEnvelope(BaseModel):
    submission: ReviewedSubmissionOut


class SubmissionListOut(BaseModel):
    submissions: List[Dict[str, Any]] = Field(default_factory=list)


class SubmissionDetailOut(BaseModel):
    submission: Dict[str, Any]
    lesson: Optional[Dict[str, Any]] = None
    student: Optional[Dict[str, Any]] = None
    questions: Optional[List[Dict[str, Any]]] = None
