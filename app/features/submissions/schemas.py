from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


QuestionType = Literal["multiple_choice", "free_text"]


class QuizAnswer(BaseModel):
    """One answer inside a quiz submission, in question order."""

    model_config = ConfigDict(extra="allow")

    question_index: Optional[int] = None
    question_type: QuestionType
    # kept as sent; only an exact index match earns marks
    selected_option: Optional[Any] = None
    answer_text: Optional[Any] = None


class QuizSubmissionRequest(BaseModel):
    course_id: Optional[str] = None
    lesson_id: Optional[str] = None
    answers: Optional[List[Any]] = None
    # client-computed; only trusted for fully multiple-choice quizzes
    score: Optional[Any] = None
    total: Optional[Any] = None
    attachment_urls: Optional[List[Any]] = None


class QuizSubmissionOut(BaseModel):
    id: str
    status: str
    is_passed: Optional[bool] = None
    score: Optional[float] = None
    total: Optional[float] = None
    attachment_urls: List[str] = Field(default_factory=list)
    answers: Optional[List[Dict[str, Any]]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProjectSubmissionRequest(BaseModel):
    course_id: Optional[str] = None
    lesson_id: Optional[str] = None
    submission_text: Optional[Any] = None
    submission_url: Optional[Any] = None
    attachment_urls: Optional[List[Any]] = None


class ProjectSubmissionOut(BaseModel):
    id: str
    status: str
    submission_text: Optional[str] = None
    submission_url: Optional[str] = None
    attachment_urls: List[str] = Field(default_factory=list)
    feedback: Optional[str] = None
    reviewed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class QuizSubmissionEnvelope(BaseModel):
    submission: Optional[QuizSubmissionOut] = None


class ProjectSubmissionEnvelope(BaseModel):
    submission: Optional[ProjectSubmissionOut] = None


__all__ = [
    "QuizAnswer",
    "QuizSubmissionRequest",
    "QuizSubmissionOut",
    "QuizSubmissionEnvelope",
    "ProjectSubmissionRequest",
    "ProjectSubmissionOut",
    "ProjectSubmissionEnvelope",
]
