from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from app.features.grading.schemas import GradeSummaryOut


class EnrollmentOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: str
    course_id: str
    is_completed: Optional[bool] = None
    completed_at: Optional[str] = None
    final_score_100: Optional[float] = None
    is_passed: Optional[bool] = None


class CompleteCourseOut(BaseModel):
    enrollment: EnrollmentOut
    grades: GradeSummaryOut


class RetakeFinalExamOut(BaseModel):
    ok: bool
    final_exam_lessons: int


class CourseGradesOut(BaseModel):
    grades: GradeSummaryOut
    progress: int
    all_lessons_completed: bool
    eligible_to_complete: bool
    passed: bool

    @classmethod
    def from_parts(cls, grades: Any, progress: Any) -> "CourseGradesOut":
        data: Dict[str, Any] = {
            "grades": GradeSummaryOut.model_validate(grades),
            "progress": progress.progress,
            "all_lessons_completed": progress.all_lessons_completed,
            "eligible_to_complete": progress.eligible_to_complete,
            "passed": progress.passed,
        }
        return cls(**data)
