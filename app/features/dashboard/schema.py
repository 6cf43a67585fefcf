from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from app.features.grading.schemas import GradeSummaryOut


class DashboardCourseOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enrollment: Dict[str, Any]
    progress: int
    grades: GradeSummaryOut
    eligible_to_complete: bool = Field(alias="eligibleToComplete")
    passed: bool


class StudentDashboardOut(BaseModel):
    courses: List[DashboardCourseOut] = []
